"""Tests for the client state container and its reducer."""

import pytest

from second_brain.client.store import Action, ActionType, ActiveFilters, ContentState, reduce

TEXT = {"_id": "c1", "title": "Notes on tagging", "type": "text", "tags": ["t1"]}
LINK = {"_id": "c2", "title": "FastAPI", "type": "link", "link": "https://fastapi.tiangolo.com", "tags": []}
VIDEO = {"_id": "c3", "title": "Talk", "type": "video", "link": "https://youtu.be/abc", "tags": ["t1"]}


def act(kind, payload=None):
    return Action(type=kind, payload=payload)


@pytest.fixture
def loaded():
    return reduce(ContentState(), act(ActionType.FETCH_SUCCESS, [TEXT, LINK, VIDEO]))


def test_fetch_lifecycle():
    state = reduce(ContentState(), act(ActionType.FETCH_START))
    assert state.is_loading is True
    assert state.error is None

    failed = reduce(state, act(ActionType.FETCH_FAILURE, "Failed to fetch contents"))
    assert failed.is_loading is False
    assert failed.error == "Failed to fetch contents"

    loaded = reduce(failed, act(ActionType.FETCH_SUCCESS, [TEXT]))
    assert loaded.is_loading is False
    assert loaded.error is None
    assert loaded.contents == loaded.filtered_contents == (TEXT,)


def test_reduce_does_not_mutate_previous_state(loaded):
    before = loaded
    after = reduce(loaded, act(ActionType.FILTER_BY_TYPE, "link"))
    assert before.filters == ActiveFilters()
    assert len(before.filtered_contents) == 3
    assert after is not before


def test_type_filter_then_clear(loaded):
    state = reduce(loaded, act(ActionType.FILTER_BY_TYPE, "link"))
    assert state.filtered_contents == (LINK,)

    cleared = reduce(state, act(ActionType.CLEAR_FILTERS))
    assert cleared.filters.is_neutral
    assert cleared.filtered_contents == (TEXT, LINK, VIDEO)


def test_add_prepends_and_respects_active_filters(loaded):
    state = reduce(loaded, act(ActionType.FILTER_BY_TYPE, "text"))
    new_link = {"_id": "c4", "title": "Another", "type": "link", "tags": []}
    new_text = {"_id": "c5", "title": "Another note", "type": "text", "tags": []}

    state = reduce(state, act(ActionType.ADD_CONTENT_SUCCESS, new_link))
    assert state.contents[0] == new_link
    assert new_link not in state.filtered_contents

    state = reduce(state, act(ActionType.ADD_CONTENT_SUCCESS, new_text))
    assert state.filtered_contents == (new_text, TEXT)


def test_delete_removes_from_contents_and_view(loaded):
    state = reduce(loaded, act(ActionType.FILTER_BY_TAGS, ["t1"]))
    state = reduce(state, act(ActionType.DELETE_CONTENT_SUCCESS, "c3"))
    assert [item["_id"] for item in state.contents] == ["c1", "c2"]
    assert state.filtered_contents == (TEXT,)


def test_delete_unknown_id_changes_nothing(loaded):
    state = reduce(loaded, act(ActionType.DELETE_CONTENT_SUCCESS, "missing"))
    assert state.contents == loaded.contents
    assert state.filtered_contents == loaded.filtered_contents


def test_refetch_reapplies_current_filters(loaded):
    state = reduce(loaded, act(ActionType.SEARCH_CONTENTS, "TALK"))
    assert state.filtered_contents == (VIDEO,)
    refreshed = reduce(state, act(ActionType.FETCH_SUCCESS, [TEXT, LINK]))
    assert refreshed.filtered_contents == ()


def test_tags_actions(loaded):
    state = reduce(loaded, act(ActionType.FETCH_TAGS_SUCCESS, [{"_id": "t1", "title": "ideas"}]))
    state = reduce(state, act(ActionType.ADD_TAG_SUCCESS, {"_id": "t2", "title": "reading"}))
    assert [tag["title"] for tag in state.tags] == ["ideas", "reading"]


def test_apply_filters_is_idempotent(loaded):
    state = reduce(loaded, act(ActionType.FILTER_BY_TAGS, ["t1"]))
    assert reduce(state, act(ActionType.APPLY_FILTERS)) == state


def test_single_tag_id_string_is_not_split_into_characters(loaded):
    state = reduce(loaded, act(ActionType.FILTER_BY_TAGS, "t1"))

    assert state.filters.tag_ids == frozenset({"t1"})
    assert [item["_id"] for item in state.filtered_contents] == ["c1", "c3"]
