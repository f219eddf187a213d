"""Tests for the client-side filter/search engine."""

import pytest

from second_brain.client.filters import (
    apply_filters,
    filter_by_search,
    filter_by_tags,
    filter_by_type,
    tag_ids_of,
)
from second_brain.models.content_models import ContentType

CONTENTS = [
    {"_id": "c1", "title": "Abacus history", "body": None, "type": "text", "tags": ["t-math"]},
    {"_id": "c2", "title": "FastAPI docs", "body": "Dependency injection", "type": "link", "tags": ["t-py"]},
    {
        "_id": "c3",
        "title": "Talk",
        "body": "All about the abacus",
        "type": "video",
        "tags": [{"_id": "t-math", "title": "math"}, {"_id": "t-py", "title": "python"}],
    },
    {"_id": "c4", "title": "Untagged thought", "type": "text", "tags": []},
]


def ids(items):
    return [item["_id"] for item in items]


def test_neutral_filters_return_everything_in_order():
    assert apply_filters(CONTENTS) == CONTENTS
    assert apply_filters(CONTENTS, None, set(), "") == CONTENTS


def test_type_filter_keeps_only_matching_type():
    assert ids(filter_by_type(CONTENTS, "link")) == ["c2"]
    assert ids(filter_by_type(CONTENTS, ContentType.TEXT)) == ["c1", "c4"]


def test_tag_filter_accepts_bare_ids_and_expanded_tags():
    assert tag_ids_of(CONTENTS[2]) == {"t-math", "t-py"}
    assert ids(filter_by_tags(CONTENTS, {"t-math"})) == ["c1", "c3"]


def test_tag_filter_uses_or_semantics():
    assert ids(filter_by_tags(CONTENTS, {"t-math", "t-py"})) == ["c1", "c2", "c3"]


@pytest.mark.parametrize("selected", [{"t-math"}, {"t-py"}, {"t-unknown"}])
def test_growing_tag_selection_never_hides_a_match(selected):
    before = set(ids(filter_by_tags(CONTENTS, selected)))
    after = set(ids(filter_by_tags(CONTENTS, selected | {"t-py", "t-other"})))
    assert before <= after


def test_search_is_case_insensitive_substring_over_title_and_body():
    assert ids(filter_by_search(CONTENTS, "ab")) == ["c1", "c3"]
    assert ids(filter_by_search(CONTENTS, "INJECTION")) == ["c2"]
    assert filter_by_search(CONTENTS, "nothing like this") == []


def test_stages_compose_conjunctively():
    result = apply_filters(CONTENTS, content_type="video", tag_ids={"t-math"}, search_query="abacus")
    assert ids(result) == ["c3"]
    assert apply_filters(CONTENTS, content_type="link", tag_ids={"t-math"}) == []


@pytest.mark.parametrize(
    "content_type, tag_ids, query",
    [("text", set(), ""), (None, {"t-py"}, ""), (None, set(), "a"), ("video", {"t-math"}, "talk")],
)
def test_result_is_always_a_subset(content_type, tag_ids, query):
    result = apply_filters(CONTENTS, content_type, tag_ids, query)
    assert all(item in CONTENTS for item in result)
