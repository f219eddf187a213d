from second_brain.routes.auth.routes import router

__all__ = ["router"]
