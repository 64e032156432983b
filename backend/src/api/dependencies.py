"""FastAPI dependencies for injection."""
from core.config import get_settings
from core.element_cache import ElementCache, get_element_cache
from db.session import get_async_session


def get_current_element_cache() -> ElementCache | None:
    """Return the element cache configured at startup (None when not set up)."""
    return get_element_cache()


__all__ = [
    "get_async_session",
    "get_current_element_cache",
    "get_settings",
]
