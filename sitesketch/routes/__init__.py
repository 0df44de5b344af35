"""HTTP routes."""
from sitesketch.routes.api import router

__all__ = ["router"]
