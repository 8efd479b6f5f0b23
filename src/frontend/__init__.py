"""Flask frontend: serves the search page, the index and suggestion fragments."""
from .web import app, main, build_page

__all__ = ["app", "main", "build_page"]
