"""URL shortener service backed by SQLite, with expiring links and click counting."""

__version__ = "0.1.0"

__all__ = ["__version__"]