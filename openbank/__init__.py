"""Open banking mock API: persona-scoped accounts and transactions behind a link flow."""

__version__ = "0.1.0"
