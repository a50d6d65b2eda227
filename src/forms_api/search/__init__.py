"""Full-text search over insurance forms backed by SQLite FTS5."""

from forms_api.search.index import FormSearchIndex, SearchIndex

__all__ = [
    "FormSearchIndex",
    "SearchIndex",
]
