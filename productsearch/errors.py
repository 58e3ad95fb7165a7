class SearchError(Exception):
    """Base class for all product search errors."""
    pass


class BackendUnavailable(SearchError):
    """The search backend could not be reached."""
    pass


class InvalidState(SearchError):
    """An operation was attempted on a page that cannot support it."""
    pass


class BulkSaveError(SearchError):
    """A bulk save was rejected or answered inconsistently by the backend."""

    def __init__(self, message: str, positions: list[int] | None = None):
        super().__init__(message)
        self.positions = positions or []
