class StorageError(Exception):
    """Raised when focus records or session state cannot be read or written."""
