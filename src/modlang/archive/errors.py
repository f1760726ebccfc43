"""Archive reader errors."""


class ArchiveError(Exception):
    """Raised when an archive cannot be opened or one of its entries cannot be read."""
