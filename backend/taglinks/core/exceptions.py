"""Repository error types."""


class RepositoryError(Exception):
    """Raised when the database could not execute a read or a write.

    The underlying SQLAlchemy error is kept as ``__cause__``.
    """
