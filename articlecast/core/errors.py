"""Custom exceptions for Articlecast.

Every error carries a context chain. Callers that re-raise prepend where the
failure passed through, so the CLI can print a single line such as::

    scan(articles): add_episode(a.txt): summary: no choices in response
"""


class ArticlecastError(Exception):
    """Base exception for all Articlecast errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def add_context(self, context: str) -> "ArticlecastError":
        """Prepend a call site to the error chain and return the same error."""
        self.context.insert(0, context)
        return self

    def __str__(self) -> str:
        return ": ".join([*self.context, self.message])


class InvalidArgumentError(ArticlecastError, ValueError):
    """Bad usage, missing credentials, invalid configuration or budget."""

    pass


class InputTooLongError(ArticlecastError):
    """A single sentence does not fit in the chunk budget."""

    def __init__(self, size: int, max_bytes: int) -> None:
        super().__init__(f"sentence too long: {size} bytes (max {max_bytes})")
        self.size = size
        self.max_bytes = max_bytes


class StorageError(ArticlecastError):
    """Filesystem read, write or stat failures."""

    pass


class RemoteError(ArticlecastError):
    """Failures talking to the remote text, image or speech service."""

    pass


class CanceledError(ArticlecastError):
    """The run was interrupted before it could finish."""

    pass
