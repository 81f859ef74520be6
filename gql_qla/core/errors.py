"""Exception types raised or returned by the GraphQL tooling engine.

Validation helpers return these errors instead of raising them, the same
way graphql-core's ``validate()`` hands back its errors. Transforming
helpers (JSON formatting, schema decoding, fetching) raise them.
"""


class QlaError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class JSONSyntaxError(QlaError):
    """Exception raised for malformed JSON input."""


class BalanceError(QlaError):
    """Unmatched or unterminated brace, parenthesis or string.

    ``position`` is the byte offset of a premature closing token;
    ``open_count`` is the residual depth of an unclosed one.
    """

    def __init__(
        self,
        message: str,
        position: int | None = None,
        open_count: int | None = None,
    ):
        self.position = position
        self.open_count = open_count
        super().__init__(message)


class ValidationError(QlaError):
    """A single, simplified semantic violation."""


class BackendError(QlaError):
    """Raised by a query backend when it rejects a schema or a document."""


class IntrospectionError(QlaError):
    """Exception raised when introspection data cannot be fetched or decoded."""


class ConfigError(QlaError):
    """Exception raised for an unreadable configuration file."""
