"""
Exception types shared across the saffron-mcp service.
"""


class SaffronError(Exception):
    """Base class for errors raised by this package."""


class GraphQLResponseError(SaffronError):
    """Raised when the GraphQL endpoint returns a body that is not a GraphQL response."""


class AuthenticationError(SaffronError):
    """Raised at startup when no usable Saffron session can be established."""


class MalformedDocument(SaffronError, ValueError):
    """Raised when a serialized instructions document does not have the expected shape."""
