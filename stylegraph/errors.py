"""Exception hierarchy for stylegraph.

Malformed design input never raises; extractors degrade to defaults instead.
The classes here cover programmer-visible contract violations only.
"""

from typing import Optional


class StyleGraphError(Exception):
    """Base class for all stylegraph errors."""


class InvalidCategoryError(StyleGraphError, ValueError):
    """Raised when a submission names a category the registry does not know."""

    def __init__(self, category: object) -> None:
        self.category = category
        super().__init__(f"Unknown token category: {category!r}")


class DuplicateTokenError(StyleGraphError):
    """Raised when a token would break exact-hash uniqueness in the registry."""

    def __init__(self, token_id: str, existing_id: str) -> None:
        self.token_id = token_id
        self.existing_id = existing_id
        super().__init__(
            f"Token {token_id} duplicates the properties of existing token {existing_id}"
        )


class PreconditionError(StyleGraphError):
    """Raised when an operation is invoked on input it cannot accept."""


class NotAComponentSetError(PreconditionError):
    """Raised when variant analysis is requested for a non COMPONENT_SET node."""

    def __init__(self, node_id: str, node_type: Optional[str]) -> None:
        self.node_id = node_id
        self.node_type = node_type
        super().__init__(f"Node {node_id} is not a COMPONENT_SET (got {node_type or 'unknown'})")


class ConfigError(StyleGraphError):
    """Raised when the configuration file or environment overrides are invalid."""

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"Invalid configuration from {source}: {detail}")
