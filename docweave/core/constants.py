"""Shared constants for docweave.

Imports nothing from the rest of the package: configuration and the
generator modules both depend on it.
"""

from enum import Enum

# =============================================================================
# Member visibility
# =============================================================================


class Visibility(str, Enum):
    """Access level of a member physically added to the class body."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


# =============================================================================
# Docblock tags
# =============================================================================

PROPERTY_TAGS = frozenset({"property", "property-read", "property-write"})
METHOD_TAG = "method"

# Rank order of the tags that are interleaved with each other when sorting
TAG_SORT_ORDER = ["", "method", "property-write", "property-read", "property"]

# Rendered when a method tag has no return type, as phpDocumentor does
DEFAULT_RETURN_TYPE = "void"


# =============================================================================
# Source files
# =============================================================================

# Bytes that are not valid UTF-8 round-trip unchanged through read and write
SOURCE_ENCODING = "utf-8"
SOURCE_ENCODING_ERRORS = "surrogateescape"
