"""Docblock model: parsing, serialization and the tag factory."""

from .parser import DocBlock, parse_doc_block, serialize_doc_block
from .tags import Tag, create_tag

__all__ = [
    "DocBlock",
    "Tag",
    "create_tag",
    "parse_doc_block",
    "serialize_doc_block",
]
