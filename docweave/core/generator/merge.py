"""Merge engine: combines the existing docblock with pending virtual members.

Pipeline for one class:
    parse existing block -> drop reset/overwritten tags -> render pending
    entries not already represented or declared -> sort -> serialize
"""

import logging
from typing import List, Optional, Set

from ..ast_parser.models import ClassReflection
from ..docblock.parser import DocBlock, parse_doc_block, serialize_doc_block
from ..docblock.tags import Tag
from ..errors import MalformedDocBlockError
from .registry import EntryRegistry
from .renderer import render_method_tag, render_property_tag
from .sorter import sort_tags

logger = logging.getLogger(__name__)


def default_summary(class_name: str) -> str:
    return f"Class {class_name}"


def load_doc_block(doc_comment: Optional[str], class_name: str) -> DocBlock:
    """Parse the class's current docblock, falling back to an empty one.

    A malformed block never aborts the run: it is replaced by a block
    holding only the default summary.
    """
    if doc_comment:
        try:
            return parse_doc_block(doc_comment)
        except MalformedDocBlockError as e:
            logger.debug(f"Ignoring malformed docblock of {class_name}: {e}")
    return DocBlock(summary=default_summary(class_name))


def merge_tags(
    existing: List[Tag],
    registry: EntryRegistry,
    declared_properties: Set[str],
    declared_methods: Set[str],
    reset: bool = False,
    overwrite: bool = False,
) -> List[Tag]:
    """Merge existing tags with the registry's virtual members.

    Args:
        existing: Tags parsed from the current docblock, in order
        registry: Pending virtual members
        declared_properties: Property names the class declares
        declared_methods: Method names the class declares, lowercased
        reset: Drop every existing property/method tag
        overwrite: Drop existing tags superseded by a pending entry

    Returns:
        Unsorted merged tag list
    """
    pending_methods = {name.lower() for name in registry.virtual_methods}
    represented_properties: Set[str] = set()
    represented_methods: Set[str] = set()
    tags: List[Tag] = []

    for tag in existing:
        if tag.is_property:
            if reset or (overwrite and tag.variable_name in registry.virtual_properties):
                continue
            represented_properties.add(tag.variable_name)
        elif tag.is_method:
            method_name = tag.method_name.lower()
            if reset or (overwrite and method_name in pending_methods):
                continue
            represented_methods.add(method_name)
        tags.append(tag)

    for name, prop in registry.virtual_properties.items():
        if name in represented_properties or name in declared_properties:
            continue
        tags.append(render_property_tag(prop))

    for name, method in registry.virtual_methods.items():
        if name.lower() in represented_methods or name.lower() in declared_methods:
            continue
        tags.append(render_method_tag(method))

    return tags


def build_doc_comment(
    reflection: ClassReflection,
    registry: EntryRegistry,
    reset: bool = False,
    overwrite: bool = False,
    newline: str = "\n",
) -> str:
    """Produce the new docblock text for a reflected class."""
    doc_block = load_doc_block(reflection.doc_comment, reflection.name)
    tags = merge_tags(
        doc_block.tags,
        registry,
        declared_properties=set(reflection.property_names),
        declared_methods={name.lower() for name in reflection.method_names},
        reset=reset,
        overwrite=overwrite,
    )
    doc_block.tags = sort_tags(tags)
    return serialize_doc_block(doc_block, newline=newline)
