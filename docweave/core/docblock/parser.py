"""Docblock parsing and serialization.

A docblock is held as summary, description and an ordered tag list.
``parse_doc_block`` and ``serialize_doc_block`` are inverse up to
normalization: a block produced by the serializer parses back to the same
DocBlock.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from ..errors import MalformedDocBlockError
from .tags import Tag, create_tag

logger = logging.getLogger(__name__)


@dataclass
class DocBlock:
    """Structured content of a ``/** ... */`` comment."""

    summary: str = ""
    description: str = ""
    tags: List[Tag] = field(default_factory=list)


def parse_doc_block(text: str) -> DocBlock:
    """Parse a raw ``/** ... */`` comment.

    Args:
        text: Raw docblock source, delimiters included

    Returns:
        DocBlock with summary, description and tags

    Raises:
        MalformedDocBlockError: If the text is not a docblock or a tag
            line cannot be read
    """
    stripped = text.strip()
    if not stripped.startswith("/**") or not stripped.endswith("*/") or len(stripped) < 5:
        raise MalformedDocBlockError(f"Not a docblock: {text[:40]!r}")

    lines = _strip_comment_markers(stripped[3:-2])

    # Split the free text from the tag section at the first tag line
    text_lines: List[str] = []
    tag_sources: List[List[str]] = []
    for line in lines:
        if line.lstrip().startswith("@"):
            tag_sources.append([line.strip()])
        elif tag_sources:
            tag_sources[-1].append(line.strip())
        else:
            text_lines.append(line)

    summary_lines: List[str] = []
    rest = list(text_lines)
    while rest and not rest[0]:
        rest.pop(0)
    while rest and rest[0]:
        summary_lines.append(rest.pop(0))

    tags = []
    for source in tag_sources:
        try:
            tags.append(create_tag("\n".join(source).rstrip()))
        except ValueError as e:
            raise MalformedDocBlockError(str(e)) from e

    return DocBlock(
        summary="\n".join(summary_lines),
        description="\n".join(rest).strip("\n"),
        tags=tags,
    )


def serialize_doc_block(doc_block: DocBlock, newline: str = "\n") -> str:
    """Render a DocBlock as a ``/** ... */`` comment.

    Summary, description and tags are separated by a bare ``*`` line.
    """
    sections: List[List[str]] = []
    if doc_block.summary:
        sections.append(doc_block.summary.split("\n"))
    if doc_block.description:
        sections.append(doc_block.description.split("\n"))
    if doc_block.tags:
        tag_lines: List[str] = []
        for tag in doc_block.tags:
            tag_lines.extend(tag.render().split("\n"))
        sections.append(tag_lines)

    body: List[str] = []
    for i, section in enumerate(sections):
        if i:
            body.append("")
        body.extend(section)

    lines = ["/**"]
    lines.extend(f" * {line}".rstrip() if line else " *" for line in body)
    lines.append(" */")
    return newline.join(lines)


def _strip_comment_markers(content: str) -> List[str]:
    """Remove the leading ``*`` of each comment line."""
    lines = []
    for raw in content.replace("\r\n", "\n").split("\n"):
        line = raw.strip()
        if line.startswith("* "):
            line = line[2:]
        elif line.startswith("*"):
            line = line[1:]
        lines.append(line.rstrip())

    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return lines
