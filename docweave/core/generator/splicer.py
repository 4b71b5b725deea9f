"""Text splicing of generated blocks into a PHP source document.

All functions here operate on plain strings and return the updated text;
the only I/O is ``write_document``. Insertion points are found by textual
search, so unusual formatting (a ``class Foo`` inside a string literal
before the real declaration, a class whose name extends the searched one)
can mislocate them.
"""

import logging
import re
from typing import Optional, Sequence

from ..constants import SOURCE_ENCODING, SOURCE_ENCODING_ERRORS
from .models import DeclaredMethod, DeclaredProperty
from .renderer import render_method_code, render_property_code

logger = logging.getLogger(__name__)

# From the open tag through the first class header's opening brace
_CLASS_BODY_OPEN = re.compile(r"<\?.*?class\s[a-z0-9_]+.*?\{", re.IGNORECASE | re.DOTALL)


def detect_newline(contents: str) -> str:
    return "\r\n" if "\r\n" in contents else "\n"


def splice_doc_comment(
    contents: str,
    doc_comment: str,
    short_name: str,
    original: Optional[str] = None,
    offset: Optional[int] = None,
    newline: str = "\n",
) -> str:
    """Replace the class docblock, or insert one before the class keyword.

    Args:
        contents: Document text
        doc_comment: New docblock text
        short_name: Unqualified class name
        original: Existing docblock text, if the class has one
        offset: Character offset of ``original`` in ``contents``
        newline: Line break placed between an inserted block and the class

    Returns:
        Updated document text
    """
    if original:
        if offset is not None and contents.startswith(original, offset):
            return contents[:offset] + doc_comment + contents[offset + len(original):]
        return contents.replace(original, doc_comment, 1)

    needle = f"class {short_name}"
    pos = contents.find(needle)
    if pos == -1:
        logger.warning(f"'{needle}' not found, docblock not inserted")
        return contents
    return contents[:pos] + doc_comment + newline + contents[pos:]


def insert_properties(contents: str, properties: Sequence[DeclaredProperty], newline: str = "\n") -> str:
    """Insert property declarations right after the class body's opening brace."""
    if not properties:
        return contents

    block = (newline + newline).join(render_property_code(prop, newline) for prop in properties)
    match = _CLASS_BODY_OPEN.search(contents)
    if not match:
        logger.warning("Class body opening brace not found, properties not inserted")
        return contents
    return contents[:match.end()] + newline + block + newline + contents[match.end():]


def append_methods(contents: str, methods: Sequence[DeclaredMethod], newline: str = "\n") -> str:
    """Insert method declarations before the last closing brace."""
    if not methods:
        return contents

    block = (newline + newline).join(render_method_code(method, newline) for method in methods)
    pos = contents.rfind("}")
    if pos == -1:
        logger.warning("No closing brace found, methods not appended")
        return contents
    return contents[:pos] + newline + block + newline + contents[pos:]


def write_document(file_path: str, contents: str) -> bool:
    """Write the updated document, reporting failure instead of raising."""
    try:
        with open(file_path, "w", encoding=SOURCE_ENCODING, errors=SOURCE_ENCODING_ERRORS, newline="") as f:
            f.write(contents)
    except OSError as e:
        logger.error(f"Failed to write {file_path}: {e}")
        return False
    return True
