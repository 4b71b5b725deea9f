"""Docblock tags and the tag factory.

``create_tag`` turns one tag source line (``@property int $id``) into a
``Tag``. Property and method tags are split into their parts and rendered
back canonically, so a tag survives parse/render unchanged after its first
normalization. Tags whose body does not parse are kept verbatim.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from ..constants import DEFAULT_RETURN_TYPE, METHOD_TAG, PROPERTY_TAGS

_TAG_LINE = re.compile(r"^@([A-Za-z][\w\-\\:]*)(.*)$", re.DOTALL)
_IDENTIFIER = r"[A-Za-z_\x80-\uffff][\w\x80-\uffff]*"
_METHOD_NAME = re.compile(rf"({_IDENTIFIER})\s*\(")
_VARIABLE = re.compile(rf"&?(?:\.\.\.)?\$({_IDENTIFIER})")
_NAME = re.compile(rf"{_IDENTIFIER}\Z")

_OPENERS = {"<": ">", "(": ")", "{": "}", "[": "]"}
_CLOSERS = frozenset(_OPENERS.values())


@dataclass
class Tag:
    """One ``@name body`` entry of a docblock."""

    name: str
    body: str = ""
    type: Optional[str] = None
    variable_name: Optional[str] = None
    method_name: Optional[str] = None
    arguments: str = ""
    is_static: bool = False
    description: str = ""

    @property
    def is_property(self) -> bool:
        return self.name in PROPERTY_TAGS and self.variable_name is not None

    @property
    def is_method(self) -> bool:
        return self.name == METHOD_TAG and self.method_name is not None

    def render(self) -> str:
        if self.is_property:
            parts = [f"@{self.name}"]
            if self.type:
                parts.append(self.type)
            parts.append(f"${self.variable_name}")
            if self.description:
                parts.append(self.description)
            return " ".join(parts)

        if self.is_method:
            parts = [f"@{self.name}"]
            if self.is_static:
                parts.append("static")
            parts.append(self.type or DEFAULT_RETURN_TYPE)
            parts.append(f"{self.method_name}({self.arguments})")
            if self.description:
                parts.append(self.description)
            return " ".join(parts)

        return f"@{self.name} {self.body}" if self.body else f"@{self.name}"

    def __str__(self) -> str:
        return self.render()


def create_tag(line: str) -> Tag:
    """Build a Tag from its source text.

    Args:
        line: Tag source starting with ``@``; may span several lines

    Returns:
        Parsed tag

    Raises:
        ValueError: If the text does not start with a tag name
    """
    match = _TAG_LINE.match(line.strip())
    if not match:
        raise ValueError(f"Not a docblock tag: {line!r}")

    name = match.group(1)
    body = match.group(2).strip()

    if name in PROPERTY_TAGS:
        parsed = _parse_property_body(body)
        if parsed:
            type_, variable, description = parsed
            return Tag(name=name, body=body, type=type_, variable_name=variable, description=description)

    elif name == METHOD_TAG:
        parsed_method = _parse_method_body(body)
        if parsed_method:
            static, return_type, method, arguments, description = parsed_method
            return Tag(
                name=name,
                body=body,
                type=return_type,
                method_name=method,
                arguments=arguments,
                is_static=static,
                description=description,
            )

    return Tag(name=name, body=body)


def is_identifier(name: str) -> bool:
    """Whether ``name`` can be a PHP property or method name (no ``$``)."""
    return bool(_NAME.match(name))


# =========================================================================
# Body parsers
# =========================================================================


def _split_type(text: str) -> Tuple[str, str]:
    """Split a leading type expression off ``text``.

    The type ends at the first whitespace outside brackets, so generic
    types such as ``array<int, string>`` stay whole.
    """
    depth = 0
    for i, char in enumerate(text):
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS and depth:
            depth -= 1
        elif char.isspace() and depth == 0:
            return text[:i], text[i:].lstrip()
    return text, ""


def _parse_property_body(body: str) -> Optional[Tuple[Optional[str], str, str]]:
    type_: Optional[str] = None
    rest = body
    if not rest.startswith(("$", "&$", "...$")):
        type_, rest = _split_type(rest)
    match = _VARIABLE.match(rest)
    if not match:
        return None
    return type_, match.group(1), rest[match.end():].strip()


def _parse_method_body(body: str) -> Optional[Tuple[bool, Optional[str], str, str, str]]:
    static = False
    rest = body
    if re.match(r"static\s", rest):
        static = True
        rest = rest[len("static"):].lstrip()

    return_type: Optional[str] = None
    match = _METHOD_NAME.match(rest)
    if not match:
        return_type, rest = _split_type(rest)
        match = _METHOD_NAME.match(rest)
        if not match:
            return None

    start = match.end() - 1
    end = _closing_parenthesis(rest, start)
    if end is None:
        return None
    arguments = rest[start + 1:end].strip()
    description = rest[end + 1:].strip()
    return static, return_type, match.group(1), arguments, description


def _closing_parenthesis(text: str, start: int) -> Optional[int]:
    """Index of the ``)`` matching the ``(`` at ``start``.

    Parentheses inside quoted default values do not count.
    """
    depth = 0
    quote = None
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
    return None
