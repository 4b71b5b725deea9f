"""Rendering of pending entries into tags and PHP source.

Virtual members become one docblock tag each; declared members become
indented PHP declarations ready to be spliced into a class body.
"""

from typing import List

from ..docblock.tags import Tag, create_tag
from .models import DeclaredMethod, DeclaredProperty, VirtualMethod, VirtualProperty, build_arguments

INDENT = "    "


def render_property_tag(prop: VirtualProperty) -> Tag:
    """Render ``@property[-read|-write] <type> $name <comment>``."""
    parts = [f"@{prop.tag_name}"]
    if prop.type:
        parts.append(prop.type)
    parts.append(f"${prop.name}")
    if prop.comment:
        parts.append(prop.comment)
    return create_tag(" ".join(parts))


def render_method_tag(method: VirtualMethod) -> Tag:
    """Render ``@method [static] <return> name(<arguments>) <comment>``."""
    parts = ["@method"]
    if method.static:
        parts.append("static")
    if method.return_type:
        parts.append(method.return_type)
    parts.append(f"{method.name}({build_arguments(method.arguments)})")
    if method.comment:
        parts.append(method.comment)
    return create_tag(" ".join(parts))


# =========================================================================
# Declared members
# =========================================================================


def render_property_code(prop: DeclaredProperty, newline: str = "\n") -> str:
    modifiers = prop.visibility.value + (" static" if prop.static else "")
    default = f" = {prop.default_value}" if prop.default_value else ""
    lines: List[str] = [
        f"{INDENT}/**",
        f"{INDENT} * {prop.comment}",
        f"{INDENT} * @var {prop.type or 'mixed'}",
        f"{INDENT} */",
        f"{INDENT}{modifiers} ${prop.name}{default};",
    ]
    return newline.join(line.rstrip() for line in lines)


def render_method_code(method: DeclaredMethod, newline: str = "\n") -> str:
    modifiers = method.visibility.value + (" static" if method.static else "")
    return_type = f" : {method.return_type}" if method.return_type else ""
    lines: List[str] = [
        f"{INDENT}/**",
        f"{INDENT} * {method.comment}",
        f"{INDENT} */",
        f"{INDENT}{modifiers} function {method.name}({build_arguments(method.arguments)}){return_type} {{",
        f"{INDENT}{INDENT}{method.body}",
        f"{INDENT}}}",
    ]
    return newline.join(line.rstrip() for line in lines)
