"""Generator data models.

Pending annotation records collected by the entry registry before a
``generate()`` run. These are pure data containers: rendering lives in
``renderer.py`` and merging in ``merge.py``.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from ..constants import Visibility

# A union type as accepted by the add-methods: "int|null", ["int", "null"] or None
TypeSpec = Union[str, Sequence[str], None]


def normalize_type(value: TypeSpec) -> Optional[str]:
    """Flatten a union type spec into one ``|``-joined string.

    Lists drop their empty entries. Strings pass through unchanged.
    Empty values normalize to None.
    """
    if not value:
        return None
    if isinstance(value, str):
        return value
    joined = "|".join(part for part in value if part)
    return joined or None


@dataclass(frozen=True)
class Argument:
    """One formal parameter of a method signature."""

    name: str
    type: TypeSpec = None
    default: Optional[str] = None

    def __post_init__(self):
        # Frozen: normalize the union once, in place
        object.__setattr__(self, "type", normalize_type(self.type))

    def build(self) -> str:
        """Render as ``<type> $name = <default>``, each part only when set."""
        prefix = f"{self.type} " if self.type else ""
        suffix = f" = {self.default}" if self.default is not None else ""
        return f"{prefix}${self.name}{suffix}"

    def __str__(self) -> str:
        return self.build()


def build_arguments(arguments: Sequence[Argument]) -> str:
    return ", ".join(argument.build() for argument in arguments)


@dataclass
class VirtualProperty:
    """A property exposed through magic accessors, annotated only."""

    name: str
    type: Optional[str] = None
    readable: bool = False
    writable: bool = False
    comment: str = ""

    @property
    def tag_name(self) -> str:
        if self.readable and self.writable:
            return "property"
        if self.writable:
            return "property-write"
        return "property-read"


@dataclass
class VirtualMethod:
    """A method exposed through ``__call``/``__callStatic``, annotated only."""

    name: str
    static: bool = False
    arguments: List[Argument] = field(default_factory=list)
    return_type: Optional[str] = None
    comment: str = ""


@dataclass
class DeclaredProperty:
    """A property to physically add to the class body."""

    name: str
    type: Optional[str] = None
    default_value: Optional[str] = None
    static: bool = False
    comment: str = ""
    visibility: Visibility = Visibility.PUBLIC


@dataclass
class DeclaredMethod:
    """A method to physically add to the class body."""

    name: str
    static: bool = False
    arguments: List[Argument] = field(default_factory=list)
    return_type: Optional[str] = None
    comment: str = ""
    visibility: Visibility = Visibility.PUBLIC
    body: str = ""
