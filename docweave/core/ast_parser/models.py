"""Reflection data models.

Snapshot of one class's structural facts as read from its source file.
Pure data container, no parsing logic.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ClassReflection:
    """Declared members and docblock location of one PHP class.

    Captured once at the start of a generator run and treated as
    immutable afterwards.
    """

    name: str  # "\App\Models\User"
    short_name: str  # "User"
    namespace: str  # "App\Models"
    kind: str  # "class" | "interface" | "trait" | "enum"
    instantiable: bool
    source: str  # Full text of the file
    file_path: str
    property_names: List[str] = field(default_factory=list)
    method_names: List[str] = field(default_factory=list)
    doc_comment: Optional[str] = None  # Raw "/** ... */" text
    doc_comment_offset: Optional[int] = None  # Character offset in source
    parent_name: Optional[str] = None
    trait_names: List[str] = field(default_factory=list)
