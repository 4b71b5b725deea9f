"""PHP class reflector using tree-sitter.

Walks the tree-sitter AST of a PHP file to find one class-like declaration
and read its declared properties and methods, its docblock and whether it
can be instantiated. Members inherited from the parent class and from used
traits are merged in by reflecting those recursively.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

import tree_sitter
import tree_sitter_php

from ..constants import SOURCE_ENCODING, SOURCE_ENCODING_ERRORS
from ..errors import ResolutionError
from .base import BaseReflector
from .locator import normalize_class_name
from .models import ClassReflection

logger = logging.getLogger(__name__)

_PHP_LANGUAGE = tree_sitter.Language(tree_sitter_php.language_php())

_CLASS_LIKE = {
    "class_declaration": "class",
    "interface_declaration": "interface",
    "trait_declaration": "trait",
    "enum_declaration": "enum",
}
_BODY_TYPES = ("declaration_list", "enum_declaration_list")
_NAME_TYPES = ("name", "qualified_name")


@dataclass
class _Scope:
    """Namespace and ``use`` imports in effect at a point of the file."""

    namespace: str = ""
    imports: Dict[str, str] = field(default_factory=dict)  # lowercased alias -> FQCN

    def resolve(self, name: str) -> str:
        """Resolve a class reference to its fully-qualified name."""
        if name.startswith("\\"):
            return name[1:]
        first, _, rest = name.partition("\\")
        imported = self.imports.get(first.lower())
        if imported:
            return f"{imported}\\{rest}" if rest else imported
        return f"{self.namespace}\\{name}" if self.namespace else name


@dataclass
class _Members:
    properties: List[str] = field(default_factory=list)
    private_properties: Set[str] = field(default_factory=set)
    methods: List[str] = field(default_factory=list)
    constructor_visibility: str = "public"


class PhpReflector(BaseReflector):
    """tree-sitter based PHP reflector.

    Extracts:
    - Property declarations and promoted constructor parameters
    - Method declarations
    - The ``/** */`` docblock preceding the declaration, with its offset
    - Parent class and used traits, reflected recursively
    """

    def __init__(self, locator=None):
        super().__init__(locator)
        # Lowercased FQCN -> private property names, filled while reflecting
        self._private_properties: Dict[str, Set[str]] = {}

    def get_language(self) -> str:
        return "php"

    def get_tree_sitter_language(self) -> tree_sitter.Language:
        return _PHP_LANGUAGE

    def reflect_source(self, source_text: str, file_path: str, class_name: str) -> ClassReflection:
        return self._reflect_source(source_text, file_path, class_name, seen=set())

    def _reflect_source(
        self, source_text: str, file_path: str, class_name: str, seen: Set[str]
    ) -> ClassReflection:
        source = source_text.encode(SOURCE_ENCODING, errors=SOURCE_ENCODING_ERRORS)
        tree = self.parse(source, file_path)
        target = normalize_class_name(class_name)

        for node, scope in self._collect_declarations(tree.root_node, source, _Scope()):
            short_name = self._get_child_text(node, "name", source)
            if not short_name:
                continue
            qualified = f"{scope.namespace}\\{short_name}" if scope.namespace else short_name
            if qualified.lower() == target.lower():
                return self._build_reflection(node, scope, qualified, short_name, source, source_text, file_path, seen)

        raise ResolutionError(class_name, f"not declared in {file_path}")

    # =========================================================================
    # Declaration discovery
    # =========================================================================

    def _collect_declarations(
        self, node: tree_sitter.Node, source: bytes, scope: _Scope
    ) -> List[Tuple[tree_sitter.Node, _Scope]]:
        """Find top-level class-like declarations with the scope they live in.

        Handles both ``namespace Foo;`` statements, which apply to the
        following siblings, and braced ``namespace Foo { ... }`` blocks.
        """
        found: List[Tuple[tree_sitter.Node, _Scope]] = []
        for child in node.children:
            if child.type == "namespace_definition":
                name_node = child.child_by_field_name("name") or self._get_child_by_type(child, ("namespace_name",))
                namespace = self.node_text(name_node, source).strip("\\") if name_node else ""
                body = child.child_by_field_name("body") or self._get_child_by_type(child, ("compound_statement",))
                if body is not None:
                    found.extend(self._collect_declarations(body, source, _Scope(namespace)))
                else:
                    scope = _Scope(namespace)

            elif child.type == "namespace_use_declaration":
                scope.imports.update(parse_use_declaration(self.node_text(child, source)))

            elif child.type in _CLASS_LIKE:
                found.append((child, scope))

        return found

    def _build_reflection(
        self,
        node: tree_sitter.Node,
        scope: _Scope,
        qualified: str,
        short_name: str,
        source: bytes,
        source_text: str,
        file_path: str,
        seen: Set[str],
    ) -> ClassReflection:
        kind = _CLASS_LIKE[node.type]
        members = self._extract_members(node, source)
        self._private_properties[qualified.lower()] = members.private_properties

        parent_name = None
        base = self._get_child_by_type(node, ("base_clause",))
        if base is not None and kind == "class":
            parent = self._get_child_by_type(base, _NAME_TYPES)
            if parent is not None:
                parent_name = scope.resolve(self.node_text(parent, source))

        trait_names = [scope.resolve(name) for name in self._extract_trait_uses(node, source)]

        doc_comment, offset = self._extract_doc_comment(node, source)

        abstract = any(child.type == "abstract_modifier" for child in node.children)
        instantiable = kind == "class" and not abstract and members.constructor_visibility == "public"

        properties = list(members.properties)
        methods = list(members.methods)
        seen = seen | {qualified.lower()}
        for trait in trait_names:
            self._inherit(trait, properties, methods, seen, include_private=True)
        if parent_name:
            self._inherit(parent_name, properties, methods, seen, include_private=False)

        return ClassReflection(
            name=f"\\{qualified}",
            short_name=short_name,
            namespace=scope.namespace,
            kind=kind,
            instantiable=instantiable,
            source=source_text,
            file_path=file_path,
            property_names=properties,
            method_names=methods,
            doc_comment=doc_comment,
            doc_comment_offset=offset,
            parent_name=f"\\{parent_name}" if parent_name else None,
            trait_names=[f"\\{name}" for name in trait_names],
        )

    def _inherit(
        self,
        class_name: str,
        properties: List[str],
        methods: List[str],
        seen: Set[str],
        include_private: bool,
    ) -> None:
        """Merge an ancestor's member names into ``properties``/``methods``."""
        if class_name.lower() in seen:
            return
        try:
            file_path = self.locator.locate(class_name)
            source_text = self.read_source(file_path, class_name)
            ancestor = self._reflect_source(source_text, file_path, class_name, seen)
        except ResolutionError as e:
            logger.debug(f"Skipping inherited members: {e}")
            return

        hidden: Set[str] = set()
        if not include_private:
            hidden = self._private_properties.get(normalize_class_name(ancestor.name).lower(), set())

        for name in ancestor.property_names:
            if name not in properties and name not in hidden:
                properties.append(name)
        lowered = {name.lower() for name in methods}
        for name in ancestor.method_names:
            if name.lower() not in lowered:
                methods.append(name)
                lowered.add(name.lower())

    # =========================================================================
    # Member extraction
    # =========================================================================

    def _extract_members(self, node: tree_sitter.Node, source: bytes) -> _Members:
        members = _Members()
        body = self._get_body(node)
        if body is None:
            return members

        for child in body.children:
            if child.type == "property_declaration":
                private = self._visibility(child, source) == "private"
                for element in self._descendants(child, "property_element"):
                    variable = self._first_descendant(element, "variable_name")
                    if variable is None:
                        continue
                    name = self.node_text(variable, source).lstrip("$")
                    members.properties.append(name)
                    if private:
                        members.private_properties.add(name)

            elif child.type == "method_declaration":
                name = self._get_child_text(child, "name", source)
                if not name:
                    continue
                members.methods.append(name)
                if name.lower() == "__construct":
                    members.constructor_visibility = self._visibility(child, source)
                    for param in self._descendants(child, "property_promotion_parameter"):
                        variable = self._first_descendant(param, "variable_name")
                        if variable is None:
                            continue
                        promoted = self.node_text(variable, source).lstrip("$")
                        members.properties.append(promoted)
                        if self._visibility(param, source) == "private":
                            members.private_properties.add(promoted)

        return members

    def _extract_trait_uses(self, node: tree_sitter.Node, source: bytes) -> List[str]:
        traits: List[str] = []
        body = self._get_body(node)
        if body is None:
            return traits
        for child in body.children:
            if child.type == "use_declaration":
                for sub in child.children:
                    if sub.type in _NAME_TYPES:
                        traits.append(self.node_text(sub, source))
        return traits

    def _extract_doc_comment(self, node: tree_sitter.Node, source: bytes) -> Tuple[Optional[str], Optional[int]]:
        """Find the ``/** */`` comment attached to a declaration.

        Looks at the previous sibling, then at comments sitting between the
        declaration's modifiers and its keyword (``final /** */ class``).
        """
        candidates = []
        prev = node.prev_named_sibling
        if prev is not None and prev.type == "comment":
            candidates.append(prev)
        for child in node.children:
            if child.type == "comment":
                candidates.append(child)
            elif child.type == "name":
                break

        for comment in reversed(candidates):
            text = self.node_text(comment, source)
            if text.startswith("/**"):
                offset = len(source[:comment.start_byte].decode(SOURCE_ENCODING, errors=SOURCE_ENCODING_ERRORS))
                return text, offset
        return None, None

    def _visibility(self, node: tree_sitter.Node, source: bytes) -> str:
        modifier = self._get_child_by_type(node, ("visibility_modifier",))
        if modifier is None:
            return "public"
        return self.node_text(modifier, source).strip().lower()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_body(self, node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
        return node.child_by_field_name("body") or self._get_child_by_type(node, _BODY_TYPES)

    def _get_child_text(self, node: tree_sitter.Node, field_name: str, source: bytes) -> Optional[str]:
        child = node.child_by_field_name(field_name)
        if child:
            return self.node_text(child, source)
        return None

    @staticmethod
    def _get_child_by_type(node: tree_sitter.Node, type_names: Tuple[str, ...]) -> Optional[tree_sitter.Node]:
        for child in node.children:
            if child.type in type_names:
                return child
        return None

    @classmethod
    def _descendants(cls, node: tree_sitter.Node, type_name: str) -> List[tree_sitter.Node]:
        found = []
        for child in node.children:
            if child.type == type_name:
                found.append(child)
            else:
                found.extend(cls._descendants(child, type_name))
        return found

    @classmethod
    def _first_descendant(cls, node: tree_sitter.Node, type_name: str) -> Optional[tree_sitter.Node]:
        for child in node.children:
            if child.type == type_name:
                return child
            nested = cls._first_descendant(child, type_name)
            if nested is not None:
                return nested
        return None


_USE_GROUP = re.compile(r"^(.*?)\\?\{(.*)\}$", re.DOTALL)
_AS = re.compile(r"\s+as\s+", re.IGNORECASE)


def parse_use_declaration(text: str) -> Dict[str, str]:
    """Parse a ``use`` import statement into ``alias -> FQCN``.

    Aliases are lowercased since PHP class names are case-insensitive.
    ``use function`` and ``use const`` imports are ignored.

    Examples:
        use App\\Models\\User;           -> {"user": "App\\Models\\User"}
        use App\\Models\\{User, Post as P}; -> {"user": ..., "p": "App\\Models\\Post"}
    """
    body = text.strip().rstrip(";").strip()
    if body[:3].lower() == "use":
        body = body[3:].strip()
    if re.match(r"(function|const)\s", body, re.IGNORECASE):
        return {}

    group = _USE_GROUP.match(body)
    if group:
        prefix = group.group(1).strip().strip("\\")
        clauses = [f"{prefix}\\{clause.strip()}" for clause in group.group(2).split(",") if clause.strip()]
    else:
        clauses = [clause.strip() for clause in body.split(",") if clause.strip()]

    imports: Dict[str, str] = {}
    for clause in clauses:
        parts = _AS.split(clause, maxsplit=1)
        fqcn = parts[0].strip().lstrip("\\")
        alias = parts[1].strip() if len(parts) > 1 else fqcn.rsplit("\\", 1)[-1]
        imports[alias.lower()] = fqcn
    return imports
