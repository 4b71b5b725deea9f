"""Entry registry: the four name-keyed collections of pending members.

Each add-method is write-once per name: a repeated name is silently
ignored so that independent contributors (the generator's own ``handle()``
and any post-handle listeners) can request the same member without
coordinating. Method names share one case-insensitive namespace across the
virtual and declared registries.
Names that are not PHP identifiers are ignored the same way.
"""

import logging
from typing import Dict, Optional, Sequence

from ..docblock.tags import is_identifier
from .models import (
    Argument,
    DeclaredMethod,
    DeclaredProperty,
    TypeSpec,
    VirtualMethod,
    VirtualProperty,
    Visibility,
    normalize_type,
)

logger = logging.getLogger(__name__)


class EntryRegistry:
    """Collects virtual and declared members ahead of a merge."""

    def __init__(self):
        self.virtual_properties: Dict[str, VirtualProperty] = {}
        self.virtual_methods: Dict[str, VirtualMethod] = {}
        self.declared_properties: Dict[str, DeclaredProperty] = {}
        self.declared_methods: Dict[str, DeclaredMethod] = {}

    def add_virtual_property(
        self,
        name: str,
        type: TypeSpec = None,
        readable: bool = False,
        writable: bool = False,
        comment: str = "",
    ) -> "EntryRegistry":
        """Register a property annotated with ``@property[-read|-write]``.

        Args:
            name: Property name without the leading ``$``
            type: Union type, as a string or a list of alternatives
            readable: Whether the property can be read
            writable: Whether the property can be written
            comment: Tag description

        Returns:
            self, for chaining
        """
        if not self._is_valid_name(name, "virtual property"):
            return self
        if name in self.virtual_properties:
            logger.debug(f"Virtual property '{name}' already registered, ignoring")
            return self

        self.virtual_properties[name] = VirtualProperty(
            name=name,
            type=normalize_type(type),
            readable=readable,
            writable=writable,
            comment=comment,
        )
        return self

    def add_virtual_method(
        self,
        name: str,
        arguments: Sequence[Argument] = (),
        return_type: TypeSpec = None,
        static: bool = False,
        comment: str = "",
    ) -> "EntryRegistry":
        """Register a method annotated with ``@method``.

        Args:
            name: Method name
            arguments: Formal parameters, in order
            return_type: Union return type
            static: Whether the method is called statically
            comment: Tag description

        Returns:
            self, for chaining
        """
        if not self._is_valid_name(name, "virtual method"):
            return self
        if self.has_method(name):
            logger.debug(f"Method '{name}' already registered, ignoring virtual method")
            return self

        self.virtual_methods[name] = VirtualMethod(
            name=name,
            static=static,
            arguments=list(arguments),
            return_type=normalize_type(return_type),
            comment=comment,
        )
        return self

    def add_declared_property(
        self,
        name: str,
        type: TypeSpec = None,
        default_value: Optional[str] = None,
        static: bool = False,
        comment: str = "",
        visibility: Visibility = Visibility.PUBLIC,
    ) -> "EntryRegistry":
        """Register a property to be written into the class body.

        ``default_value`` is raw PHP source, e.g. ``"[]"`` or ``"'name'"``.
        """
        if not self._is_valid_name(name, "declared property"):
            return self
        if name in self.declared_properties:
            logger.debug(f"Declared property '{name}' already registered, ignoring")
            return self

        self.declared_properties[name] = DeclaredProperty(
            name=name,
            type=normalize_type(type),
            default_value=default_value,
            static=static,
            comment=comment,
            visibility=Visibility(visibility),
        )
        return self

    def add_declared_method(
        self,
        name: str,
        arguments: Sequence[Argument] = (),
        body: Optional[str] = None,
        return_type: TypeSpec = None,
        static: bool = False,
        comment: str = "",
        visibility: Visibility = Visibility.PUBLIC,
    ) -> "EntryRegistry":
        """Register a method to be written into the class body.

        ``body`` is raw PHP source placed verbatim between the braces.
        """
        if not self._is_valid_name(name, "declared method"):
            return self
        if self.has_method(name):
            logger.debug(f"Method '{name}' already registered, ignoring declared method")
            return self

        self.declared_methods[name] = DeclaredMethod(
            name=name,
            static=static,
            arguments=list(arguments),
            return_type=normalize_type(return_type),
            comment=comment,
            visibility=Visibility(visibility),
            body=body or "",
        )
        return self

    def has_method(self, name: str) -> bool:
        """Check both method registries, ignoring case."""
        lowered = name.lower()
        return any(
            existing.lower() == lowered
            for existing in (*self.virtual_methods, *self.declared_methods)
        )

    @staticmethod
    def _is_valid_name(name: str, kind: str) -> bool:
        # A name that is not an identifier would render as an unparseable tag
        if is_identifier(name):
            return True
        logger.debug(f"Invalid {kind} name '{name}', ignoring")
        return False
