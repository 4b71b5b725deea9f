"""Base generator: the public add/generate contract.

Subclasses implement ``handle()`` to register members using knowledge
only available once the class has been reflected. Listeners registered on
the generator run right after ``handle()`` and may register more.

    generator = MyGenerator("App\\Models\\User", reflector=reflector)
    generator.add_listener(lambda gen: gen.add_virtual_property("tenant", "Tenant", True))
    generator.generate()
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional

from ..ast_parser.models import ClassReflection
from .merge import build_doc_comment
from .output import OutputSink
from .registry import EntryRegistry
from .splicer import append_methods, detect_newline, insert_properties, splice_doc_comment, write_document

logger = logging.getLogger(__name__)

Listener = Callable[["Generator"], None]


class Generator(EntryRegistry, ABC):
    """Annotates one PHP class with its virtual members.

    Args:
        class_name: Fully-qualified class name, leading backslash optional
        reflector: Object with ``reflect(class_name) -> ClassReflection``
        reset: Discard every existing property/method tag
        overwrite: Replace existing tags that a pending entry redefines
        output: Optional sink receiving progress messages
        listeners: Callables invoked with the generator after ``handle()``
    """

    # Shown in progress messages
    name = "class"

    def __init__(
        self,
        class_name: str,
        reflector,
        reset: bool = False,
        overwrite: bool = False,
        output: Optional[OutputSink] = None,
        listeners: Optional[Iterable[Listener]] = None,
    ):
        super().__init__()
        if not class_name.startswith("\\"):
            class_name = "\\" + class_name

        self.class_name = class_name
        self.reflector = reflector
        self.reset = reset
        self.overwrite = overwrite
        self.output = output
        self.listeners: List[Listener] = list(listeners or [])
        self._reflection: Optional[ClassReflection] = None

    @property
    def reflection(self) -> ClassReflection:
        if self._reflection is None:
            raise RuntimeError("Reflection is only available during generate()")
        return self._reflection

    def add_listener(self, listener: Listener) -> "Generator":
        self.listeners.append(listener)
        return self

    def generate(self) -> bool:
        """Reflect, collect entries, merge and rewrite the class file.

        Returns:
            True if the document was rewritten

        Raises:
            ResolutionError: If the class cannot be located
        """
        self._reflection = self.reflector.reflect(self.class_name)
        if not self._reflection.instantiable:
            logger.debug(f"Skipping {self.class_name}: not instantiable")
            return False

        if self.output:
            self.output.comment(f"Loading {self.name} '{self.class_name}'")

        self.handle()

        for listener in self.listeners:
            listener(self)

        return self.build()

    @abstractmethod
    def handle(self) -> None:
        """Register members for the reflected class."""
        ...

    def build(self) -> bool:
        reflection = self.reflection
        contents = reflection.source
        newline = detect_newline(contents)

        doc_comment = build_doc_comment(
            reflection, self, reset=self.reset, overwrite=self.overwrite, newline=newline
        )
        updated = splice_doc_comment(
            contents,
            doc_comment,
            reflection.short_name,
            original=reflection.doc_comment,
            offset=reflection.doc_comment_offset,
            newline=newline,
        )

        declared_properties = set(reflection.property_names)
        updated = insert_properties(
            updated,
            [prop for name, prop in self.declared_properties.items() if name not in declared_properties],
            newline=newline,
        )

        declared_methods = {name.lower() for name in reflection.method_names}
        updated = append_methods(
            updated,
            [method for name, method in self.declared_methods.items() if name.lower() not in declared_methods],
            newline=newline,
        )

        if updated == contents:
            logger.debug(f"{reflection.file_path} already up to date")
            return False

        if not write_document(reflection.file_path, updated):
            return False

        if self.output:
            self.output.info(f"Written new phpDocBlock to {reflection.file_path}")
        return True
