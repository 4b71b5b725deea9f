"""Base interface for tree-sitter backed class reflectors.

Shared logic (locating and reading the file, running tree-sitter) lives
here; language-specific extraction is delegated to subclasses.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import tree_sitter

from ..constants import SOURCE_ENCODING, SOURCE_ENCODING_ERRORS
from ..errors import ResolutionError
from .locator import ClassLocator
from .models import ClassReflection

logger = logging.getLogger(__name__)


class BaseReflector(ABC):
    """Abstract base for source-level reflectors.

    Subclasses implement:
    - get_language(): returns language name string
    - get_tree_sitter_language(): returns tree-sitter Language object
    - reflect_source(): extracts a ClassReflection from source text
    """

    def __init__(self, locator: Optional[ClassLocator] = None):
        self.locator = locator or ClassLocator.from_composer(".")

    @abstractmethod
    def get_language(self) -> str:
        """Return the language identifier (e.g., 'php')."""
        ...

    @abstractmethod
    def get_tree_sitter_language(self) -> tree_sitter.Language:
        """Return the tree-sitter Language object for this language."""
        ...

    @abstractmethod
    def reflect_source(self, source_text: str, file_path: str, class_name: str) -> ClassReflection:
        """Reflect ``class_name`` from already loaded source text.

        Args:
            source_text: Full text of the file
            file_path: Path the text was read from
            class_name: Fully-qualified class name

        Returns:
            ClassReflection snapshot

        Raises:
            ResolutionError: If the file does not declare the class
        """
        ...

    def reflect(self, class_name: str) -> ClassReflection:
        """Locate, read and reflect a class by its fully-qualified name.

        Raises:
            ResolutionError: If the class cannot be located or read
        """
        file_path = self.locator.locate(class_name)
        source_text = self.read_source(file_path, class_name)
        return self.reflect_source(source_text, file_path, class_name)

    @staticmethod
    def read_source(file_path: str, class_name: str = "") -> str:
        # Bytes in, so line endings survive untouched
        try:
            with open(file_path, "rb") as f:
                return f.read().decode(SOURCE_ENCODING, errors=SOURCE_ENCODING_ERRORS)
        except OSError as e:
            raise ResolutionError(class_name or file_path, str(e)) from e

    def parse(self, source: bytes, file_path: str = "") -> tree_sitter.Tree:
        parser = tree_sitter.Parser(self.get_tree_sitter_language())
        tree = parser.parse(source)
        if tree.root_node.has_error:
            logger.warning(f"Tree-sitter reported parse errors in {file_path or '<source>'}")
        return tree

    @staticmethod
    def node_text(node: tree_sitter.Node, source: bytes) -> str:
        return source[node.start_byte:node.end_byte].decode(SOURCE_ENCODING, errors=SOURCE_ENCODING_ERRORS)
