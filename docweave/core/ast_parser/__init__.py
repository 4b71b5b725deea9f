"""docweave reflection: tree-sitter based PHP class reflection.

Public API:
    reflect_class(class_name, project_root) -> ClassReflection
    PhpReflector(locator).reflect(class_name) -> ClassReflection
    ClassLocator.from_composer(project_root) -> ClassLocator
"""

from .locator import ClassLocator, normalize_class_name
from .models import ClassReflection
from .php_reflector import PhpReflector, parse_use_declaration

__all__ = [
    "reflect_class",
    "ClassLocator",
    "ClassReflection",
    "PhpReflector",
    "normalize_class_name",
    "parse_use_declaration",
]


def reflect_class(class_name: str, project_root: str = ".") -> ClassReflection:
    """Reflect a class of the Composer project at ``project_root``.

    Args:
        class_name: Fully-qualified class name
        project_root: Directory holding composer.json

    Returns:
        ClassReflection snapshot

    Raises:
        ResolutionError: If the class cannot be located
    """
    return PhpReflector(ClassLocator.from_composer(project_root)).reflect(class_name)
