"""Class name to file resolution.

Follows Composer's autoload rules: an explicit classmap first, then the
longest matching PSR-4 namespace prefix.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Union

from ..errors import ConfigError, ResolutionError

logger = logging.getLogger(__name__)

PathList = Union[str, Sequence[str]]


def normalize_class_name(class_name: str) -> str:
    """Strip the leading backslash: ``\\App\\User`` -> ``App\\User``."""
    return class_name.lstrip("\\")


class ClassLocator:
    """Maps fully-qualified class names to source files.

    Args:
        psr4: Namespace prefix -> directory or list of directories
        classmap: Class name -> file
        base_dir: Directory relative paths are resolved against
    """

    def __init__(
        self,
        psr4: Optional[Mapping[str, PathList]] = None,
        classmap: Optional[Mapping[str, str]] = None,
        base_dir: str = ".",
    ):
        self.base_dir = Path(base_dir)
        self.psr4: Dict[str, List[Path]] = {}
        for prefix, dirs in (psr4 or {}).items():
            key = normalize_class_name(prefix).rstrip("\\")
            key = key + "\\" if key else ""
            if isinstance(dirs, str):
                dirs = [dirs]
            self.psr4.setdefault(key, []).extend(self.base_dir / d for d in dirs)
        self.classmap: Dict[str, Path] = {
            normalize_class_name(name).lower(): self.base_dir / path
            for name, path in (classmap or {}).items()
        }

    @classmethod
    def from_composer(cls, project_root: str = ".") -> "ClassLocator":
        """Build a locator from ``composer.json`` autoload sections.

        A missing composer.json yields a locator that only maps the
        global namespace to ``project_root``.
        """
        composer_path = Path(project_root) / "composer.json"
        if not composer_path.exists():
            logger.debug(f"No composer.json in {project_root}, using the project root only")
            return cls(psr4={"": "."}, base_dir=project_root)

        try:
            with open(composer_path, "r", encoding="utf-8") as f:
                composer = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid {composer_path}: {e}") from e

        psr4: Dict[str, List[str]] = {}
        for section in ("autoload", "autoload-dev"):
            autoload = composer.get(section, {})
            for prefix, dirs in autoload.get("psr-4", {}).items():
                psr4.setdefault(prefix, []).extend([dirs] if isinstance(dirs, str) else dirs)

        return cls(psr4=psr4, base_dir=project_root)

    def locate(self, class_name: str) -> str:
        """Find the file declaring ``class_name``.

        Raises:
            ResolutionError: If no autoload rule yields an existing file
        """
        name = normalize_class_name(class_name)

        mapped = self.classmap.get(name.lower())
        if mapped is not None:
            if mapped.is_file():
                return str(mapped)
            raise ResolutionError(class_name, f"classmap entry {mapped} does not exist")

        candidates = sorted(
            (prefix for prefix in self.psr4 if name.startswith(prefix)),
            key=len,
            reverse=True,
        )
        for prefix in candidates:
            relative = name[len(prefix):].replace("\\", os.sep) + ".php"
            for directory in self.psr4[prefix]:
                path = directory / relative
                if path.is_file():
                    return str(path)

        raise ResolutionError(class_name, "no autoload rule matches an existing file")
