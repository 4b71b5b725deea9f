"""Configuration loading.

Settings come from a YAML file (``docweave.yaml`` by default) validated
with pydantic. The file location can be overridden with the
``DOCWEAVE_CONFIG`` environment variable, which may also be set in a
``.env`` file.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import Visibility
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "docweave.yaml"

TypeValue = Union[str, List[str], None]


class ArgumentConfig(BaseModel):
    """One method parameter."""
    name: str = Field(..., min_length=1)
    type: TypeValue = Field(None, description="Parameter type, string or list of alternatives")
    default: Optional[str] = Field(None, description="Default value as PHP source")


class VirtualPropertyConfig(BaseModel):
    name: str = Field(..., min_length=1)
    type: TypeValue = None
    read: bool = True
    write: bool = False
    comment: str = ""


class VirtualMethodConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    arguments: List[ArgumentConfig] = Field(default_factory=list)
    return_type: TypeValue = Field(None, alias="return")
    static: bool = False
    comment: str = ""


class DeclaredPropertyConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    type: TypeValue = None
    default_value: Optional[str] = Field(None, alias="default")
    static: bool = False
    comment: str = ""
    visibility: Visibility = Visibility.PUBLIC


class DeclaredMethodConfig(VirtualMethodConfig):
    body: str = ""
    visibility: Visibility = Visibility.PUBLIC


class ClassConfig(BaseModel):
    """Members to generate for one class."""
    model_config = ConfigDict(populate_by_name=True)

    class_name: str = Field(..., alias="class", min_length=1)
    reset: Optional[bool] = Field(None, description="Overrides the global reset flag")
    overwrite: Optional[bool] = Field(None, description="Overrides the global overwrite flag")
    properties: List[VirtualPropertyConfig] = Field(default_factory=list)
    methods: List[VirtualMethodConfig] = Field(default_factory=list)
    declared_properties: List[DeclaredPropertyConfig] = Field(default_factory=list)
    declared_methods: List[DeclaredMethodConfig] = Field(default_factory=list)


class AutoloadConfig(BaseModel):
    """Overrides composer.json autoload rules when set."""
    model_config = ConfigDict(populate_by_name=True)

    psr4: Dict[str, Union[str, List[str]]] = Field(default_factory=dict, alias="psr-4")
    classmap: Dict[str, str] = Field(default_factory=dict)


class DocweaveConfig(BaseModel):
    """Top-level configuration file."""
    project_root: str = "."
    reset: bool = False
    overwrite: bool = False
    autoload: Optional[AutoloadConfig] = None
    classes: List[ClassConfig] = Field(default_factory=list)


def get_config_path(path: Optional[str] = None) -> Path:
    """Resolve the configuration file: explicit path, env var, then default."""
    load_dotenv()
    return Path(path or os.getenv("DOCWEAVE_CONFIG", DEFAULT_CONFIG_FILE))


def load_config(path: Optional[str] = None) -> DocweaveConfig:
    """Load and validate the configuration file.

    Relative ``project_root`` values are resolved against the directory
    holding the file.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    config_path = get_config_path(path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    try:
        config = DocweaveConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

    root = Path(config.project_root)
    if not root.is_absolute():
        config.project_root = str(config_path.parent / root)

    logger.debug(f"Loaded {len(config.classes)} class entries from {config_path}")
    return config
