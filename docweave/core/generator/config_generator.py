"""Generator driven by a configuration entry."""

import logging

from ..config import ClassConfig, DocweaveConfig
from .base import Generator
from .models import Argument

logger = logging.getLogger(__name__)


class ConfigGenerator(Generator):
    """Registers the members listed for one class in ``docweave.yaml``."""

    name = "configured class"

    def __init__(self, entry: ClassConfig, reflector, **kwargs):
        super().__init__(entry.class_name, reflector, **kwargs)
        self.entry = entry

    @classmethod
    def from_config(cls, entry: ClassConfig, config: DocweaveConfig, reflector, **kwargs) -> "ConfigGenerator":
        """Build a generator, letting per-class flags override global ones."""
        reset = config.reset if entry.reset is None else entry.reset
        overwrite = config.overwrite if entry.overwrite is None else entry.overwrite
        return cls(entry, reflector, reset=reset, overwrite=overwrite, **kwargs)

    def handle(self) -> None:
        entry = self.entry

        for prop in entry.properties:
            self.add_virtual_property(prop.name, prop.type, prop.read, prop.write, prop.comment)

        for method in entry.methods:
            self.add_virtual_method(
                method.name,
                [Argument(arg.name, arg.type, arg.default) for arg in method.arguments],
                method.return_type,
                method.static,
                method.comment,
            )

        for prop in entry.declared_properties:
            self.add_declared_property(
                prop.name, prop.type, prop.default_value, prop.static, prop.comment, prop.visibility
            )

        for method in entry.declared_methods:
            self.add_declared_method(
                method.name,
                [Argument(arg.name, arg.type, arg.default) for arg in method.arguments],
                method.body,
                method.return_type,
                method.static,
                method.comment,
                method.visibility,
            )

        logger.debug(
            f"{self.class_name}: {len(self.virtual_properties)} virtual properties, "
            f"{len(self.virtual_methods)} virtual methods registered"
        )
