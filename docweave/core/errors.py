"""Exceptions raised across docweave."""


class DocweaveError(Exception):
    """Base class for all docweave errors."""


class ResolutionError(DocweaveError):
    """The target class could not be located or reflected."""

    def __init__(self, class_name: str, reason: str):
        self.class_name = class_name
        self.reason = reason
        super().__init__(f"Cannot resolve class {class_name}: {reason}")


class MalformedDocBlockError(DocweaveError):
    """An existing docblock could not be parsed."""


class ConfigError(DocweaveError):
    """The configuration file is missing or invalid."""
