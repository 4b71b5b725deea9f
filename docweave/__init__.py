"""docweave - docblock generator for PHP classes with virtual members."""

__version__ = "0.1.0"
