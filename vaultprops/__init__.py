"""vaultprops - typed inline properties for plain-text notes."""

__version__ = "0.1.0"

from .properties import InlineProperty, insert_property, parse, replace_property

__all__ = ["__version__", "InlineProperty", "parse", "replace_property", "insert_property"]
