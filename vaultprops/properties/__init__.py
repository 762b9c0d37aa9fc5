"""Inline property parsing and typed values."""

from .inline import (
    InlineProperty,
    PropertyPatterns,
    insert_property,
    parse,
    replace_property,
)
from .records import GroupedRecord, collect_records
from .values import (
    Checkbox,
    Date,
    DateTime,
    Link,
    Links,
    List,
    Number,
    PropertyValue,
    Tags,
    Text,
    infer_value,
)

__all__ = [
    "InlineProperty",
    "PropertyPatterns",
    "parse",
    "replace_property",
    "insert_property",
    "GroupedRecord",
    "collect_records",
    "PropertyValue",
    "Text",
    "Number",
    "Checkbox",
    "Date",
    "DateTime",
    "Link",
    "Links",
    "List",
    "Tags",
    "infer_value",
]
