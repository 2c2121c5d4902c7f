"""Shared models and enums used across sqltrail modules."""

from enum import Enum


class DataType(str, Enum):
    """Coarse data type category attached to a column.

    The enum value is the text shown in edge labels.
    """

    STRING = "String"
    DATETIME = "DateTime"
    OBJECT = "Object"
    ARRAY = "Array"
    UNKNOWN = "Unknown"

    @classmethod
    def from_catalog(cls, value: str) -> "DataType":
        """Map a catalog ``datatype.type`` string to a DataType.

        Args:
            value: Type string as written in the catalog (e.g. "string")

        Returns:
            The matching DataType

        Raises:
            ValueError: If the value is not one of the recognized catalog types
        """
        try:
            return _CATALOG_TYPES[value]
        except KeyError:
            raise ValueError(f"invalid data type: {value}") from None


_CATALOG_TYPES = {
    "string": DataType.STRING,
    "datetime": DataType.DATETIME,
    "object": DataType.OBJECT,
    "array": DataType.ARRAY,
}


class OutputFormat(str, Enum):
    """Output format for the rendered lineage graph."""

    DOT = "dot"
    MERMAID = "mermaid"
    JSON = "json"
