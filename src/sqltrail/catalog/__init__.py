"""Schema catalog: declared tables and their coarse column types.

Example:
    >>> from pathlib import Path
    >>> from sqltrail.catalog import SchemaCatalog
    >>> catalog = SchemaCatalog.from_path(Path("sources.yml"))
    >>> catalog.data_type(["public", "users"], "id")
    <DataType.STRING: 'String'>
"""

from sqltrail.catalog.base import (
    CatalogError,
    DataField,
    FieldType,
    TableDefinition,
)
from sqltrail.catalog.schema_catalog import SchemaCatalog

__all__ = [
    "CatalogError",
    "DataField",
    "FieldType",
    "TableDefinition",
    "SchemaCatalog",
]
