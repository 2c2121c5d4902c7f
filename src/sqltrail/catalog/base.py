"""Catalog document models and the exception raised for catalog failures.

A catalog document is a list of table declarations:

    - name: users
      namespace: [public]
      description: Registered users
      datafields:
        - name: id
          datatype:
            type: string
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from sqltrail.global_models import DataType


class CatalogError(Exception):
    """Exception raised when a catalog cannot be loaded or is malformed."""

    pass


class FieldType(BaseModel):
    """The ``datatype`` block of a declared column."""

    type: DataType = Field(..., description="Coarse declared type")

    @field_validator("type", mode="before")
    @classmethod
    def _parse_catalog_type(cls, value: Any) -> DataType:
        if isinstance(value, DataType):
            return value
        if not isinstance(value, str):
            raise ValueError(f"invalid data type: {value!r}")
        return DataType.from_catalog(value)


class DataField(BaseModel):
    """A declared column of a catalog table."""

    name: str = Field(..., description="Column name")
    datatype: FieldType = Field(..., description="Declared column type")


class TableDefinition(BaseModel):
    """A table declared in the schema catalog."""

    name: str = Field(..., description="Table name")
    namespace: List[str] = Field(
        default_factory=list, description="Path segments preceding the name"
    )
    description: str = Field(default="", description="Free-text description")
    datafields: List[DataField] = Field(
        default_factory=list, description="Declared columns in order"
    )

    @property
    def qualified_path(self) -> List[str]:
        """Namespace segments followed by the table name."""
        return [*self.namespace, self.name]

    def path_matches(self, path: List[str]) -> bool:
        """Check whether ``path`` is exactly this table's qualified identity."""
        return self.qualified_path == list(path)

    def get_field(self, column: str) -> Optional[DataField]:
        """Return the first declared column called ``column``, if any."""
        for field in self.datafields:
            if field.name == column:
                return field
        return None
