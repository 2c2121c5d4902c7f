"""In-memory schema catalog used as the ground truth for column types."""

import json
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence

import yaml
from pydantic import ValidationError

from sqltrail.catalog.base import CatalogError, TableDefinition
from sqltrail.global_models import DataType


class SchemaCatalog:
    """Index over the declared catalog tables.

    Qualified identities (namespace + name) must be unique; the catalog is
    immutable once constructed.
    """

    def __init__(self, tables: Optional[Sequence[TableDefinition]] = None):
        """
        Initialize the catalog.

        Args:
            tables: Declared tables, in document order

        Raises:
            CatalogError: If two tables share the same qualified identity
        """
        self._tables: tuple[TableDefinition, ...] = tuple(tables or ())
        self._index: dict[tuple[str, ...], TableDefinition] = {}

        for table in self._tables:
            key = tuple(table.qualified_path)
            if key in self._index:
                raise CatalogError(
                    f"Duplicate table in catalog: {'.'.join(key)}"
                )
            self._index[key] = table

    @classmethod
    def from_path(cls, path: Path) -> "SchemaCatalog":
        """
        Load a catalog document from a YAML or JSON file.

        Args:
            path: Path to a .yml, .yaml or .json catalog document

        Returns:
            SchemaCatalog with all declared tables

        Raises:
            FileNotFoundError: If the file does not exist
            CatalogError: If the document is malformed or declares an
                unsupported data type
        """
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")

        suffix = path.suffix.lower()
        if suffix in (".yaml", ".yml"):
            data = _load_yaml_file(path)
        elif suffix == ".json":
            data = _load_json_file(path)
        else:
            raise CatalogError(
                f"Unsupported catalog file format: {suffix}. "
                "Use .yml, .yaml or .json"
            )

        return cls.from_data(data, source=str(path))

    @classmethod
    def from_data(cls, data: Any, source: str = "<catalog>") -> "SchemaCatalog":
        """
        Build a catalog from already-deserialized document data.

        Args:
            data: List of table declarations (``None`` is an empty catalog)
            source: Name used in error messages

        Returns:
            SchemaCatalog with all declared tables

        Raises:
            CatalogError: If the data does not describe a list of tables
        """
        if data is None:
            return cls()

        if not isinstance(data, list):
            raise CatalogError(
                f"Catalog {source} must contain a list of tables, "
                f"got {type(data).__name__}"
            )

        try:
            tables = [TableDefinition.model_validate(entry) for entry in data]
        except ValidationError as e:
            raise CatalogError(f"Invalid catalog {source}: {e}") from e

        return cls(tables)

    @property
    def tables(self) -> List[TableDefinition]:
        """Declared tables in document order."""
        return list(self._tables)

    def get_table(self, path: Sequence[str]) -> Optional[TableDefinition]:
        """Find the table whose qualified identity equals ``path``."""
        return self._index.get(tuple(path))

    def data_type(self, path: Sequence[str], column: str) -> Optional[DataType]:
        """
        Look up the declared type of ``column`` in the table at ``path``.

        Args:
            path: Qualified table identity (namespace segments + name)
            column: Column name as declared

        Returns:
            The declared DataType, or None when the table or column is unknown
        """
        table = self.get_table(path)
        if table is None:
            return None

        field = table.get_field(column)
        if field is None:
            return None

        return field.datatype.type

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[TableDefinition]:
        return iter(self._tables)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (list, tuple)):
            return False
        return tuple(path) in self._index


def _load_yaml_file(path: Path) -> Any:
    """Load a catalog document from a YAML file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {path}: {e}") from e


def _load_json_file(path: Path) -> Any:
    """Load a catalog document from a JSON file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in {path}: {e}") from e
