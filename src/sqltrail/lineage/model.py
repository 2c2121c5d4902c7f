"""SQL models: one SQL file with its source tables and typed output columns."""

from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from sqltrail.catalog import SchemaCatalog
from sqltrail.global_models import DataType
from sqltrail.lineage.extractor import (
    AmbiguousColumnError,
    OutputItem,
    SourceTable,
    extract_items_and_tables,
    parse_sql,
)
from sqltrail.utils.file_utils import read_sql_file


class IssueKind(str, Enum):
    """Kind of non-fatal problem found while typing a column."""

    AMBIGUOUS = "ambiguous"
    UNRESOLVED = "unresolved"


class ResolutionIssue(BaseModel):
    """A column whose source table or type could not be determined."""

    model: str = Field(..., description="Name of the model holding the column")
    column: str = Field(..., description="Display name of the column")
    kind: IssueKind = Field(..., description="What went wrong")
    message: str = Field(..., description="Human-readable explanation")


class SqlModel(BaseModel):
    """A lineage-tracked unit derived from one SQL file."""

    name: str = Field(..., description="Model name (file stem)")
    file_path: Optional[str] = Field(None, description="Path of the SQL file")
    tables: List[SourceTable] = Field(default_factory=list)
    items: List[OutputItem] = Field(default_factory=list)

    @classmethod
    def from_sql(
        cls,
        name: str,
        sql: str,
        dialect: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> "SqlModel":
        """
        Build a model from SQL text.

        Tables and items from every SELECT statement in the text are
        accumulated in order, not just those of the first one, so a file
        holding several SELECTs contributes all of their sources and
        columns to the one model. Statements of any other kind are ignored.

        Args:
            name: Model name
            sql: SQL text
            dialect: sqlglot dialect name (None uses the generic dialect)
            file_path: Optional path recorded for provenance

        Returns:
            SqlModel with extracted tables and untyped items

        Raises:
            ParseError: If the SQL cannot be parsed
            TokenError: If the SQL cannot be tokenized
        """
        tables: List[SourceTable] = []
        items: List[OutputItem] = []
        for statement in parse_sql(sql, dialect=dialect):
            extract_items_and_tables(statement, tables, items)

        return cls(name=name, file_path=file_path, tables=tables, items=items)

    @classmethod
    def from_path(cls, path: Path, dialect: Optional[str] = None) -> "SqlModel":
        """
        Load a model from a SQL file; the file stem becomes the model name.

        Raises:
            FileNotFoundError: If the file does not exist
            ParseError: If the SQL cannot be parsed
            TokenError: If the SQL cannot be tokenized
        """
        sql = read_sql_file(path)
        return cls.from_sql(path.stem, sql, dialect=dialect, file_path=str(path))

    def assign_datatypes(
        self,
        catalog: SchemaCatalog,
        others: Sequence["SqlModel"],
    ) -> List[ResolutionIssue]:
        """
        Assign a coarse type to every untyped output item.

        Each item is looked up in the catalog through its resolved origin path.
        Failing that, the last segment of the origin is taken as the name of a
        sibling model; the matching column of that sibling is resolved against
        the sibling's own tables and looked up in the catalog. Propagation
        stops after that single hop.

        Args:
            catalog: Schema catalog
            others: Read-only view of all models, taken before any typing

        Returns:
            Issues for items that stay untyped
        """
        issues: List[ResolutionIssue] = []

        for item in self.items:
            if item.data_type is not None:
                continue

            try:
                origin = item.resolve_path(self.tables)
            except AmbiguousColumnError as e:
                issues.append(
                    ResolutionIssue(
                        model=self.name,
                        column=item.display_name,
                        kind=IssueKind.AMBIGUOUS,
                        message=str(e),
                    )
                )
                continue

            data_type = catalog.data_type(origin, item.name)
            if data_type is None and origin:
                data_type = _propagate_from_sibling(
                    item.name, origin[-1], catalog, others
                )

            if data_type is None:
                issues.append(
                    ResolutionIssue(
                        model=self.name,
                        column=item.display_name,
                        kind=IssueKind.UNRESOLVED,
                        message=(
                            f"No type found for '{item.name}' in "
                            f"{'.'.join(origin) or 'an unknown table'}"
                        ),
                    )
                )
                continue

            item.data_type = data_type

        return issues


def _propagate_from_sibling(
    column: str,
    model_name: str,
    catalog: SchemaCatalog,
    others: Sequence[SqlModel],
) -> Optional[DataType]:
    """Type ``column`` through the model called ``model_name``, one hop deep."""
    for other in others:
        if other.name != model_name:
            continue

        sibling_item = OutputItem.find(other.items, column)
        if sibling_item is None:
            continue

        try:
            sibling_origin = sibling_item.resolve_path(other.tables)
        except AmbiguousColumnError:
            continue

        data_type = catalog.data_type(sibling_origin, sibling_item.name)
        if data_type is not None:
            return data_type

    return None
