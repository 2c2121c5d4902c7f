"""Extraction of source tables and output columns from parsed SQL statements."""

from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field
from sqlglot import exp, parse

from sqltrail.global_models import DataType


class LineageError(Exception):
    """Base exception for lineage resolution failures."""

    pass


class AmbiguousColumnError(LineageError):
    """Raised when an unqualified column cannot be tied to a single source table."""

    def __init__(self, column: str, table_count: int):
        self.column = column
        self.table_count = table_count
        super().__init__(
            f"Ambiguous column '{column}': unqualified column with "
            f"{table_count} source tables"
        )


class SourceTable(BaseModel):
    """A table referenced in a FROM or JOIN clause."""

    origin: List[str] = Field(
        ..., description="Qualified path segments as written in the query"
    )
    alias: Optional[str] = Field(None, description="Alias bound to the table")

    @property
    def name(self) -> str:
        """Display name of the table (last segment of the origin path)."""
        return self.origin[-1] if self.origin else ""


class OutputItem(BaseModel):
    """A projected column of a model's query."""

    name: str = Field(..., description="Underlying column identifier")
    path: List[str] = Field(
        default_factory=list, description="Qualifier segments before the name"
    )
    alias: Optional[str] = Field(None, description="Alias from 'expr AS alias'")
    data_type: Optional[DataType] = Field(
        None, description="Resolved coarse type (None until resolved)"
    )

    @property
    def display_name(self) -> str:
        """The alias when present, otherwise the column name."""
        if self.alias is not None:
            return self.alias
        return self.name

    def resolve_path(self, tables: Sequence[SourceTable]) -> List[str]:
        """
        Resolve this item's qualifier to the origin path of a source table.

        Args:
            tables: Source tables of the model the item belongs to

        Returns:
            The origin path of the matching table, the qualifier itself when it
            already has several segments, or an empty list when a single-segment
            qualifier matches no alias.

        Raises:
            AmbiguousColumnError: If the item is unqualified and the model does
                not have exactly one source table
        """
        if not self.path:
            if len(tables) == 1:
                return list(tables[0].origin)
            raise AmbiguousColumnError(self.name, len(tables))

        if len(self.path) > 1:
            return list(self.path)

        for table in tables:
            if table.alias is not None and table.alias == self.path[0]:
                return list(table.origin)

        return []

    @staticmethod
    def find(items: Sequence["OutputItem"], name: str) -> Optional["OutputItem"]:
        """
        Find an item by alias first, then by column name.

        Args:
            items: Items to search, in order
            name: Name to look for

        Returns:
            The first item whose alias equals ``name``; failing that, the first
            item whose column name equals ``name``; otherwise None
        """
        for item in items:
            if item.alias is not None and item.alias == name:
                return item

        for item in items:
            if item.name == name:
                return item

        return None

    @staticmethod
    def filter_by_source(
        items: Sequence["OutputItem"],
        source: SourceTable,
        tables: Sequence[SourceTable] = (),
    ) -> List["OutputItem"]:
        """
        Keep the items that are drawn from ``source``, for edge labels.

        An item is kept when its first qualifier segment is the source's alias,
        when its full qualifier equals the source's origin path, or when it is
        unqualified and ``source`` is the model's only table.

        Args:
            items: All output items of a model
            source: One of the model's source tables
            tables: All source tables of the model

        Returns:
            Matching items in their original order
        """
        single_source = len(tables) == 1 and tables[0] == source
        kept = []
        for item in items:
            if not item.path:
                if single_source:
                    kept.append(item)
                continue

            if source.alias is not None and source.alias == item.path[0]:
                kept.append(item)
            elif source.origin == item.path:
                kept.append(item)

        return kept


def parse_sql(sql: str, dialect: Optional[str] = None) -> List[exp.Expression]:
    """
    Parse SQL text into statements.

    Args:
        sql: SQL text, possibly holding several statements
        dialect: sqlglot dialect name (None uses the generic dialect)

    Returns:
        Parsed statements, with empty statements removed

    Raises:
        ParseError: If the SQL cannot be parsed
        TokenError: If the SQL cannot be tokenized
    """
    return [expr for expr in parse(sql, dialect=dialect) if expr is not None]


def extract_items_and_tables(
    statement: exp.Expression,
    tables: List[SourceTable],
    items: List[OutputItem],
) -> None:
    """
    Append the source tables and output items of a SELECT statement.

    Statements that are not a plain SELECT are ignored. Only simple table
    references in FROM/JOIN are recorded, and only plain or qualified column
    projections (optionally aliased) become items; every other shape is
    skipped silently.

    Args:
        statement: A parsed statement
        tables: Accumulator for source tables, in syntactic order
        items: Accumulator for output items, in projection order
    """
    if not isinstance(statement, exp.Select):
        return

    for projection in statement.expressions:
        item = _extract_item(projection)
        if item is not None:
            items.append(item)

    from_clause = _from_clause(statement)
    if from_clause is not None:
        table = _extract_table(from_clause.this)
        if table is not None:
            tables.append(table)

    for join in statement.args.get("joins") or []:
        table = _extract_table(join.this)
        if table is not None:
            tables.append(table)


def _from_clause(select: exp.Select) -> Optional[exp.From]:
    # The arg key is "from_" in newer sqlglot releases
    from_clause = select.args.get("from") or select.args.get("from_")
    if isinstance(from_clause, exp.From):
        return from_clause
    return None


def _extract_table(relation: Optional[exp.Expression]) -> Optional[SourceTable]:
    if not isinstance(relation, exp.Table):
        return None
    if not isinstance(relation.this, exp.Identifier):
        return None

    return SourceTable(
        origin=[part.name for part in relation.parts],
        alias=relation.alias or None,
    )


def _extract_item(projection: exp.Expression) -> Optional[OutputItem]:
    if isinstance(projection, exp.Alias):
        column = _unwrap_not_null(projection.this)
        segments = _column_segments(column)
        if segments is None:
            return None
        path, name = segments
        return OutputItem(name=name, path=path, alias=projection.alias)

    segments = _column_segments(projection)
    if segments is None:
        return None
    path, name = segments
    return OutputItem(name=name, path=path)


def _unwrap_not_null(expression: exp.Expression) -> exp.Expression:
    """Strip an ``IS NOT NULL`` wrapper, returning the tested expression."""
    if (
        isinstance(expression, exp.Not)
        and isinstance(expression.this, exp.Is)
        and isinstance(expression.this.expression, exp.Null)
    ):
        return expression.this.this
    return expression


def _column_segments(
    expression: exp.Expression,
) -> Optional[Tuple[List[str], str]]:
    """Split a column reference into (qualifier path, column name)."""
    if not isinstance(expression, exp.Column):
        return None
    if not isinstance(expression.this, exp.Identifier):
        # t.* and similar
        return None

    segments = [part.name for part in expression.parts]
    return segments[:-1], segments[-1]
