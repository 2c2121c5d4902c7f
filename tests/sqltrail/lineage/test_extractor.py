"""Tests for statement extraction and output item resolution."""

import pytest
from sqlglot.errors import ParseError

from sqltrail.lineage.extractor import (
    AmbiguousColumnError,
    OutputItem,
    SourceTable,
    extract_items_and_tables,
    parse_sql,
)


def _extract(sql):
    """Extract tables and items from every statement in ``sql``."""
    tables = []
    items = []
    for statement in parse_sql(sql):
        extract_items_and_tables(statement, tables, items)
    return tables, items


class TestParseSql:
    """Tests for parse_sql."""

    def test_single_statement(self):
        assert len(parse_sql("SELECT id FROM users")) == 1

    def test_multiple_statements(self):
        assert len(parse_sql("SELECT id FROM a; SELECT id FROM b;")) == 2

    def test_empty_sql(self):
        assert parse_sql("") == []

    def test_invalid_sql_raises(self):
        with pytest.raises(ParseError):
            parse_sql("SELECT * FROM users WHERE (id = 1")


class TestExtractTables:
    """Tests for FROM/JOIN extraction."""

    def test_single_table(self):
        tables, _ = _extract("SELECT id FROM users")
        assert tables == [SourceTable(origin=["users"], alias=None)]

    def test_qualified_table_with_alias(self):
        tables, _ = _extract("SELECT u.id FROM public.users u")
        assert tables == [SourceTable(origin=["public", "users"], alias="u")]

    def test_as_alias(self):
        tables, _ = _extract("SELECT u.id FROM public.users AS u")
        assert tables[0].alias == "u"

    def test_joins_in_syntactic_order(self):
        tables, _ = _extract(
            """
            SELECT a.x, b.y, c.z
            FROM t1 a
            JOIN t2 b ON a.id = b.id
            LEFT JOIN s.t3 c ON a.id = c.id
            """
        )

        assert [t.origin for t in tables] == [["t1"], ["t2"], ["s", "t3"]]
        assert [t.alias for t in tables] == ["a", "b", "c"]

    def test_derived_table_skipped(self):
        tables, _ = _extract("SELECT s.id FROM (SELECT id FROM users) s")
        assert tables == []

    def test_derived_table_in_join_skipped(self):
        tables, _ = _extract(
            "SELECT a.id FROM t1 a JOIN (SELECT id FROM t2) b ON a.id = b.id"
        )
        assert [t.origin for t in tables] == [["t1"]]

    def test_source_table_name_is_last_segment(self):
        table = SourceTable(origin=["db", "public", "users"])
        assert table.name == "users"


class TestExtractItems:
    """Tests for projection extraction."""

    def test_unqualified_column(self):
        _, items = _extract("SELECT id FROM users")
        assert items == [OutputItem(name="id", path=[], alias=None)]

    def test_qualified_column(self):
        _, items = _extract("SELECT u.id FROM users u")
        assert items == [OutputItem(name="id", path=["u"])]

    def test_multi_segment_qualifier(self):
        _, items = _extract("SELECT public.users.id FROM public.users")
        assert items[0].path == ["public", "users"]
        assert items[0].name == "id"

    def test_aliased_qualified_column(self):
        _, items = _extract("SELECT u.id AS user_id FROM public.users u")
        assert items == [OutputItem(name="id", path=["u"], alias="user_id")]

    def test_aliased_plain_column(self):
        _, items = _extract("SELECT id AS user_id FROM users")
        assert items == [OutputItem(name="id", path=[], alias="user_id")]

    def test_is_not_null_unwrapped(self):
        _, items = _extract("SELECT u.email IS NOT NULL AS has_email FROM users u")
        assert items == [OutputItem(name="email", path=["u"], alias="has_email")]

    def test_unsupported_projections_skipped(self):
        _, items = _extract(
            """
            SELECT
                *,
                u.*,
                1 AS one,
                'x' AS letter,
                COUNT(u.id) AS total,
                u.a + u.b AS summed,
                UPPER(u.name),
                u.name
            FROM users u
            """
        )

        assert items == [OutputItem(name="name", path=["u"])]

    def test_projection_order_preserved(self):
        _, items = _extract("SELECT c, a AS x, t.b FROM t")
        assert [item.display_name for item in items] == ["c", "x", "b"]

    def test_items_start_untyped(self):
        _, items = _extract("SELECT id FROM users")
        assert items[0].data_type is None


class TestNonSelectStatements:
    """Statements other than a plain SELECT contribute nothing."""

    @pytest.mark.parametrize(
        "sql",
        [
            "INSERT INTO target SELECT id FROM source",
            "CREATE TABLE t (id INT)",
            "SELECT id FROM a UNION SELECT id FROM b",
            "DELETE FROM users WHERE id = 1",
        ],
    )
    def test_no_op(self, sql):
        tables, items = _extract(sql)
        assert tables == []
        assert items == []

    def test_accumulates_across_statements(self):
        tables, items = _extract("SELECT a FROM t1; SELECT b FROM t2;")
        assert [t.origin for t in tables] == [["t1"], ["t2"]]
        assert [i.name for i in items] == ["a", "b"]

    def test_appends_to_existing_accumulators(self):
        tables = [SourceTable(origin=["existing"])]
        items = [OutputItem(name="existing")]

        extract_items_and_tables(parse_sql("SELECT id FROM users")[0], tables, items)

        assert [t.origin for t in tables] == [["existing"], ["users"]]
        assert [i.name for i in items] == ["existing", "id"]


class TestDisplayName:
    """Tests for OutputItem.display_name."""

    def test_alias_wins(self):
        assert OutputItem(name="id", alias="user_id").display_name == "user_id"

    def test_name_without_alias(self):
        assert OutputItem(name="id").display_name == "id"


class TestResolvePath:
    """Tests for qualifier resolution."""

    @pytest.fixture
    def joined_tables(self):
        return [
            SourceTable(origin=["public", "users"], alias="u"),
            SourceTable(origin=["public", "orders"], alias="o"),
            SourceTable(origin=["refs"], alias=None),
        ]

    def test_unqualified_single_table(self):
        tables = [SourceTable(origin=["public", "users"], alias="u")]
        item = OutputItem(name="id")
        assert item.resolve_path(tables) == ["public", "users"]

    def test_unqualified_multiple_tables_is_ambiguous(self, joined_tables):
        item = OutputItem(name="id")

        with pytest.raises(AmbiguousColumnError) as excinfo:
            item.resolve_path(joined_tables)

        assert excinfo.value.column == "id"
        assert excinfo.value.table_count == 3

    def test_unqualified_no_tables_is_ambiguous(self):
        with pytest.raises(AmbiguousColumnError):
            OutputItem(name="id").resolve_path([])

    def test_alias_resolves_to_origin(self, joined_tables):
        item = OutputItem(name="total", path=["o"])
        assert item.resolve_path(joined_tables) == ["public", "orders"]

    def test_first_matching_alias_wins(self):
        tables = [
            SourceTable(origin=["first"], alias="x"),
            SourceTable(origin=["second"], alias="x"),
        ]
        assert OutputItem(name="c", path=["x"]).resolve_path(tables) == ["first"]

    def test_unknown_alias_resolves_to_empty(self, joined_tables):
        item = OutputItem(name="id", path=["zz"])
        assert item.resolve_path(joined_tables) == []

    def test_table_name_is_not_an_alias(self, joined_tables):
        item = OutputItem(name="id", path=["refs"])
        assert item.resolve_path(joined_tables) == []

    def test_multi_segment_path_returned_unchanged(self, joined_tables):
        item = OutputItem(name="id", path=["u", "nested"])
        assert item.resolve_path(joined_tables) == ["u", "nested"]

    def test_resolution_is_deterministic(self, joined_tables):
        item = OutputItem(name="total", path=["o"])
        first = item.resolve_path(joined_tables)
        assert all(item.resolve_path(joined_tables) == first for _ in range(5))


class TestFind:
    """Tests for OutputItem.find."""

    def test_alias_match_preferred_over_earlier_name_match(self):
        items = [
            OutputItem(name="id", path=["a"]),
            OutputItem(name="other", path=["b"], alias="id"),
        ]
        assert OutputItem.find(items, "id") is items[1]

    def test_name_match(self):
        items = [
            OutputItem(name="id", path=["u"], alias="user_id"),
            OutputItem(name="email"),
        ]
        assert OutputItem.find(items, "id") is items[0]

    def test_first_match_in_order(self):
        items = [OutputItem(name="id", path=["a"]), OutputItem(name="id", path=["b"])]
        assert OutputItem.find(items, "id") is items[0]

    def test_no_match(self):
        assert OutputItem.find([OutputItem(name="id")], "missing") is None


class TestFilterBySource:
    """Tests for OutputItem.filter_by_source."""

    def test_alias_match(self):
        tables = [
            SourceTable(origin=["t1"], alias="a"),
            SourceTable(origin=["t2"], alias="b"),
        ]
        items = [OutputItem(name="x", path=["a"]), OutputItem(name="y", path=["b"])]

        kept = OutputItem.filter_by_source(items, tables[0], tables)
        assert [i.name for i in kept] == ["x"]

    def test_full_path_match(self):
        tables = [
            SourceTable(origin=["s", "t1"]),
            SourceTable(origin=["s", "t2"]),
        ]
        items = [
            OutputItem(name="x", path=["s", "t1"]),
            OutputItem(name="y", path=["s", "t2"]),
        ]

        kept = OutputItem.filter_by_source(items, tables[1], tables)
        assert [i.name for i in kept] == ["y"]

    def test_unqualified_item_kept_for_only_source(self):
        tables = [SourceTable(origin=["active_users"])]
        items = [OutputItem(name="id")]

        kept = OutputItem.filter_by_source(items, tables[0], tables)
        assert kept == items

    def test_unqualified_item_dropped_with_several_sources(self):
        tables = [
            SourceTable(origin=["t1"], alias="a"),
            SourceTable(origin=["t2"], alias="b"),
        ]
        items = [OutputItem(name="id")]

        assert OutputItem.filter_by_source(items, tables[0], tables) == []
        assert OutputItem.filter_by_source(items, tables[1], tables) == []

    def test_keeps_item_order(self):
        tables = [SourceTable(origin=["t"], alias="t")]
        items = [
            OutputItem(name="c", path=["t"]),
            OutputItem(name="a", path=["t"]),
            OutputItem(name="b", path=["t"]),
        ]

        kept = OutputItem.filter_by_source(items, tables[0], tables)
        assert [i.name for i in kept] == ["c", "a", "b"]
