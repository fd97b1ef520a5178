"""Tests for catalog nodes and the walker."""

from pgnav.domains.explorer.app.catalog import CatalogWalker, find_duplicate_names
from pgnav.domains.explorer.domain.nodes import (
    DatabaseNode,
    FolderKind,
    FolderNode,
    RoutineNode,
    ServerNode,
    TableNode,
)
from pgnav.domains.explorer.domain.rows import RoutineKind, RoutineRow, TableRow


class TestFindDuplicateNames:
    def test_marks_exactly_the_repeated_names(self):
        assert find_duplicate_names(["a", "b", "a", "c", "b", "a"]) == {"a", "b"}

    def test_no_duplicates(self):
        assert find_duplicate_names(["a", "b", "c"]) == set()

    def test_empty(self):
        assert find_duplicate_names([]) == set()


class TestCatalogWalker:
    def test_server_lists_databases(self, server, fake_adapter):
        fake_adapter.databases = ["postgres", "sales"]
        children = CatalogWalker(fake_adapter).list_children(ServerNode(server), server)
        assert children == [DatabaseNode("prod", "postgres"), DatabaseNode("prod", "sales")]
        assert fake_adapter.connections[0].closed

    def test_database_lists_three_folders_without_query(self, server, fake_adapter):
        children = CatalogWalker(fake_adapter).list_children(DatabaseNode("prod", "sales"), server)
        assert [child.label for child in children] == ["Tables", "Functions", "Stored Procedures"]
        assert fake_adapter.connected == []

    def test_tables_flag_exactly_the_duplicates(self, server, fake_adapter):
        fake_adapter.tables = [
            TableRow("public", "orders"),
            TableRow("archive", "orders"),
            TableRow("public", "customers"),
            TableRow("sales", "orders"),
        ]
        folder = FolderNode("prod", "sales", FolderKind.TABLES)
        children = CatalogWalker(fake_adapter).list_children(folder, server.for_database("sales"))
        flagged = [child for child in children if child.is_duplicate]
        assert len(flagged) == 3
        assert [child.label for child in children] == [
            "public.orders",
            "archive.orders",
            "customers",
            "sales.orders",
        ]

    def test_routines_use_argument_list_for_overloads(self, server, fake_adapter):
        fake_adapter.routines[RoutineKind.FUNCTION] = [
            RoutineRow("public", "total", "integer", "def1"),
            RoutineRow("public", "total", "integer, integer", "def2"),
            RoutineRow("public", "now_utc", "", "def3"),
        ]
        folder = FolderNode("prod", "sales", FolderKind.FUNCTIONS)
        children = CatalogWalker(fake_adapter).list_children(folder, server)
        assert [child.label for child in children] == ["public.total(integer)", "public.total(integer, integer)", "now_utc"]
        assert all(isinstance(child, RoutineNode) for child in children)
        assert children[2].definition == "def3"

    def test_routines_in_different_schemas_get_distinct_labels(self, server, fake_adapter):
        fake_adapter.routines[RoutineKind.FUNCTION] = [
            RoutineRow("public", "f", "", "def1"),
            RoutineRow("audit", "f", "", "def2"),
        ]
        folder = FolderNode("prod", "sales", FolderKind.FUNCTIONS)
        children = CatalogWalker(fake_adapter).list_children(folder, server)
        assert [child.label for child in children] == ["public.f()", "audit.f()"]

    def test_procedures_folder_queries_procedures(self, server, fake_adapter):
        fake_adapter.routines[RoutineKind.PROCEDURE] = [
            RoutineRow("public", "archive", "", "CALL", RoutineKind.PROCEDURE)
        ]
        folder = FolderNode("prod", "sales", FolderKind.PROCEDURES)
        children = CatalogWalker(fake_adapter).list_children(folder, server)
        assert children[0].get_node_kind() == "procedure"

    def test_children_are_refetched(self, server, fake_adapter):
        walker = CatalogWalker(fake_adapter)
        folder = FolderNode("prod", "sales", FolderKind.TABLES)
        fake_adapter.tables = [TableRow("public", "a")]
        assert len(walker.list_children(folder, server)) == 1
        fake_adapter.tables = [TableRow("public", "a"), TableRow("public", "b")]
        assert len(walker.list_children(folder, server)) == 2

    def test_leaves_have_no_children(self, server, fake_adapter):
        node = TableNode("prod", "sales", TableRow("public", "a"))
        assert CatalogWalker(fake_adapter).list_children(node, server) == []


class TestNodes:
    def test_node_ids_are_unique_per_overload(self):
        first = RoutineNode("prod", "sales", RoutineRow("public", "f", "integer", ""))
        second = RoutineNode("prod", "sales", RoutineRow("public", "f", "text", ""))
        assert first.node_id != second.node_id

    def test_expandable_kinds(self, server):
        assert ServerNode(server).allow_expand
        assert DatabaseNode("prod", "db").allow_expand
        assert FolderNode("prod", "db", FolderKind.TABLES).allow_expand
        assert not TableNode("prod", "db", TableRow("public", "t")).allow_expand

    def test_server_node_description(self, server):
        assert ServerNode(server).description == "db.example.com:5432"
