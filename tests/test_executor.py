"""Tests for query execution, CSV export and function templates."""

from pathlib import Path

import pytest

from pgnav.domains.explorer.domain.rows import TableRow
from pgnav.domains.query.app.executor import (
    execute_query,
    export_results,
    format_status,
    output_path_for,
    run_query_file,
    to_csv,
)
from pgnav.domains.query.app.results import QueryResult, command_from_status
from pgnav.domains.query.app.templates import (
    default_function_query,
    select_table_query,
    validate_function_name,
    validate_return_type,
)
from pgnav.shared.core.errors import NoQueryError


@pytest.fixture
def select_result():
    return QueryResult(
        command="SELECT",
        row_count=2,
        columns=["id", "name", "note"],
        rows=[
            {"note": "first", "name": "alpha", "id": 1},
            {"id": 2, "name": "beta", "note": None},
        ],
    )


class TestOutputPath:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("q.sql", "q-output.csv"),
            ("q.psql", "q-output.csv"),
            ("q.txt", "q.txt-output.csv"),
            ("report.final.sql", "report.final-output.csv"),
        ],
    )
    def test_names(self, tmp_path, source, expected):
        assert output_path_for(tmp_path / source) == tmp_path / expected


class TestCsv:
    def test_column_order_follows_result_fields(self, select_result):
        assert to_csv(select_result) == "id,name,note\n1,alpha,first\n2,beta,\n"

    def test_values_are_not_quoted(self):
        result = QueryResult("SELECT", 1, ["a"], [{"a": "x,y"}])
        assert to_csv(result) == "a\nx,y\n"

    def test_export_writes_next_to_source(self, tmp_path, select_result):
        source = tmp_path / "q.sql"
        output = export_results(select_result, source)
        assert output == tmp_path / "q-output.csv"
        assert output.read_text() == to_csv(select_result)

    def test_export_skips_empty_results(self, tmp_path):
        result = QueryResult("UPDATE", 3)
        assert export_results(result, tmp_path / "q.sql") is None
        assert list(tmp_path.iterdir()) == []

    def test_write_errors_propagate(self, tmp_path, select_result):
        (tmp_path / "q-output.csv").mkdir()
        with pytest.raises(OSError):
            export_results(select_result, tmp_path / "q.sql")


class TestStatus:
    def test_with_output_file(self, select_result):
        status = format_status(select_result, Path("/tmp/q-output.csv"))
        assert status == 'Successfully executed "SELECT" query (2 rows). Results written to file "/tmp/q-output.csv"'

    def test_without_output_file(self):
        assert format_status(QueryResult("UPDATE", 1)) == 'Successfully executed "UPDATE" query (1 row).'

    @pytest.mark.parametrize(
        ("status", "command"),
        [("SELECT 3", "SELECT"), ("CREATE FUNCTION", "CREATE"), ("", ""), (None, "")],
    )
    def test_command_from_status(self, status, command):
        assert command_from_status(status) == command


class TestExecuteQuery:
    def test_empty_query(self, fake_adapter, server):
        with pytest.raises(NoQueryError) as excinfo:
            execute_query(fake_adapter, server, "   \n")
        assert str(excinfo.value) == "Open a PostgreSQL query before executing."

    def test_runs_on_one_connection(self, fake_adapter, server):
        fake_adapter.result = QueryResult("SELECT", 0)
        execute_query(fake_adapter, server.for_database("sales"), "select 1")
        assert fake_adapter.calls == [("execute", "select 1")]
        assert [config.database for config in fake_adapter.connected] == ["sales"]
        assert fake_adapter.connections[0].closed

    def test_run_query_file(self, tmp_path, fake_adapter, server, select_result):
        source = tmp_path / "report.psql"
        source.write_text("select * from t")
        fake_adapter.result = select_result
        result, status = run_query_file(fake_adapter, server, source)
        assert result is select_result
        assert (tmp_path / "report-output.csv").exists()
        assert status.endswith(f'Results written to file "{tmp_path / "report-output.csv"}"')

    def test_run_query_file_does_not_retry_failed_write(self, tmp_path, fake_adapter, server, select_result):
        source = tmp_path / "q.sql"
        source.write_text("select * from t")
        (tmp_path / "q-output.csv").mkdir()
        fake_adapter.result = select_result
        with pytest.raises(OSError):
            run_query_file(fake_adapter, server, source)
        assert fake_adapter.calls == [("execute", "select * from t")]


class TestTemplates:
    def test_default_function_query(self):
        assert default_function_query("add_one", "integer") == (
            "CREATE OR REPLACE FUNCTION add_one()\n"
            " RETURNS integer\n"
            " LANGUAGE plpgsql\n"
            "AS $function$\n"
            "\tBEGIN\n"
            "\tEND;\n"
            "$function$\n"
        )

    @pytest.mark.parametrize("name", ["", "two words", "tab\tname"])
    def test_invalid_function_names(self, name):
        assert validate_function_name(name) is not None

    def test_valid_inputs(self):
        assert validate_function_name("add_one") is None
        assert validate_return_type("void") is None
        assert validate_return_type("  ") is not None

    def test_select_table_query_quotes_identifiers(self):
        assert select_table_query(TableRow("public", 'we"ird')) == 'SELECT * FROM "public"."we""ird" LIMIT 100;\n'
