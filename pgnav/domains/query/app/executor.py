"""Query execution and CSV export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pgnav.domains.connections.app.session import ConnectionSession
from pgnav.domains.connections.domain.config import ConnectionConfig
from pgnav.domains.query.app.results import QueryResult
from pgnav.shared.core.errors import NoQueryError
from pgnav.shared.core.utils import pluralize

logger = logging.getLogger(__name__)

POSTGRES_FILE_EXTENSIONS = (".psql", ".sql")
OUTPUT_SUFFIX = "-output.csv"


def execute_query(adapter: Any, config: ConnectionConfig, query: str) -> QueryResult:
    """Run ``query`` on a fresh connection to ``config``."""
    if not query.strip():
        raise NoQueryError()
    with ConnectionSession(config, adapter) as session:
        result = adapter.execute(session.connection, query)
    logger.info("Executed %s on %s (%d rows)", result.command or "query", config.database_id(), result.row_count)
    return result


def output_path_for(source: Path) -> Path:
    """``dir/q.sql`` -> ``dir/q-output.csv``; other extensions are kept in the stem."""
    name = source.name
    for extension in POSTGRES_FILE_EXTENSIONS:
        if name.endswith(extension) and len(name) > len(extension):
            name = name[: -len(extension)]
            break
    return source.with_name(f"{name}{OUTPUT_SUFFIX}")


def _format_value(value: Any) -> str:
    return "" if value is None else str(value)


def to_csv(result: QueryResult) -> str:
    """Comma-join header and rows in column order. Values are not quoted or escaped."""
    lines = [",".join(result.columns)]
    for row in result.rows:
        lines.append(",".join(_format_value(row.get(column)) for column in result.columns))
    return "\n".join(lines) + "\n"


def export_results(result: QueryResult, source: Path) -> Path | None:
    """Write rows next to ``source`` and return the file written, if any."""
    if not result.has_rows:
        return None
    output_path = output_path_for(source)
    output_path.write_text(to_csv(result), encoding="utf-8")
    logger.info("Wrote %d rows to %s", len(result.rows), output_path)
    return output_path


def format_status(result: QueryResult, output_path: Path | None = None) -> str:
    status = f'Successfully executed "{result.command}" query ({pluralize(result.row_count, "row")}).'
    if output_path is not None:
        status += f' Results written to file "{output_path}"'
    return status


def run_query_file(adapter: Any, config: ConnectionConfig, source: Path) -> tuple[QueryResult, str]:
    """Execute the SQL in ``source`` and export its rows. Returns the result and status line."""
    query = source.read_text(encoding="utf-8")
    result = execute_query(adapter, config, query)
    output_path = export_results(result, source)
    return result, format_status(result, output_path)
