"""Default SQL text for new objects."""

from __future__ import annotations

import re

from pgnav.domains.explorer.domain.rows import TableRow

_WHITESPACE = re.compile(r"\s")


def default_function_query(name: str, return_type: str) -> str:
    return f"""CREATE OR REPLACE FUNCTION {name}()
 RETURNS {return_type}
 LANGUAGE plpgsql
AS $function$
\tBEGIN
\tEND;
$function$
"""


def validate_function_name(name: str) -> str | None:
    if not name:
        return "Function name cannot be empty."
    if _WHITESPACE.search(name):
        return "Function name cannot contain whitespace."
    return None


def validate_return_type(return_type: str) -> str | None:
    if not return_type.strip():
        return "Return type cannot be empty."
    return None


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def select_table_query(row: TableRow, limit: int = 100) -> str:
    return f"SELECT * FROM {quote_identifier(row.schema)}.{quote_identifier(row.name)} LIMIT {limit};\n"
