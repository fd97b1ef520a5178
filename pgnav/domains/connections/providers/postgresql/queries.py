"""Catalog metadata queries for PostgreSQL."""

SYSTEM_SCHEMAS = ("pg_catalog", "information_schema", "pg_toast")

_SYSTEM_SCHEMA_LIST = ", ".join(f"'{schema}'" for schema in SYSTEM_SCHEMAS)

DATABASES_QUERY = """
SELECT datname
FROM pg_database
WHERE datistemplate = false
ORDER BY datname
"""

TABLES_QUERY = f"""
SELECT schemaname AS schema, tablename AS name
FROM pg_catalog.pg_tables
WHERE schemaname NOT IN ({_SYSTEM_SCHEMA_LIST})
ORDER BY name, schema
"""

# prokind exists from PostgreSQL 11 on; older servers have no procedures.
ROUTINES_QUERY = f"""
SELECT n.nspname AS schema,
    p.proname AS name,
    pg_get_function_identity_arguments(p.oid) AS args,
    CASE WHEN l.lanname = 'internal' THEN p.prosrc
        ELSE pg_get_functiondef(p.oid)
        END AS definition
FROM pg_proc p
LEFT JOIN pg_namespace n ON p.pronamespace = n.oid
LEFT JOIN pg_language l ON p.prolang = l.oid
WHERE p.prokind = %s
    AND n.nspname NOT IN ({_SYSTEM_SCHEMA_LIST})
ORDER BY name
"""

LEGACY_FUNCTIONS_QUERY = f"""
SELECT n.nspname AS schema,
    p.proname AS name,
    pg_get_function_identity_arguments(p.oid) AS args,
    CASE WHEN l.lanname = 'internal' THEN p.prosrc
        ELSE pg_get_functiondef(p.oid)
        END AS definition
FROM pg_proc p
LEFT JOIN pg_namespace n ON p.pronamespace = n.oid
LEFT JOIN pg_language l ON p.prolang = l.oid
WHERE NOT p.proisagg AND NOT p.proiswindow
    AND n.nspname NOT IN ({_SYSTEM_SCHEMA_LIST})
ORDER BY name
"""

PROKIND_MIN_SERVER_VERSION = 110000
