# motherduck_mcp/dispatcher.py

import json
import logging
import math
import threading
from typing import Any, Callable, Dict, List, Optional

import duckdb

from . import tools_manifest
from .errors import ConnectionFailed, QueryFailed, SchemaReadFailed
from .session import DatabaseKind, SessionManager

logger = logging.getLogger(__name__)

# database_name is always a bound parameter
TABLES_SQL = """
    SELECT string_agg(regexp_replace(sql, 'CREATE TABLE ', 'CREATE TABLE ' || database_name || '.'), '\n\n') AS sql
    FROM duckdb_tables()
    WHERE database_name = ?
"""

VIEWS_SQL = """
    SELECT string_agg(regexp_replace(sql, 'CREATE VIEW ', 'CREATE VIEW ' || database_name || '.'), '\n\n') AS sql
    FROM duckdb_views()
    WHERE schema_name NOT IN ('information_schema', 'pg_catalog', 'localmemdb')
    AND view_name NOT IN (
        'duckdb_columns', 'duckdb_constraints', 'duckdb_databases', 'duckdb_indexes',
        'duckdb_schemas', 'duckdb_tables', 'duckdb_types', 'duckdb_views', 'pragma_database_list',
        'sqlite_master', 'sqlite_schema', 'sqlite_temp_master', 'sqlite_temp_schema'
    )
    AND NOT internal
    AND database_name = ?
"""


def text_content(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


def unique_keys(columns: List[str]) -> List[str]:
    """Suffix repeated column names (id, id_1, ...) so no value is overwritten."""
    keys: List[str] = []
    taken = set(columns)
    seen = set()
    for name in columns:
        key = name
        if key in seen:
            n = 1
            while f"{name}_{n}" in taken:
                n += 1
            key = f"{name}_{n}"
            taken.add(key)
        seen.add(key)
        keys.append(key)
    return keys


def _json_safe(value: Any) -> Any:
    # NaN and +/-Infinity have no JSON spelling
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def serialize_rows(columns: List[str], rows: List[tuple]) -> str:
    keys = unique_keys(columns)
    records = [{key: _json_safe(value) for key, value in zip(keys, row)} for row in rows]
    # Non-JSON engine values (decimals, dates, UUIDs, intervals) are rendered with str()
    return json.dumps(records, indent=2, default=str, ensure_ascii=False, allow_nan=False)


class ToolDispatcher:
    """Single entry point for tool invocations.

    Validates arguments, routes to the handler and turns engine failures into
    ToolError subclasses. Handlers never retry.
    """

    def __init__(self, sessions: SessionManager, query_timeout_seconds: float = 0.0):
        self.sessions = sessions
        self.query_timeout_seconds = query_timeout_seconds
        self._handlers: Dict[str, Callable[[Any], Dict[str, Any]]] = {
            "initialize-connection": self._initialize_connection,
            "read-schemas": self._read_schemas,
            "execute-query": self._execute_query,
        }

    def list_tools(self) -> List[Dict[str, Any]]:
        return tools_manifest.list_tools()

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        logger.info("Tool call: %s", name)
        args = tools_manifest.validate(name, arguments)
        return self._handlers[name](args)

    # --- Handlers ---
    def _initialize_connection(self, args: tools_manifest.InitializeConnectionArgs) -> Dict[str, Any]:
        kind = DatabaseKind.parse(args.type)
        try:
            session = self.sessions.open_session(kind)
        except duckdb.Error as e:
            logger.warning("initialize-connection failed: %s", e)
            raise ConnectionFailed(f"Failed to connect: {e}") from e

        databases = ",\n".join(session.databases)
        return text_content(
            f"Connection to {kind.value} successfully established. Here are the available databases: \n{databases}"
        )

    def _read_schemas(self, args: tools_manifest.ReadSchemasArgs) -> Dict[str, Any]:
        with self.sessions.active_session() as session:
            try:
                tables = session.connection.execute(TABLES_SQL, [args.database_name]).fetchone()[0]
                views = session.connection.execute(VIEWS_SQL, [args.database_name]).fetchone()[0]
            except duckdb.Error as e:
                logger.warning("read-schemas failed for %s: %s", args.database_name, e)
                raise SchemaReadFailed(f"Failed to read schemas: {e}") from e

        return text_content(f"Here are all tables: \n{tables or ''} \n\n Here are all views: {views or ''}")

    def _execute_query(self, args: tools_manifest.ExecuteQueryArgs) -> Dict[str, Any]:
        with self.sessions.active_session() as session:
            connection = session.connection
            timer = None
            if self.query_timeout_seconds > 0:
                timer = threading.Timer(self.query_timeout_seconds, connection.interrupt)
                timer.daemon = True
                timer.start()
            try:
                connection.execute(args.query)
                if connection.description is None:
                    columns, rows = [], []
                else:
                    columns = [d[0] for d in connection.description]
                    rows = connection.fetchall()
            except duckdb.Error as e:
                logger.warning("execute-query failed: %s", e)
                raise QueryFailed(f"Error querying the database: {e}") from e
            finally:
                if timer is not None:
                    timer.cancel()

        return text_content(serialize_rows(columns, rows))
