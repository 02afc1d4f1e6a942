# motherduck_mcp/catalog.py

from typing import Any, Dict, List

from .errors import UnknownPrompt, UnsupportedResource

INITIAL_PROMPT_NAME = 'duckdb-motherduck-initial-prompt'

PROMPT_TEMPLATE = """You are working with a DuckDB or MotherDuck database through three tools.

1. Call `initialize-connection` with type "DuckDB" for a local in-memory database or
   "MotherDuck" for a MotherDuck account (requires the `motherduck_token` environment
   variable on the server). The reply lists the databases that are available.
2. Call `read-schemas` with one of those database names to get the CREATE statements of
   its tables and views before writing any SQL against it.
3. Call `execute-query` with DuckDB SQL. Results come back as a JSON array with one
   object per row, keyed by column name.

Guidelines:
- Qualify table names with the database name shown by `read-schemas`.
- Start with small, exploratory queries (DESCRIBE, SUMMARIZE, SELECT ... LIMIT 10).
- DuckDB can read files directly, e.g. SELECT * FROM 'data.parquet' or read_csv('data.csv').
- If a query fails, read the error message, fix the SQL and try again.

Ask the user what they would like to explore, then begin by initializing a connection.
"""

PROMPTS = [
    {
        "name": INITIAL_PROMPT_NAME,
        "description": "A prompt to initialize a connection to duckdb or motherduck and start working with it",
    },
]


def list_prompts() -> List[Dict[str, Any]]:
    return [dict(p) for p in PROMPTS]


def get_prompt(name: str) -> Dict[str, Any]:
    if name != INITIAL_PROMPT_NAME:
        raise UnknownPrompt(f"Unknown prompt: {name}")
    return {
        "description": "Initial prompt for interacting with DuckDB/MotherDuck",
        "messages": [
            {
                "role": "user",
                "content": {"type": "text", "text": PROMPT_TEMPLATE},
            }
        ],
    }


def list_resources() -> List[Dict[str, Any]]:
    return []


def read_resource(uri: str) -> Dict[str, Any]:
    raise UnsupportedResource(f"Unsupported URI scheme: {uri}")
