# motherduck_mcp/tools_manifest.py

from typing import Any, Dict, List, Type

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownTool, ValidationError


class _ToolArgs(BaseModel):
    # primitive type checks only, unknown keys are dropped
    model_config = ConfigDict(strict=True, extra='ignore')


class InitializeConnectionArgs(_ToolArgs):
    type: str = Field(description='Type of the database, either "DuckDB" or "MotherDuck"')


class ReadSchemasArgs(_ToolArgs):
    database_name: str = Field(description='name of the database')


class ExecuteQueryArgs(_ToolArgs):
    query: str = Field(description='SQL query to execute')


# Manifest describing the three tools exposed by the server, in listing order
TOOLSET: Dict[str, Dict[str, Any]] = {
    "initialize-connection": {
        "name": "initialize-connection",
        "description": "Create a connection to either a local DuckDB or MotherDuck and retrieve available databases",
        "args": InitializeConnectionArgs,
    },
    "read-schemas": {
        "name": "read-schemas",
        "description": "Get table schemas from a specific DuckDB/MotherDuck database",
        "args": ReadSchemasArgs,
    },
    "execute-query": {
        "name": "execute-query",
        "description": "Execute a query on the MotherDuck (DuckDB) database",
        "args": ExecuteQueryArgs,
    },
}


def list_tools() -> List[Dict[str, Any]]:
    return [
        {
            "name": tool["name"],
            "description": tool["description"],
            "inputSchema": tool["args"].model_json_schema(),
        }
        for tool in TOOLSET.values()
    ]


def _describe(error: Dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
    return f"{loc}: {error.get('msg', 'invalid value')}"


def validate(tool_name: str, raw_args: Any) -> BaseModel:
    """Check raw tool arguments against the tool's declared shape.

    Raises UnknownTool for names outside the manifest and ValidationError
    describing the first violated constraint otherwise.
    """
    tool = TOOLSET.get(tool_name) if isinstance(tool_name, str) else None
    if tool is None:
        raise UnknownTool(f"Unknown tool: {tool_name}")

    if raw_args is None:
        raw_args = {}
    if not isinstance(raw_args, dict):
        raise ValidationError(f"Invalid arguments for {tool_name}: expected an object")

    model: Type[BaseModel] = tool["args"]
    try:
        return model.model_validate(raw_args)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        raise ValidationError(f"Invalid arguments for {tool_name}: {_describe(first)}") from e
