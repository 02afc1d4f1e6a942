"""MotherDuck / DuckDB MCP server package"""

from .config import Settings, load_settings
from .session import DatabaseKind, SessionManager
from .dispatcher import ToolDispatcher
from .rpc import McpProtocol

__all__ = [
    'Settings',
    'load_settings',
    'DatabaseKind',
    'SessionManager',
    'ToolDispatcher',
    'McpProtocol',
]

__version__ = '0.2.2'
