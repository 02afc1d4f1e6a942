# motherduck_mcp/config.py

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load env file from the package directory (if present), then the working directory
env_path = os.path.join(os.path.dirname(__file__), '.env')
load_dotenv(env_path)
load_dotenv()

SERVER_NAME = 'mcp-server-motherduck'
SERVER_VERSION = '0.2.2'

# The MotherDuck extension reads either spelling
TOKEN_ENV_VARS = ('motherduck_token', 'MOTHERDUCK_TOKEN')


@dataclass(frozen=True)
class Settings:
    server_name: str = SERVER_NAME
    server_version: str = SERVER_VERSION
    database: str = ':memory:'
    host: str = '127.0.0.1'
    port: int = 3008
    query_timeout_seconds: float = 0.0
    log_level: str = 'INFO'


def load_settings(**overrides) -> Settings:
    """Build settings from the environment; keyword overrides win (CLI flags)."""
    values = {
        'database': os.getenv('MOTHERDUCK_MCP_DATABASE', ':memory:'),
        'host': os.getenv('HOST', '127.0.0.1'),
        'port': int(os.getenv('PORT', '3008')),
        'query_timeout_seconds': float(os.getenv('MOTHERDUCK_MCP_QUERY_TIMEOUT', '0')),
        'log_level': os.getenv('MOTHERDUCK_MCP_LOG_LEVEL', 'INFO').upper(),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)


def get_motherduck_token() -> Optional[str]:
    """Return the MotherDuck credential, or None when unset or blank.

    Read on every call so a token exported after startup is picked up.
    """
    for name in TOKEN_ENV_VARS:
        token = os.getenv(name)
        if token and token.strip():
            return token
    return None
