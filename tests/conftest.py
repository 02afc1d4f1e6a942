import pytest

from motherduck_mcp.config import TOKEN_ENV_VARS, Settings
from motherduck_mcp.dispatcher import ToolDispatcher
from motherduck_mcp.rpc import McpProtocol
from motherduck_mcp.session import SessionManager


@pytest.fixture(autouse=True)
def no_motherduck_token(monkeypatch):
    for name in TOKEN_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sessions():
    return SessionManager(database=':memory:')


@pytest.fixture
def dispatcher(sessions):
    return ToolDispatcher(sessions)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def protocol(dispatcher, settings):
    return McpProtocol(dispatcher, settings)
