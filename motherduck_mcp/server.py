# motherduck_mcp/server.py

import json
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import Settings, load_settings
from .dispatcher import ToolDispatcher
from .rpc import PARSE_ERROR, McpProtocol, error_response
from .session import SessionManager

logger = logging.getLogger(__name__)


def build_protocol(settings: Settings) -> McpProtocol:
    sessions = SessionManager(database=settings.database)
    dispatcher = ToolDispatcher(sessions, query_timeout_seconds=settings.query_timeout_seconds)
    return McpProtocol(dispatcher, settings)


def create_app(settings: Optional[Settings] = None, protocol: Optional[McpProtocol] = None) -> FastAPI:
    settings = settings or load_settings()
    protocol = protocol or build_protocol(settings)
    sessions = protocol.dispatcher.sessions

    app = FastAPI(
        title="MotherDuck MCP Server",
        description="DuckDB / MotherDuck tools over MCP JSON-RPC",
        version=settings.server_version,
    )
    app.state.protocol = protocol

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.get('/health')
    async def health():
        session = sessions.current_session()
        return JSONResponse(content={
            "status": "healthy",
            "server": settings.server_name,
            "version": settings.server_version,
            "session_active": session is not None,
            "session_kind": session.kind.value if session else None,
        })

    @app.get('/api/toolset')
    async def api_toolset():
        # Tool descriptors in listing order, same shape as tools/list
        return JSONResponse(content={"tools": protocol.dispatcher.list_tools()})

    @app.post('/mcp')
    async def mcp_rpc(request: Request):
        try:
            body = json.loads(await request.body())
        except ValueError:
            return JSONResponse(content=error_response(None, PARSE_ERROR, "Parse error"))

        # DuckDB calls block; keep them off the event loop
        response = await run_in_threadpool(protocol.handle_message, body)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(content=response)

    logger.info("HTTP app ready (database=%s)", settings.database)
    return app
