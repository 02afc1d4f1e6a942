# motherduck_mcp/rpc.py

import logging
from typing import Any, Callable, Dict, Optional

from . import catalog
from .config import Settings
from .dispatcher import ToolDispatcher
from .errors import ToolError

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = '2024-11-05'

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


def error_response(request_id: Any, code: int, message: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


class McpProtocol:
    """JSON-RPC request surface shared by the stdio and HTTP transports.

    handle_message() takes one decoded message and returns the response
    envelope, or None for notifications.
    """

    def __init__(self, dispatcher: ToolDispatcher, settings: Settings):
        self.dispatcher = dispatcher
        self.settings = settings
        self._methods: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            "initialize": self._initialize,
            "ping": lambda params: {},
            "tools/list": lambda params: {"tools": self.dispatcher.list_tools()},
            "tools/call": self._call_tool,
            "prompts/list": lambda params: {"prompts": catalog.list_prompts()},
            "prompts/get": lambda params: catalog.get_prompt(params.get("name")),
            "resources/list": lambda params: {"resources": catalog.list_resources()},
            "resources/read": lambda params: catalog.read_resource(params.get("uri")),
        }

    def handle_message(self, message: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(message, dict) or message.get("jsonrpc") != "2.0" or not isinstance(message.get("method"), str):
            request_id = message.get("id") if isinstance(message, dict) else None
            return error_response(request_id, INVALID_REQUEST, "Invalid Request")

        method = message["method"]
        request_id = message.get("id")
        is_notification = "id" not in message

        if is_notification:
            # notifications/initialized, notifications/cancelled, ... need no answer
            logger.debug("Notification received: %s", method)
            return None

        handler = self._methods.get(method)
        if handler is None:
            return error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

        params = message.get("params") or {}
        if not isinstance(params, dict):
            return error_response(request_id, INVALID_REQUEST, "params must be an object")

        try:
            result = handler(params)
        except ToolError as e:
            return {"jsonrpc": "2.0", "id": request_id, "error": e.to_error()}
        except Exception as e:
            logger.exception("Unhandled error in %s", method)
            return error_response(request_id, INTERNAL_ERROR, f"Internal error: {e}")

        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    # --- Methods ---
    def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        client = params.get("clientInfo") or {}
        logger.info("Client connected: %s %s", client.get("name", "unknown"), client.get("version", ""))
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}, "prompts": {}, "resources": {}},
            "serverInfo": {"name": self.settings.server_name, "version": self.settings.server_version},
        }

    def _call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.dispatcher.call_tool(params.get("name"), params.get("arguments"))
