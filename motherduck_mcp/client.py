# motherduck_mcp/client.py

import itertools
import json
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class MCPClient:
    """Async client for the HTTP variant of the server"""

    def __init__(self, base_url: str, name: str = "mcp_client", transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip('/')
        self.name = name
        self.tools: Dict[str, Dict[str, Any]] = {}
        self._transport = transport
        self._ids = itertools.count(1)

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=self._transport)

    async def load_tools(self) -> bool:
        """Load available tools from the server"""
        try:
            async with self._client(10.0) as client:
                resp = await client.get("/api/toolset")
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            logger.warning("[%s] Error loading tools: %s", self.name, e)
            return False

        self.tools = {tool['name']: tool for tool in data.get('tools', []) if isinstance(tool, dict) and 'name' in tool}
        logger.info("[%s] Loaded %d tools: %s", self.name, len(self.tools), list(self.tools))
        return True

    async def invoke_tool(self, tool_name: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Invoke a tool with a JSON-RPC tools/call request"""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": "tools/call",
            "params": {
                "name": tool_name,
                "arguments": params or {}
            }
        }

        try:
            async with self._client(30.0) as client:
                resp = await client.post("/mcp", json=payload)
        except httpx.HTTPError as e:
            error_msg = f"Tool invocation error: {e}"
            logger.warning("[%s] %s", self.name, error_msg)
            return {"error": error_msg, "status": "error"}

        if resp.status_code != 200:
            error_msg = f"HTTP {resp.status_code}: {resp.text}"
            logger.warning("[%s] Tool invocation failed: %s", self.name, error_msg)
            return {"error": error_msg, "status": "error"}

        result = resp.json()
        if "error" in result:
            error = result["error"]
            return {
                "error": error.get("message"),
                "type": (error.get("data") or {}).get("type"),
                "status": "error",
            }

        parsed_results: List[Any] = []
        for item in result.get("result", {}).get("content", []):
            if isinstance(item, dict) and item.get("type") == "text" and "text" in item:
                try:
                    # Query results are JSON documents
                    parsed_results.append(json.loads(item["text"]))
                except json.JSONDecodeError:
                    parsed_results.append(item["text"])
            else:
                parsed_results.append(item)

        return {"results": parsed_results, "status": "success"}

    def get_tool_info(self, tool_name: str) -> Optional[Dict[str, Any]]:
        return self.tools.get(tool_name)

    def get_available_tools(self) -> List[str]:
        return list(self.tools.keys())

    async def health_check(self) -> bool:
        """Check if the server is healthy"""
        try:
            async with self._client(5.0) as client:
                resp = await client.get("/health")
                return resp.status_code == 200
        except httpx.HTTPError:
            return False
