# motherduck_mcp/stdio.py

import json
import logging
import sys
from typing import IO, Optional, TextIO

from .rpc import PARSE_ERROR, McpProtocol, error_response

logger = logging.getLogger(__name__)


def serve_stdio(protocol: McpProtocol, stdin: Optional[IO] = None, stdout: Optional[TextIO] = None) -> None:
    """Serve newline-delimited JSON-RPC until stdin is closed.

    Requests are handled one at a time in arrival order. stdin may be a
    binary or text stream; undecodable bytes are replaced, so a corrupt frame
    gets a parse error instead of ending the loop.
    """
    stdin = stdin or sys.stdin.buffer
    stdout = stdout or sys.stdout
    logger.info("MotherDuck MCP Server running on stdio")

    for raw in stdin:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        line = raw.strip()
        if not line:
            continue
        try:
            message = json.loads(line)
        except ValueError:
            logger.warning("Dropping unparseable frame")
            response = error_response(None, PARSE_ERROR, "Parse error")
        else:
            response = protocol.handle_message(message)

        if response is not None:
            stdout.write(json.dumps(response) + "\n")
            stdout.flush()

    logger.info("stdin closed, stopping")
