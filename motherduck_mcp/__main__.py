# motherduck_mcp/__main__.py

import argparse
import logging
import sys

from .config import load_settings

logger = logging.getLogger("motherduck_mcp")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="MCP server exposing DuckDB / MotherDuck tools.")
    parser.add_argument("--transport", choices=["stdio", "http"], default="stdio", help="Protocol transport (default: stdio)")
    parser.add_argument("--host", default=None, help="Bind address for the http transport (env HOST, default 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Port for the http transport (env PORT, default 3008)")
    parser.add_argument("--database", default=None, help="Engine database path (default: :memory:)")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def run(argv=None) -> int:
    args = parse_args(argv)
    settings = load_settings(host=args.host, port=args.port, database=args.database,
                             log_level=args.log_level.upper() if args.log_level else None)

    # stdout carries protocol frames on stdio; logs always go to stderr
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if args.transport == "http":
        import uvicorn
        from .server import create_app

        logger.info("MotherDuck MCP Server running on http://%s:%s/mcp", settings.host, settings.port)
        uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    else:
        from .server import build_protocol
        from .stdio import serve_stdio

        serve_stdio(build_protocol(settings))
    return 0


def main() -> None:
    try:
        code = run()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        code = 0
    except Exception:
        logger.exception("Server error")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
