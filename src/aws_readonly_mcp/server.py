"""Entrypoint for the read-only AWS MCP server."""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from functools import partial
from pathlib import Path

if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))  # pragma: no cover

from aws_readonly_mcp import __version__
from aws_readonly_mcp.config import Settings, load_settings
from aws_readonly_mcp.dispatcher import Dispatcher
from aws_readonly_mcp.errors import ToolError
from aws_readonly_mcp.logging_utils import configure_logging
from aws_readonly_mcp.mcp_runtime import MCPServer
from aws_readonly_mcp.providers import IAMAdapter, S3Adapter, STSAdapter
from aws_readonly_mcp.session import SessionManager
from aws_readonly_mcp.tools import register_tools

SERVER_NAME = "aws-mcp-readonly"


def build_session(settings: Settings) -> SessionManager:
    """Create the session manager, assuming the startup role when configured."""
    timeout = settings.aws.sdk_timeout_seconds
    session = SessionManager(
        settings.aws.region,
        issuer=STSAdapter(settings.aws.region, timeout_seconds=timeout),
        storage_factory=partial(S3Adapter, timeout_seconds=timeout),
        identity_factory=partial(IAMAdapter, timeout_seconds=timeout),
    )
    role_arn = settings.aws.assume_role_arn
    if role_arn:
        logging.info("Assuming startup role %s", role_arn)
        try:
            asyncio.run(session.assume_role(role_arn, settings.aws.session_duration))
        except ToolError as exc:
            raise RuntimeError(f"Failed to assume startup role {role_arn}: {exc.message}") from exc
    return session


def build_server() -> MCPServer:
    """Create and configure the MCP server instance."""

    settings = load_settings()
    configure_logging()

    logging.info("Initializing read-only AWS MCP server v%s (region=%s)", __version__, settings.aws.region)
    if settings.logging.file:
        logging.info("Log file configured at: %s", settings.logging.file)

    dispatcher = Dispatcher(build_session(settings))
    server = MCPServer(
        name=SERVER_NAME,
        version=__version__,
        instructions=settings.server.instructions,
    )
    register_tools(server, dispatcher)
    return server


_server: MCPServer | None = None
_server_lock = threading.Lock()


def get_server() -> MCPServer:
    """Lazily initialise and return the module-level server instance."""
    global _server
    if _server is not None:
        return _server
    with _server_lock:
        if _server is None:
            _server = build_server()
        return _server


def run_entrypoint() -> None:
    """Build the server and serve MCP over stdio."""
    try:
        server = get_server()
    except RuntimeError as exc:
        logging.critical("Fatal error: %s", exc)
        raise SystemExit(1) from exc
    logging.info("Read-only AWS MCP server started")
    server.run()


if __name__ == "__main__":  # pragma: no cover
    run_entrypoint()
