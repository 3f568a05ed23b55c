"""
MCP Server implementation for LUXIA Studio.

Provides both stdio and SSE transport support for the Model Context Protocol.
"""

import json
import logging
from typing import Any, Literal

from mcp.server import Server
from mcp.server.lowlevel.server import request_ctx
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from luxia_studio.catalog import get_catalog
from luxia_studio.config import get_config
from luxia_studio.errors import ConfigurationError, GenerationError
from luxia_studio.mcp_server.session_store import close_session, current_session_id, open_session
from luxia_studio.mcp_server.tools import get_mcp_tools, mcp_generate_media, mcp_list_services

logger = logging.getLogger("luxia-studio-mcp")


async def dispatch_tool(
    name: str,
    arguments: dict[str, Any],
    session=None,
    session_id: str | None = None,
) -> dict[str, Any]:
    """Run one tool call and return its JSON-serialisable output."""
    if name == "list_services":
        return await mcp_list_services()
    if name == "generate_media":
        try:
            return await mcp_generate_media(
                service_name=arguments["service_name"],
                values=arguments.get("values") or {},
                gemini_api_key=arguments.get("gemini_api_key"),
                session=session,
                session_id=session_id,
            )
        except KeyError as e:
            return {"error": f"Unknown field or missing argument: {e}"}
        except (ConfigurationError, GenerationError, OSError) as e:
            logger.error(f"Error in generate_media: {e}")
            return {"error": str(e)}
    return {"error": f"Unknown tool: {name}"}


def create_mcp_server() -> Server:
    """
    Create and configure the MCP server instance.

    Returns:
        Configured MCP Server with the studio tools registered.
    """
    server = Server("luxia-studio-mcp")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return [
            Tool(
                name=t["name"],
                description=t["description"],
                inputSchema=t["inputSchema"],
            )
            for t in get_mcp_tools()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls."""
        logger.info(f"Tool call: {name} with args: {sorted(arguments)}")

        # Session is used for progress notifications
        session = None
        try:
            session = request_ctx.get().session
        except LookupError:
            logger.debug("No request context available for logging")

        result = await dispatch_tool(
            name, arguments, session=session, session_id=current_session_id.get()
        )
        return [TextContent(type="text", text=json.dumps(result, indent=2, ensure_ascii=False))]

    return server


async def run_stdio_server(server: Server) -> None:
    """
    Run MCP server with stdio transport.

    Used for desktop clients and local subprocess communication.
    """
    logger.info("Starting MCP server with stdio transport...")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def create_sse_app(server: Server) -> Starlette:
    """
    Create Starlette app for SSE transport.

    Used for remote/Docker deployment.
    """
    sse_transport = SseServerTransport("/messages/")

    async def handle_sse(scope, receive, send):
        """Handle SSE connections - raw ASGI handler."""
        headers = dict(scope.get("headers", []))
        api_key = headers.get(b"x-gemini-api-key", b"").decode("utf-8")

        # Tool calls on this connection run in tasks started by server.run,
        # which inherit the session id bound here.
        session_id = open_session(api_key or None)
        if api_key:
            logger.info(f"Received Gemini API key from client (session: {session_id})")

        try:
            async with sse_transport.connect_sse(scope, receive, send) as streams:
                await server.run(
                    streams[0],
                    streams[1],
                    server.create_initialization_options(),
                )
        finally:
            close_session(session_id)

    async def handle_messages(scope, receive, send):
        """Handle message POST requests - raw ASGI handler."""
        await sse_transport.handle_post_message(scope, receive, send)

    async def health_check(request):
        """Health check endpoint."""
        return JSONResponse({
            "status": "healthy",
            "service": "luxia-studio-mcp",
            "transport": "sse",
            "services": [service.service_name for service in get_catalog()],
        })

    return Starlette(
        routes=[
            Route("/health", health_check, methods=["GET"]),
            Mount("/sse/messages", app=handle_messages),
            Mount("/sse", app=handle_sse),
        ],
    )


async def run_sse_server(server: Server, host: str = "0.0.0.0", port: int = 8080) -> None:
    """
    Run MCP server with SSE transport.

    Args:
        server: MCP Server instance
        host: Host to bind to
        port: Port to listen on
    """
    import uvicorn

    logger.info(f"Starting MCP server with SSE transport on {host}:{port}...")

    app = create_sse_app(server)
    config = uvicorn.Config(app, host=host, port=port, log_level="info")
    server_instance = uvicorn.Server(config)
    await server_instance.serve()


async def run_mcp_server(
    transport: Literal["stdio", "sse"] | None = None,
    host: str = "0.0.0.0",
    port: int | None = None,
) -> None:
    """
    Run MCP server with specified transport.

    Args:
        transport: Transport type - "stdio" or "sse". Defaults to config.mcp_transport.
        host: Host for SSE transport (default: 0.0.0.0)
        port: Port for SSE transport. Defaults to config.mcp_port.
    """
    config = get_config()
    transport = transport or config.mcp_transport
    port = port or config.mcp_port
    server = create_mcp_server()

    if transport == "stdio":
        await run_stdio_server(server)
    elif transport == "sse":
        await run_sse_server(server, host, port)
    else:
        raise ValueError(f"Unknown transport: {transport}. Use 'stdio' or 'sse'.")
