"""
LUXIA Studio MCP Server Entry Point.

Run the MCP server with either stdio or SSE transport.

Usage:
    # stdio mode (desktop clients)
    python run_mcp_server.py --transport stdio

    # SSE mode (for Docker/remote)
    python run_mcp_server.py --transport sse --port 8080

    # Use environment variables
    MCP_TRANSPORT=sse MCP_PORT=8080 python run_mcp_server.py
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add src to path for local development
sys.path.insert(0, str(Path(__file__).parent / "src"))

from luxia_studio.config import get_config, update_config
from luxia_studio.mcp_server import run_mcp_server
from luxia_studio.tracing import setup_tracing


def main():
    """Main entry point."""
    config = get_config()

    parser = argparse.ArgumentParser(
        description="LUXIA Studio MCP Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Desktop client (stdio)
  python run_mcp_server.py --transport stdio

  # Docker/Remote (SSE)
  python run_mcp_server.py --transport sse --port 8080

Environment Variables:
  MCP_TRANSPORT         Transport type: stdio or sse (default: stdio)
  MCP_PORT              Port for SSE transport (default: 8080)
  GEMINI_API_KEY        Gemini API key used by the generation services
  LUXIA_CATALOG_PATH    Optional JSON service catalog
  LUXIA_ENABLE_TRACING  Export traces of generation attempts (default: false)
        """,
    )

    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=config.mcp_transport,
        help=f"Transport type (default: {config.mcp_transport})",
    )

    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host for SSE transport (default: 0.0.0.0)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=config.mcp_port,
        help=f"Port for SSE transport (default: {config.mcp_port})",
    )

    parser.add_argument(
        "--trace-console",
        action="store_true",
        help="Print generation traces to stderr",
    )

    args = parser.parse_args()

    # stdout carries the stdio transport
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    if args.trace_console:
        update_config(enable_tracing=True)
    setup_tracing(enabled=config.enable_tracing, console=args.trace_console)

    print("=" * 60, file=sys.stderr)
    print("LUXIA Studio MCP Server", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"Transport: {args.transport}", file=sys.stderr)
    if args.transport == "sse":
        print(f"Host: {args.host}", file=sys.stderr)
        print(f"Port: {args.port}", file=sys.stderr)
    print("=" * 60, file=sys.stderr)

    try:
        asyncio.run(
            run_mcp_server(
                transport=args.transport,
                host=args.host,
                port=args.port,
            )
        )
    except KeyboardInterrupt:
        print("\nServer stopped.", file=sys.stderr)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
