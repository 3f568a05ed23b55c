#!/usr/bin/env python3
"""
MCP Server SSE Example.

Connects an agent to a running LUXIA Studio MCP server over SSE and
asks it to generate an image. Progress notifications sent by the server
are printed as they arrive.

Prerequisites:
    python run_mcp_server.py --transport sse --port 8080
    curl http://localhost:8080/health

Usage:
    GEMINI_API_KEY=... OPENAI_API_KEY=... python examples/mcp_sse_example.py
"""

import asyncio
import os
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from agents import Agent, Runner
from agents.mcp import MCPServerSse
from mcp.types import LoggingMessageNotification


async def progress_message_handler(message):
    """Print progress notifications sent by generate_media."""
    root = getattr(message, "root", None)
    if isinstance(root, LoggingMessageNotification):
        data = root.params.data
        if isinstance(data, dict) and data.get("type") == "progress":
            print(f"[{data.get('service')}] {data.get('message')}")


async def main():
    """Run one generation through the MCP server."""
    mcp_url = os.environ.get("LUXIA_MCP_URL", "http://localhost:8080/sse")
    gemini_api_key = os.environ.get("GEMINI_API_KEY", "")

    print("=" * 60)
    print("LUXIA Studio MCP SSE Example")
    print("=" * 60)
    print(f"MCP Server URL: {mcp_url}")
    print(f"Gemini API Key: {'set' if gemini_api_key else 'not set (server key is used)'}")
    print()

    async with MCPServerSse(
        params={
            "url": mcp_url,
            "headers": {"X-Gemini-API-Key": gemini_api_key} if gemini_api_key else {},
        },
        client_session_timeout_seconds=600,
        message_handler=progress_message_handler,
    ) as mcp_server:
        tools = await mcp_server.list_tools()
        print(f"Available tools ({len(tools)}):")
        for tool in tools:
            print(f"   - {tool.name}")
        print()

        agent = Agent(
            name="LUXIA Studio Agent",
            instructions="""
            You help users create images and videos with LUXIA Studio.
            Call list_services first, then generate_media with values that
            match the service's fields. Report the download names of the
            results, or the error message if generation failed.
            """,
            mcp_servers=[mcp_server],
        )

        result = await Runner.run(
            agent,
            "Generate a cinematic image of a sunset over Paris with the Photoshop image service.",
        )

        print("\n" + "=" * 60)
        print("Result:")
        print("=" * 60)
        print(result.final_output)

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
