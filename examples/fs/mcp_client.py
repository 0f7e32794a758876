"""MCP client reading routed resources -- filesystem tree.

This script spawns the resource-routing MCP server over stdio, backed by
the ``resources/`` tree next to it, and reads a few resources through it.

The client never imports the router; it only talks MCP:

    1. Spawn ``python -m resourceroutes_mcp --config server.yaml``
    2. Read the Markdown catalog resource
    3. List the URI templates with the ``list_resource_templates`` tool
    4. Read concrete URIs with the ``read_resource`` tool

Requirements:
    pip install -e .

Usage:
    python examples/fs/mcp_client.py
"""

import asyncio
import json
import sys
from pathlib import Path

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

_CONFIG_FILE = Path(__file__).resolve().parent / "server.yaml"


async def main() -> None:
    params = StdioServerParameters(
        command=sys.executable,
        args=["-m", "resourceroutes_mcp", "--config", str(_CONFIG_FILE)],
    )
    async with stdio_client(params) as (read, write), ClientSession(read, write) as session:
        await session.initialize()

        catalog = await session.read_resource("routes://catalog/markdown")
        print(catalog.contents[0].text)

        result = await session.call_tool("list_resource_templates", {})
        print("=== URI templates ===")
        for template in json.loads(result.content[0].text):
            params_text = ", ".join(template["params"]) or "-"
            print(f"  {template['uriTemplate']:32s} params: {params_text}")
        print()

        for uri in ("users://42/profile", "users://admin/profile", "config://motd"):
            result = await session.call_tool("read_resource", {"uri": uri})
            print(f"=== {uri} ===")
            print(result.content[0].text)
            print()


if __name__ == "__main__":
    asyncio.run(main())
