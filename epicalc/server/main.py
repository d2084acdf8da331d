"""epicalc MCP server entry point.

Exposes the 2x2 calculator as three tools: compute_metrics,
required_sample_size and interpretation_report.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from epicalc.schema.base import StudyDesign, StudyGoal
from epicalc.server.tools import CalculatorTools

logger = logging.getLogger("epicalc")

_CELL_PROPERTIES = {
    "a": {"type": "integer", "minimum": 0, "description": "Exposed group, with outcome"},
    "b": {"type": "integer", "minimum": 0, "description": "Exposed group, without outcome"},
    "c": {"type": "integer", "minimum": 0, "description": "Control group, with outcome"},
    "d": {"type": "integer", "minimum": 0, "description": "Control group, without outcome"},
    "design": {
        "type": "string",
        "enum": [d.value for d in StudyDesign],
        "description": "Study design. case-control reports the odds ratio only.",
    },
    "goal": {
        "type": "string",
        "enum": [g.value for g in StudyGoal],
        "description": "Whether the outcome is desirable or undesirable.",
    },
}
_TABLE_REQUIRED = ["a", "b", "c", "d", "design", "goal"]


def _table_args(arguments: dict) -> dict:
    return {key: arguments.get(key) for key in _TABLE_REQUIRED}


def create_server() -> tuple[Server, CalculatorTools]:
    """Create and configure the MCP server with the calculator tools."""

    server = Server("epicalc")
    tools = CalculatorTools()

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [
            Tool(
                name="compute_metrics",
                description="Compute risks, risk difference, relative risk, odds ratio, impact measures, NNT/NNH and post-hoc power from a 2x2 table. Metrics that cannot be computed are null.",
                inputSchema={
                    "type": "object",
                    "properties": _CELL_PROPERTIES,
                    "required": _TABLE_REQUIRED,
                },
            ),
            Tool(
                name="required_sample_size",
                description="Participants needed per group to detect the difference between two proportions with 80% power at 5% two-tailed significance.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "p1": {"type": "number", "minimum": 0, "maximum": 1},
                        "p2": {"type": "number", "minimum": 0, "maximum": 1},
                    },
                    "required": ["p1", "p2"],
                },
            ),
            Tool(
                name="interpretation_report",
                description="Markdown summary of the metrics for a 2x2 table, including a sample size recommendation when power is low.",
                inputSchema={
                    "type": "object",
                    "properties": _CELL_PROPERTIES,
                    "required": _TABLE_REQUIRED,
                },
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        """Dispatch tool calls to CalculatorTools."""
        logger.info("Tool call: %s", name)
        arguments = arguments or {}
        try:
            if name == "compute_metrics":
                result = tools.compute_metrics(**_table_args(arguments))
            elif name == "required_sample_size":
                result = tools.required_sample_size(arguments.get("p1"), arguments.get("p2"))
            elif name == "interpretation_report":
                result = tools.interpretation_report(**_table_args(arguments))
            else:
                result = {"error": f"Unknown tool: {name}"}

            return [TextContent(type="text", text=json.dumps(result, indent=2, allow_nan=False))]

        except Exception as e:
            logger.exception("Tool %s failed", name)
            error_result = {"error": str(e), "tool": name}
            return [TextContent(type="text", text=json.dumps(error_result))]

    return server, tools


async def main():
    """Run the MCP server."""
    parser = argparse.ArgumentParser(description="epicalc 2x2 calculator server")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper()))
    logger.info("Starting epicalc server")

    server, _ = create_server()

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
