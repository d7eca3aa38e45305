# src/todo_mcp/mcp/server.py

from __future__ import annotations

import logging

from fastmcp import FastMCP

from ..tasks.task_service import TaskService
from .prompts import register_prompts
from .resources import register_resources
from .tools import register_tools

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Todo manager. Use the *_todo tools to change todos, list_todos/search_todos "
    "to find them and the todos:// resources for JSON views."
)


def create_mcp_server(service: TaskService, *, name: str = "todo-manager") -> FastMCP:
    """Build a FastMCP server exposing ``service`` as tools, resources and prompts."""
    mcp = FastMCP(name, instructions=INSTRUCTIONS)

    register_tools(mcp, service)
    register_resources(mcp, service)
    register_prompts(mcp)

    logger.debug("MCP server %r built for db=%s", name, service.store.location)
    return mcp
