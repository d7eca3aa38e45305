# tests/test_mcp_server.py

from __future__ import annotations

import json
import logging
import re
from datetime import timedelta

import pytest
from fastmcp import Client, FastMCP
from fastmcp.exceptions import ToolError

from todo_mcp.mcp import formatting
from todo_mcp.mcp.prompts import create_todo_text
from todo_mcp.mcp.server import create_mcp_server
from todo_mcp.tasks.task_models import TaskCreate
from todo_mcp.tasks.task_service import TaskService

from .fakes import FakeClock

ID_RE = re.compile(r"\(ID: ([0-9a-f-]+)\)")


@pytest.fixture()
def server(service: TaskService) -> FastMCP:
    return create_mcp_server(service)


def _text(result) -> str:
    return result.content[0].text


async def _call(client: Client, tool: str, args: dict | None = None) -> str:
    return _text(await client.call_tool(tool, args or {}))


async def _read_json(client: Client, uri: str):
    contents = await client.read_resource(uri)
    return json.loads(contents[0].text)


@pytest.mark.asyncio
async def test_capabilities_are_registered(server: FastMCP) -> None:
    async with Client(server) as client:
        tools = {t.name for t in await client.list_tools()}
        prompts = {p.name for p in await client.list_prompts()}
        resources = {str(r.uri) for r in await client.list_resources()}
        templates = {t.uriTemplate for t in await client.list_resource_templates()}

    assert tools == {
        "create_todo",
        "update_todo",
        "delete_todo",
        "complete_todo",
        "uncomplete_todo",
        "list_todos",
        "search_todos",
        "get_todo_stats",
    }
    assert prompts == {
        "create_todo_prompt",
        "daily_review",
        "weekly_planning",
        "productivity_analysis",
        "task_breakdown",
    }
    assert resources == {
        "todos://all",
        "todos://completed",
        "todos://pending",
        "todos://overdue",
        "todos://stats",
        "todos://tags",
    }
    assert templates == {
        "todos://todo/{todo_id}",
        "todos://priority/{priority}",
        "todos://tag/{tag}",
    }


@pytest.mark.asyncio
async def test_create_update_complete_delete_flow(server: FastMCP, service: TaskService) -> None:
    async with Client(server) as client:
        text = await _call(
            client,
            "create_todo",
            {"title": "Buy groceries", "priority": "high", "tags": ["shopping"], "due_date": "2025-03-12"},
        )
        assert text.startswith("Created todo: Buy groceries (ID: ")
        match = ID_RE.search(text)
        assert match is not None
        todo_id = match.group(1)

        text = await _call(client, "update_todo", {"id": todo_id, "title": "Buy food"})
        assert text == f"Updated todo: Buy food (ID: {todo_id})"

        text = await _call(client, "complete_todo", {"id": todo_id})
        assert text == "Completed todo: Buy food"
        assert service.get_task(todo_id).completed is True

        text = await _call(client, "uncomplete_todo", {"id": todo_id})
        assert text == "Reopened todo: Buy food"

        text = await _call(client, "delete_todo", {"id": todo_id})
        assert text == f"Deleted todo with ID: {todo_id}"

    assert service.all_tasks() == []


@pytest.mark.asyncio
async def test_update_leaves_unmentioned_fields(server: FastMCP, service: TaskService) -> None:
    todo = service.create_task(TaskCreate(title="a", description="keep me", tags=["x"]))

    async with Client(server) as client:
        await _call(client, "update_todo", {"id": todo.id, "priority": "low"})
        stored = service.get_task(todo.id)
        assert stored.description == "keep me"
        assert stored.tags == ("x",)

        await _call(client, "update_todo", {"id": todo.id, "description": ""})
        assert service.get_task(todo.id).description is None


@pytest.mark.asyncio
async def test_tool_errors_are_reported(server: FastMCP) -> None:
    async with Client(server) as client:
        with pytest.raises(ToolError, match="Error updating todo: Todo with ID nope not found"):
            await client.call_tool("update_todo", {"id": "nope", "title": "x"})

        with pytest.raises(ToolError, match="Invalid due date format"):
            await client.call_tool("create_todo", {"title": "x", "due_date": "someday"})

        with pytest.raises(ToolError, match="not found"):
            await client.call_tool("delete_todo", {"id": "nope"})

        with pytest.raises(ToolError):
            await client.call_tool("list_todos", {"limit": 500})


@pytest.mark.asyncio
async def test_list_and_search(server: FastMCP, service: TaskService, clock: FakeClock) -> None:
    a = service.create_task(TaskCreate(title="Alpha", priority="high", tags=["work"]))
    clock.advance(seconds=1)
    b = service.create_task(TaskCreate(title="Beta", tags=["home"], due_date="2025-03-20"))
    service.complete_task(a.id)

    async with Client(server) as client:
        text = await _call(client, "list_todos", {})
        assert text == formatting.list_result_text([service.get_task(b.id), service.get_task(a.id)])

        text = await _call(client, "list_todos", {"completed": False})
        assert text == f"Found 1 todos:\n\n⭕ Beta (medium) [{b.id}] - Due: 2025-03-20"

        text = await _call(client, "list_todos", {"tag": "work", "priority": "low"})
        assert text == "No todos found matching the criteria"

        text = await _call(client, "list_todos", {"due_before": "2025-03-31", "due_after": "2025-03-01"})
        assert f"[{b.id}]" in text and f"[{a.id}]" not in text

        text = await _call(client, "list_todos", {"limit": 1})
        assert text.startswith("Found 1 todos:")

        text = await _call(client, "search_todos", {"query": "ALPHA"})
        assert text == f'Found 1 todos matching "ALPHA":\n\n✅ Alpha (high) [{a.id}]'

        text = await _call(client, "search_todos", {"query": "zzz"})
        assert text == 'No todos found matching "zzz"'


@pytest.mark.asyncio
async def test_stats_tool(server: FastMCP, service: TaskService, clock: FakeClock) -> None:
    service.create_task(TaskCreate(title="late", priority="high", due_date=clock.current - timedelta(hours=1)))

    async with Client(server) as client:
        text = await _call(client, "get_todo_stats")

    assert "• Total: 1" in text
    assert "• Overdue: 1" in text
    assert "• High: 1" in text


@pytest.mark.asyncio
async def test_resources(server: FastMCP, service: TaskService, clock: FakeClock) -> None:
    late = service.create_task(
        TaskCreate(title="late", tags=["Work", "health"], due_date=clock.current - timedelta(hours=1))
    )
    clock.advance(seconds=1)
    done = service.create_task(TaskCreate(title="done", priority="low", tags=["work"]))
    service.complete_task(done.id)

    async with Client(server) as client:
        all_todos = await _read_json(client, "todos://all")
        assert [t["id"] for t in all_todos] == [done.id, late.id]
        assert set(all_todos[0]) == {
            "id",
            "title",
            "description",
            "completed",
            "priority",
            "dueDate",
            "tags",
            "createdAt",
            "updatedAt",
        }

        assert [t["id"] for t in await _read_json(client, "todos://completed")] == [done.id]
        assert [t["id"] for t in await _read_json(client, "todos://pending")] == [late.id]
        assert [t["id"] for t in await _read_json(client, "todos://overdue")] == [late.id]
        assert await _read_json(client, "todos://tags") == ["Work", "health", "work"]

        stats = await _read_json(client, "todos://stats")
        assert stats == {
            "total": 2,
            "completed": 1,
            "pending": 1,
            "overdue": 1,
            "byPriority": {"low": 1, "medium": 1, "high": 0},
        }

        one = await _read_json(client, f"todos://todo/{late.id}")
        assert one == service.get_task(late.id).to_dict()
        assert one["dueDate"].endswith("Z")

        assert [t["id"] for t in await _read_json(client, "todos://priority/low")] == [done.id]
        assert [t["id"] for t in await _read_json(client, "todos://tag/work")] == [done.id]

        with pytest.raises(Exception, match="not found"):
            await client.read_resource("todos://todo/missing")
        with pytest.raises(Exception, match="Invalid priority"):
            await client.read_resource("todos://priority/urgent")


@pytest.mark.asyncio
async def test_prompts(server: FastMCP) -> None:
    async with Client(server) as client:
        daily = await client.get_prompt("daily_review")
        assert "list_todos" in daily.messages[0].content.text
        assert daily.messages[0].role == "user"

        created = await client.get_prompt("create_todo_prompt", {"title": "Call mom", "due_date": "2025-05-01"})
        assert created.messages[0].content.text == create_todo_text("Call mom", due_date="2025-05-01")

        breakdown = await client.get_prompt("task_breakdown", {"todo_id": "abc", "context": "big"})
        text = breakdown.messages[0].content.text
        assert "Todo ID: abc" in text
        assert "Additional context: big" in text


def test_create_todo_text_defaults() -> None:
    text = create_todo_text("Call mom")
    assert "- Title: Call mom" in text
    assert "- Priority: medium" in text
    assert "Description" not in text
    assert "Due Date" not in text


@pytest.mark.asyncio
async def test_list_rejects_blank_tag_and_unrepresentable_dates(server: FastMCP) -> None:
    async with Client(server) as client:
        with pytest.raises(ToolError, match="Error listing todos: Tag is required"):
            await client.call_tool("list_todos", {"tag": "   "})

        with pytest.raises(ToolError, match="Invalid due date format"):
            await client.call_tool("list_todos", {"due_before": "9999-12-31T23:00:00-05:00"})


@pytest.mark.asyncio
async def test_tool_failures_are_logged_with_error_code(
    server: FastMCP, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING, logger="todo_mcp.mcp.tools")

    async with Client(server) as client:
        with pytest.raises(ToolError):
            await client.call_tool("complete_todo", {"id": "nope"})

    assert "[NOT_FOUND]" in caplog.text
    assert "'id': 'nope'" in caplog.text
