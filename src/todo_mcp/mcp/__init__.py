"""
MCP adapter.

- tools.py: mutating and listing tools (create/update/delete/complete/list/search/stats)
- resources.py: read-only JSON projections under todos://
- prompts.py: canned user prompts that steer the agent towards the tools
- formatting.py: text/JSON rendering shared by the above
- server.py: builds the FastMCP server around a TaskService
"""
