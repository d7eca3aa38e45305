"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskFilter, TaskStats) and input schemas
- task_store.py: SQLite-backed record store
- validation.py: field constraints and input normalization
- task_query.py: filter predicates, derived views, search, tag enumeration
- task_stats.py: aggregate counts
- task_service.py: command/query facade used by the MCP layer
"""
