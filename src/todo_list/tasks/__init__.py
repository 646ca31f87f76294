"""
Task subsystem.

Components:
- task_models.py: data structures (TodoItem, CompletionPolicy, StoreChange)
- task_store.py: SQLite-backed storage + change notification
- live_query.py: reactive "query all" result set with per-change diffs
- task_api.py: small high-level helpers used by the console view
"""
