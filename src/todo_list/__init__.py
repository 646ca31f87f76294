"""
Single-screen to-do list.

Components:
- tasks/: data model, SQLite store with change notification, live query, view-facing API
- connectors/: console view (rich-rendered list + add form)
- cli/: slash commands, composition root, entrypoint
"""

__version__ = "0.1.0"
