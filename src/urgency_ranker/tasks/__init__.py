"""
Task subsystem.

Components:
- task_models.py: data structures (Task)
- task_fields.py: parsing/formatting of tags, id lists and timestamps
- task_store.py: SQLite-backed storage implementing the TaskAccessor port
"""
