"""
Urgency ranking for task lists.

Subpackages:
- tasks: task records, field helpers and the SQLite task store
- urgency: trait evaluators, the scoring engine and the breakdown table
- cli: console front end (/list, /why, /refresh, ...)
"""

__version__ = "0.1.0"
