# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "URGENCY_APP_NAME": "App display name (default: urgency-ranker).",
    "URGENCY_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "URGENCY_DATA_DIR": "Local data directory for the database and logs (default: .local/urgency).",
    "URGENCY_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    # Task states
    "URGENCY_TODO_KEYWORDS": "Actionable, not-done states (default: TODO NEXT WAITING).",
    "URGENCY_DONE_KEYWORDS": "Completed states (default: DONE CANCELLED).",
    "URGENCY_INACTIVE_STATE": "State that does not count as active (default: TODO).",
    # Urgency coefficients
    "URGENCY_PRIORITY_SCORES": "Priority letter scores, e.g. 'A=6.0,B=3.9,C=1.8'.",
    "URGENCY_DEADLINE_COEFFICIENT": "Weight of deadline proximity (default: 12.0).",
    "URGENCY_ACTIVITY_COEFFICIENT": "Weight of an active state (default: 4.0).",
    "URGENCY_AGE_COEFFICIENT": "Weight of task age (default: 2.0).",
    "URGENCY_MAX_AGE_DAYS": "Age at which the age trait saturates (default: 365).",
    "URGENCY_BLOCKING_COEFFICIENT": "Score per not-done blocking parent (default: 2.0).",
    "URGENCY_DEFAULT_TAG_SCORE": "Score of a tag without its own entry (default: 1.0).",
    "URGENCY_TAG_SCORES": "Per-tag scores, e.g. 'next=15.0,someday=0'.",
}
