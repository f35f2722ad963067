# src/urgency_ranker/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, cast

from ..core.errors import UrgencyError
from ..core.state import AppState
from ..tasks.task_fields import format_tags, parse_date, parse_id_list
from ..tasks.task_models import Task
from ..urgency.breakdown import describe_task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

TASK_OPTIONS = ("priority", "deadline", "tags", "state", "parents", "under")


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Domain errors (unknown task, bad input, corrupted cache) become a
        one-line reply; anything else propagates to the caller.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except (UrgencyError, ValueError) as e:
            logger.debug("Command /%s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def split_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """
    Separate free words from key=value options.

    "/add Write report priority=A tags=:work:" ->
    (["Write", "report"], {"priority": "A", "tags": ":work:"})
    """
    words: list[str] = []
    opts: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key.lower() in TASK_OPTIONS:
            opts[key.lower()] = value
        elif sep and key.isidentifier():
            raise ValueError(f"unknown option {key!r} (known: {', '.join(TASK_OPTIONS)})")
        else:
            words.append(arg)
    return words, opts


def _fields_from_options(opts: dict[str, str]) -> dict[str, Any]:
    """Empty values clear the field."""
    fields: dict[str, Any] = {}
    if "priority" in opts:
        fields["priority"] = opts["priority"] or None
    if "deadline" in opts:
        fields["deadline"] = parse_date(opts["deadline"]) if opts["deadline"] else None
    if "tags" in opts:
        fields["tags"] = opts["tags"]
    if "state" in opts:
        fields["state"] = opts["state"] or None
    if "parents" in opts:
        fields["parents"] = parse_id_list(opts["parents"])
    if "under" in opts:
        fields["outline_parent_id"] = opts["under"] or None
    return fields


def format_task_line(task: Task, score: float) -> str:
    parts = [f"[{score:6.2f}]", f"#{task.id}"]
    if task.state:
        parts.append(task.state)
    if task.priority:
        parts.append(f"[#{task.priority}]")
    parts.append(task.title)
    if task.tags:
        parts.append(format_tags(task.tags))
    return " ".join(parts)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    words, opts = split_options(args)
    title = " ".join(words)
    fields = _fields_from_options(opts)
    fields.setdefault("state", "TODO")
    task_id = state.task_store.add_task(title=title, **fields)
    return f"Added task #{task_id}."


def cmd_set(state: AppState, args: list[str]) -> str:
    """
    /set <id> key=value ...   -> update fields (empty value clears)
    The cached urgency is left as is; use /refresh to recompute.
    """
    if not args:
        return "Usage: /set <id> priority=A deadline=2026-10-01 tags=:a:b: state=NEXT parents=1,2 under=3"
    task_id, rest = args[0], args[1:]
    words, opts = split_options(rest)
    if words or not opts:
        return "Usage: /set <id> key=value ... (keys: " + ", ".join(TASK_OPTIONS) + ")"
    state.task_store.update_task_fields(task_id, **_fields_from_options(opts))
    return f"Updated task #{task_id}. Use /refresh {task_id} to recompute its urgency."


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    done = sorted(state.task_store.done_keywords) or ["DONE"]
    label = "DONE" if "DONE" in done else done[0]
    state.task_store.update_task_fields(args[0], state=label)
    return f"Task #{args[0]} marked {label}."


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list      -> actionable tasks, most urgent first
    /list all  -> every task
    """
    show_all = bool(args) and args[0].lower() == "all"
    tasks = state.task_store.list_tasks(actionable_only=not show_all)
    if not tasks:
        return "No tasks."
    by_id = {t.id: t for t in tasks}
    ordered = state.engine.sort_by_urgency(list(by_id))
    lines = ["Tasks by urgency:"]
    for i, tid in enumerate(ordered, start=1):
        score = state.engine.get_urgency_score(tid)
        lines.append(f"{i:3}. {format_task_line(by_id[tid], score)}")
    return "\n".join(lines)


def cmd_why(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /why <id>"
    return describe_task(state.engine, args[0])


def cmd_refresh(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /refresh        -> recompute urgency of all actionable tasks
    /refresh all    -> recompute every task
    /refresh <id>   -> recompute one task
    """
    if args and args[0].lower() != "all":
        score = state.engine.update_urgency_score(args[0])
        return f"Task #{args[0]} urgency: {score:.2f}"

    tasks = state.task_store.list_tasks(actionable_only=not args)
    if emit:
        emit(f"Refreshing {len(tasks)} task(s)...")
    scores = state.engine.refresh_all([t.id for t in tasks])
    return f"Refreshed {len(scores)} task(s)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [priority=A] [deadline=YYYY-MM-DD] [tags=:a:b:] "
    "[state=TODO] [parents=1,2] [under=<id>].",
)
registry.register("set", cmd_set, help_text="Update a task: /set <id> key=value ...")
registry.register("done", cmd_done, help_text="Mark a task done: /done <id>.")
registry.register("list", cmd_list, help_text="List tasks by urgency: /list [all].", aliases=["ls"])
registry.register("why", cmd_why, help_text="Show the urgency breakdown: /why <id>.", aliases=["describe"])
registry.register("refresh", cmd_refresh, help_text="Recompute urgency: /refresh [<id>|all].")
