# src/planner_companion/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import date, timedelta
from typing import cast

from ..agenda.day_summary import DayKind
from ..agenda.month_grid import MONDAY, SUNDAY, render_month, shift_month
from ..core.state import AppState
from ..focus.focus_session import FocusSession
from ..focus.pomodoro import PomodoroConfig, PomodoroTimer
from ..llm.offline import OfflineLLMClient
from ..study.study_models import Chapter, StudySession, Subject
from ..study.study_scheduler import add_manual_session, generate_study_plan
from ..tasks.task_api import add_task_for_selected_day, delete_task, summary_for_day
from ..tasks.task_store import RecurringDeleteNotConfirmed
from ..todo.todo_models import Priority

CommandEmitter = Callable[[str], None]
ConfirmCallback = Callable[[str], bool]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class ConfirmationRequired(Exception):
    """
    Raised by a handler that must not go ahead without a yes/no answer.
    `confirm_line` is the command that performs the action once confirmed.
    """

    def __init__(self, question: str, confirm_line: str) -> None:
        super().__init__(question)
        self.question = question
        self.confirm_line = confirm_line


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

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
        ask: ConfirmCallback | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        When a handler asks for confirmation, `ask(question)` decides; without
        `ask` the reply explains which command confirms the action.
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
            return self._call(handler, state, args, emit)
        except ConfirmationRequired as e:
            if ask is None:
                return f"{e.question}\nRun {e.confirm_line} to do it."
            if not ask(e.question):
                return "Cancelled."
            # No `ask` here: a confirmed command must not prompt again.
            return self.handle(state, e.confirm_line, emit=emit)

    @staticmethod
    def _call(handler: CommandHandler, state: AppState, args: list[str], emit: CommandEmitter | None) -> str:
        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _first_weekday(state: AppState) -> int:
    return MONDAY if getattr(state.settings, "week_starts_monday", False) else SUNDAY


def _parse_day_arg(arg: str, base: date) -> date | None:
    """Accept YYYY-MM-DD, +N / -N (days from base), 'today' and 'tomorrow'."""
    a = arg.strip().lower()
    if a == "today":
        return date.today()
    if a == "tomorrow":
        return date.today() + timedelta(days=1)
    if a[:1] in ("+", "-") and a[1:].isdigit():
        return base + timedelta(days=int(a))
    try:
        return date.fromisoformat(a)
    except ValueError:
        return None


def _format_day(state: AppState) -> str:
    summary = summary_for_day(state)
    head = f"{summary.day.isoformat()} ({summary.day.strftime('%A')})"
    if summary.marker:
        head += f" {summary.marker}"
    if summary.kind is DayKind.EMPTY:
        return f"{head}\n  No tasks."
    lines = [head]
    for t in summary.tasks:
        lines.append(f"  [{t.id}] {t.display_text}")
    return "\n".join(lines)


def _join_args(args: list[str]) -> tuple[str, str]:
    """'a b | c d' -> ('a b', 'c d')."""
    left, _, right = " ".join(args).partition("|")
    return left.strip(), right.strip()


def _parse_id(raw: str | None) -> int | None:
    return int(raw) if raw and raw.isdigit() else None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    mode = "OFFLINE" if isinstance(state.llm, OfflineLLMClient) else "ONLINE (offline fallback)"
    hist = "ON" if state.save_history else "OFF"
    models = ", ".join(list(getattr(state.settings, "llm_models", []) or []))
    focus = state.focus_session.status() if state.focus_session else "not started"
    return (
        "Status:\n"
        f"  Assistant: {mode}\n"
        f"  Dialog history: {hist}\n"
        f"  Models (priority -> fallback): {models}\n"
        f"  Calendar tasks: {state.task_store.count_tasks()}\n"
        f"  Notes: {state.note_store.count_notes()}\n"
        f"  To-do items: {state.todo_store.count_items()}\n"
        f"  Focus timer: {focus}\n"
        f"  Selected day: {state.selected_day.isoformat()}"
    )


# ---- calendar ----


def cmd_today(state: AppState, args: list[str]) -> str:
    state.selected_day = date.today()
    state.displayed_month = state.selected_day.replace(day=1)
    return _format_day(state)


def cmd_day(state: AppState, args: list[str]) -> str:
    """
    /day              -> tasks on the selected day
    /day 2024-01-15   -> select a day
    /day +1 | -1      -> move the selection
    """
    if args:
        new_day = _parse_day_arg(args[0], state.selected_day)
        if new_day is None:
            return "Usage: /day [YYYY-MM-DD | +N | -N | today | tomorrow]"
        state.selected_day = new_day
        state.displayed_month = new_day.replace(day=1)
    return _format_day(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [| daily|weekly|monthly|yearly]
    The task is anchored on the selected day.
    """
    title, rec_text = _join_args(args)
    if not title:
        return "Usage: /add <title> [| daily|weekly|monthly|yearly]"

    task = add_task_for_selected_day(state, title=title, recurrence_text=rec_text)
    return f"Added [{task.id}] {task.display_text} on {task.anchor_date.isoformat()}."


def cmd_del(state: AppState, args: list[str]) -> str:
    """
    /del <id>          -> delete a task (recurring tasks ask for confirmation)
    /del <id> confirm  -> delete a recurring task without asking
    """
    task_id = _parse_id(args[0] if args else None)
    if task_id is None:
        return "Usage: /del <id> [confirm]"

    confirmed = len(args) > 1 and args[1].lower() in ("confirm", "yes", "y")
    try:
        deleted = delete_task(state, task_id, confirmed=confirmed)
    except RecurringDeleteNotConfirmed as e:
        raise ConfirmationRequired(
            f"[{task_id}] {e.task.display_text} is recurring: deleting it removes all occurrences. Delete it?",
            f"/del {task_id} confirm",
        ) from e
    if not deleted:
        return f"No task with id {task_id}."
    return f"Deleted task {task_id}."


def cmd_month(state: AppState, args: list[str]) -> str:
    """
    /month        -> show the displayed month
    /month +1|-1  -> move to the next/previous month
    """
    if args:
        a = args[0]
        if a[:1] in ("+", "-") and a[1:].isdigit():
            state.displayed_month = shift_month(state.displayed_month, int(a))
        else:
            return "Usage: /month [+N | -N]"

    m = state.displayed_month
    return render_month(
        state.task_store.list_tasks(),
        m.year,
        m.month,
        first_weekday=_first_weekday(state),
        selected=state.selected_day,
    )


# ---- focus ----


def _pomodoro_config(state: AppState) -> PomodoroConfig:
    s = state.settings
    return PomodoroConfig.from_minutes(
        int(getattr(s, "pomodoro_focus_minutes", 25)),
        int(getattr(s, "pomodoro_break_minutes", 5)),
        int(getattr(s, "pomodoro_sessions_per_round", 4)),
    )


def cmd_pomodoro(state: AppState, args: list[str]) -> str:
    lines = ["Pomodoro round:"]
    for i, (mode, seconds) in enumerate(PomodoroTimer(_pomodoro_config(state)).plan_round(), start=1):
        lines.append(f"  {i}. {mode.label} - {seconds // 60} min")
    return "\n".join(lines)


def cmd_focus(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /focus [status]  -> mode, time left, session progress
    /focus start     -> start or resume the countdown in the background
    /focus pause     -> pause, keeping the time left
    /focus reset     -> stop and restore the full duration of the current mode
    """
    action = args[0].lower() if args else "status"
    if action not in ("status", "start", "pause", "reset"):
        return "Usage: /focus [start | pause | reset | status]"

    session = state.focus_session
    if session is None:
        session = state.focus_session = FocusSession(_pomodoro_config(state), notify=emit)
    elif emit is not None:
        session.notify = emit

    if action == "start":
        if not session.start():
            return f"Already running: {session.status()}"
        return f"Started: {session.status()}"
    if action == "pause":
        if not session.pause():
            return f"Not running: {session.status()}"
        return f"Paused: {session.status()}"
    if action == "reset":
        session.reset()
        return f"Reset: {session.status()}"
    return session.status()


# ---- study ----


def _find_subject(state: AppState, name: str) -> Subject | None:
    for subject in state.study_subjects:
        if subject.name.lower() == name.lower():
            return subject
    return None


def _format_plan(sessions: list[StudySession]) -> list[str]:
    lines = []
    for s in sessions:
        chapters = ", ".join(f"{a.subject_name}: {a.chapter.name}" for a in s.chapters)
        flags = [f for f, on in (("break day", s.is_break_day), ("done", s.is_complete)) if on]
        suffix = f" ({', '.join(flags)})" if flags else ""
        lines.append(f"  {s.date.isoformat()}: {chapters}{suffix}")
    return lines


def _study_plan(state: AppState, args: list[str]) -> str:
    if len(args) < 3:
        return "Usage: /study <subject> <exam YYYY-MM-DD> <chapter1,chapter2,...>"

    try:
        exam_date = date.fromisoformat(args[1])
    except ValueError:
        return f"Invalid exam date: {args[1]} (expected YYYY-MM-DD)."

    names = [c.strip() for c in " ".join(args[2:]).split(",") if c.strip()]
    if not names:
        return "No chapters given."

    subject = Subject(name=args[0], exam_date=exam_date, chapters=[Chapter(n) for n in names])
    state.study_subjects = [s for s in state.study_subjects if s.name.lower() != subject.name.lower()]
    state.study_subjects.append(subject)
    state.study_plan = generate_study_plan(state.study_subjects)

    lines = [f"Study plan for {subject.name} (exam {exam_date.isoformat()}):"]
    lines.extend(_format_plan([s for s in state.study_plan if s.chapters[0].subject_name == subject.name]))
    return "\n".join(lines)


def _study_add(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /study add <subject> [YYYY-MM-DD]"
    subject = _find_subject(state, args[0])
    if subject is None:
        return f"Unknown subject: {args[0]}. Plan it first with /study <subject> <exam date> <chapters>."

    on = state.selected_day
    if len(args) > 1:
        try:
            on = date.fromisoformat(args[1])
        except ValueError:
            return f"Invalid date: {args[1]} (expected YYYY-MM-DD)."

    session = add_manual_session(state.study_plan, subject, on)
    if session is None:
        return f"Every chapter of {subject.name} is done."
    return f"Added study session on {on.isoformat()}: {session.chapters[0].chapter.name}."


def _study_done(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /study done <subject> <chapter>"
    subject = _find_subject(state, args[0])
    if subject is None:
        return f"Unknown subject: {args[0]}."

    wanted = " ".join(args[1:]).strip().lower()
    for chapter in subject.chapters:
        if chapter.name.lower() == wanted:
            chapter.is_completed = True
            return f"Marked {subject.name}: {chapter.name} as done."
    return f"{subject.name} has no chapter {' '.join(args[1:])!r}."


def cmd_study(state: AppState, args: list[str]) -> str:
    """
    /study <subject> <exam YYYY-MM-DD> <ch1,ch2,...>  -> plan (or re-plan) a subject from today
    /study [show]                                    -> the current plan
    /study add <subject> [YYYY-MM-DD]                -> extra session with the next open chapter
    /study done <subject> <chapter>                  -> mark a chapter as studied
    """
    action = args[0].lower() if args else "show"
    if action == "show":
        if not state.study_plan:
            return "No study plan yet. Use /study <subject> <exam date> <ch1,ch2,...>."
        return "\n".join(["Study plan:", *_format_plan(state.study_plan)])
    if action == "add":
        return _study_add(state, args[1:])
    if action == "done":
        return _study_done(state, args[1:])
    return _study_plan(state, args)


# ---- notes ----


def cmd_note(state: AppState, args: list[str]) -> str:
    """
    /note [list]                    -> all notes, newest first
    /note add <title> [| text]      -> new note (blank title -> "Untitled Note")
    /note search <text>             -> notes whose title contains text
    /note show <id>                 -> full note
    /note edit <id> <title> [| text]
    /note del <id>
    """
    action = args[0].lower() if args else "list"
    rest = args[1:]

    if action in ("list", "search"):
        query = " ".join(rest) if action == "search" else ""
        notes = state.note_store.search_notes(query)
        if not notes:
            return "No notes." if not query else f"No notes match {query!r}."
        return "\n".join(f"  [{n.id}] {n.title}" + (f" - {n.preview}" if n.preview else "") for n in notes)

    if action == "add":
        title, content = _join_args(rest)
        note = state.note_store.add_note(title=title, content=content)
        return f"Saved note [{note.id}] {note.title}."

    note_id = _parse_id(rest[0] if rest else None)
    if action not in ("show", "edit", "del") or note_id is None:
        return "Usage: /note [list | add <title> [| text] | search <text> | show <id> | edit <id> <title> [| text] | del <id>]"

    if action == "show":
        note = state.note_store.get_note(note_id)
        if note is None:
            return f"No note with id {note_id}."
        return f"[{note.id}] {note.title}\n{note.content}" if note.content else f"[{note.id}] {note.title}"

    if action == "edit":
        title, content = _join_args(rest[1:])
        note = state.note_store.update_note(note_id, title=title or None, content=content or None)
        if note is None:
            return f"No note with id {note_id}."
        return f"Saved note [{note.id}] {note.title}."

    if not state.note_store.delete_note(note_id):
        return f"No note with id {note_id}."
    return f"Deleted note {note_id}."


# ---- to-do list ----


def cmd_todo(state: AppState, args: list[str]) -> str:
    """
    /todo [list]                        -> open and done items
    /todo add <title> [| low|medium|high]
    /todo done <id>
    /todo rm <id | title>               -> by title removes every item with that title
    """
    action = args[0].lower() if args else "list"
    rest = args[1:]

    if action == "list":
        items = state.todo_store.list_items()
        if not items:
            return "To-do list is empty."
        return "\n".join(f"  {i.id}. {i.display_text}" for i in items)

    if action == "add":
        title, prio_text = _join_args(rest)
        if not title:
            return "Usage: /todo add <title> [| low|medium|high]"
        item = state.todo_store.add_item(title=title, priority=Priority.parse(prio_text))
        return f"Added to-do {item.id}. {item.display_text}"

    if action == "done":
        item_id = _parse_id(rest[0] if rest else None)
        if item_id is None:
            return "Usage: /todo done <id>"
        if not state.todo_store.set_completed(item_id):
            return f"No to-do item with id {item_id}."
        return f"Done: {item_id}."

    if action == "rm" and rest:
        item_id = _parse_id(rest[0]) if len(rest) == 1 else None
        if item_id is not None:
            removed = 1 if state.todo_store.remove_item(item_id) else 0
        else:
            removed = state.todo_store.remove_by_title(" ".join(rest))
        return f"Removed {removed} to-do item(s)."

    return "Usage: /todo [list | add <title> [| priority] | done <id> | rm <id | title>]"


# ---- import / export ----


def cmd_export(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /export <path.json>"
    try:
        n = state.task_store.export_json(args[0])
    except OSError as e:
        return f"Export failed: {e}"
    return f"Exported {n} task(s) to {args[0]}."


def cmd_import(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /import <path.json>"
    if emit:
        emit(f"Importing tasks from {args[0]}...")
    try:
        n = state.task_store.import_json(args[0])
    except FileNotFoundError:
        return f"File not found: {args[0]}"
    except OSError as e:
        return f"Cannot read {args[0]}: {e.strerror or e}"
    except ValueError as e:
        return f"Import failed: {e}"
    return f"Imported {n} task(s)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show assistant mode, stores and focus timer.")
registry.register("today", cmd_today, help_text="Select today and list its tasks.")
registry.register("day", cmd_day, help_text="Show or select a day: /day [YYYY-MM-DD | +N | -N].")
registry.register("add", cmd_add, help_text="Add a task on the selected day: /add <title> [| weekly].")
registry.register("del", cmd_del, help_text="Delete a task: /del <id> [confirm].", aliases=["rm"])
registry.register("month", cmd_month, help_text="Month view: /month [+N | -N].")
registry.register("pomodoro", cmd_pomodoro, help_text="Show the Pomodoro round plan.")
registry.register("focus", cmd_focus, help_text="Focus timer: /focus [start | pause | reset | status].")
registry.register("study", cmd_study, help_text="Study plan: /study <subject> <exam date> <ch1,...> | add | done | show.")
registry.register("note", cmd_note, help_text="Notes: /note [list | add | search | show | edit | del].", aliases=["notes"])
registry.register("todo", cmd_todo, help_text="To-do list: /todo [list | add | done | rm].")
registry.register("export", cmd_export, help_text="Export tasks as JSON records: /export <path>.")
registry.register("import", cmd_import, help_text="Import JSON task records: /import <path>.")
