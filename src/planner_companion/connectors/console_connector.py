# src/planner_companion/connectors/console_connector.py

"""
Console REPL.

The prompt shows the selected day and whether it has tasks
(`*` recurring, `+` one-off, then the day's category marker).
Slash commands go to the command registry, anything else to the assistant.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..agenda.day_summary import DayKind
from ..cli.commands import registry as command_registry
from ..core.chat import stream_reply
from ..core.state import AppState
from ..llm.client import friendly_llm_error_message
from ..tasks.task_api import summary_for_day

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")
YES_ANSWERS = ("y", "yes")

_KIND_MARKS = {DayKind.EMPTY: "", DayKind.ONE_OFF: " +", DayKind.RECURRING: " *"}

InputFn = Callable[[str], str]


def build_prompt(state: AppState) -> str:
    try:
        summary = summary_for_day(state)
    except Exception:
        logger.exception("Failed to summarize the selected day for the prompt")
        return f"[{state.selected_day:%a %Y-%m-%d}] > "

    mark = _KIND_MARKS[summary.kind]
    if summary.marker:
        mark += f" {summary.marker}"
    return f"[{summary.day:%a %Y-%m-%d}{mark}] > "


def ask_yes_no(question: str, read: InputFn = input) -> bool:
    try:
        answer = read(f"{question} [y/N] ")
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    return answer.strip().lower() in YES_ANSWERS


def _notify(text: str) -> None:
    # Called from the focus timer thread while input() may be waiting.
    print(f"\n[focus] {text}", flush=True)


def _print_reply(state: AppState, user_input: str) -> None:
    app_name = str(getattr(state.settings, "app_name", "planner"))
    printed = False
    try:
        with state.lock:
            for piece in stream_reply(state, user_input):
                if not piece:
                    continue
                if not printed:
                    print(f"{app_name}: ", end="", flush=True)
                    printed = True
                print(piece, end="", flush=True)
    except RuntimeError as e:
        msg = friendly_llm_error_message(e)
        logger.info("Assistant runtime error: %s", msg)
        print(f"\n[assistant] {msg}")
        return
    except Exception:
        logger.exception("Console chat handler crashed.")
        print("\n[assistant] Internal error while generating a reply.")
        return

    print("\n" if printed else "[assistant] No output (model produced no content).")


def run_console_loop(state: AppState, read: InputFn = input) -> None:
    logger.info("Console connector started (selected_day=%s).", state.selected_day)
    print("Planner console. /help lists commands, /today shows today, /exit quits.")
    print("Anything that is not a command goes to the assistant.\n")

    def ask(question: str) -> bool:
        return ask_yes_no(question, read)

    while True:
        try:
            user_input = read(build_prompt(state)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue
        if user_input.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        try:
            with state.lock:
                reply = command_registry.handle(state, user_input, emit=_notify, ask=ask)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            _print_reply(state, user_input)
        else:
            print(reply)

    logger.info("Console connector finished.")
