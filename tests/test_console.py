# tests/test_console.py

from __future__ import annotations

from collections.abc import Callable

from planner_companion.connectors.console_connector import build_prompt, run_console_loop


def _scripted(answers: list[str], prompts: list[str]) -> Callable[[str], str]:
    pending = list(answers)

    def read(prompt: str) -> str:
        prompts.append(prompt)
        if not pending:
            raise EOFError
        return pending.pop(0)

    return read


def test_prompt_marks_selected_day(state) -> None:
    assert build_prompt(state) == "[Mon 2024-01-15] > "

    state.task_store.add_task(title="Dentist", anchor_date=state.selected_day)
    assert build_prompt(state).startswith("[Mon 2024-01-15 +")

    state.task_store.add_task(title="Gym", anchor_date=state.selected_day, recurrence="weekly")
    assert build_prompt(state).startswith("[Mon 2024-01-15 *")


def test_recurring_delete_is_confirmed_interactively(state, capsys) -> None:
    prompts: list[str] = []
    task = state.task_store.add_task(title="Gym", anchor_date=state.selected_day, recurrence="weekly")

    run_console_loop(state, read=_scripted([f"/del {task.id}", "n", f"/del {task.id}", "y", "/exit"], prompts))

    assert state.task_store.count_tasks() == 0
    assert sum("[y/N]" in p for p in prompts) == 2
    out = capsys.readouterr().out
    assert "Cancelled." in out
    assert f"Deleted task {task.id}." in out


def test_plain_text_goes_to_the_assistant(state, capsys) -> None:
    run_console_loop(state, read=_scripted(["hello there"], []))

    assert state.llm.calls[0][0][-1] == {"role": "user", "content": "hello there"}
    assert "planner-test: ok" in capsys.readouterr().out
