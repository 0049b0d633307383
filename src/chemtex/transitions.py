"""Compile declarative transition tables into per-state rule lists.

Grammars are written pattern-first, which keeps related rules together:

    {
        "letters": {
            "0|1|2": {"action": "o=", "next": "o"},
            "q": {"action": ["output", "o="], "next": "o"},
        },
        "else": {"*": {"action": "copy"}},
    }

compile_transitions() turns this into

    {"0": [Transition("letters", ...), Transition("else", ...)], "q": [...], ...}

Rules keep the declaration order of their pattern keys; the interpreter
takes the first one that matches. "a|b" keys expand to each alternative,
and a "*" state key adds the rule to every state named anywhere in the
table, including "*" itself, which serves as the fallback list.

Rule bodies:
    action    action name, (name, option) tuple, or a list of those
    next      state to switch to (default: stay)
    revisit   do not consume the matched input
    continue  keep trying later rules at the same position
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

ActionSpec = str | tuple[str, Any]
RawTable = Mapping[str, Mapping[str, Mapping[str, Any]]]


@dataclass(frozen=True, slots=True)
class Action:
    """Named action plus the option it is called with."""

    name: str
    option: Any = None


@dataclass(frozen=True, slots=True)
class Task:
    actions: tuple[Action, ...]
    next_state: str | None = None
    revisit: bool = False
    continue_after: bool = False


@dataclass(frozen=True, slots=True)
class Transition:
    pattern: str
    task: Task


Transitions = dict[str, list[Transition]]


def _normalize_action(spec: ActionSpec) -> Action:
    if isinstance(spec, str):
        return Action(spec)
    name, option = spec
    return Action(name, option)


def _make_task(body: Mapping[str, Any]) -> Task:
    raw = body.get("action", [])
    if isinstance(raw, (str, tuple)):
        raw = [raw]
    return Task(
        actions=tuple(_normalize_action(spec) for spec in raw),
        next_state=body.get("next"),
        revisit=body.get("revisit", False),
        continue_after=body.get("continue", False),
    )


def compile_transitions(raw: RawTable) -> Transitions:
    """Expand a pattern-first table into ordered per-state rule lists.

    Args:
        raw: Mapping of pattern name (or "a|b" alternatives) to a mapping of
            state name ("a|b" alternatives or "*") to rule body

    Returns:
        Mapping of every state mentioned in raw to its ordered Transitions

    Example:
        >>> t = compile_transitions({"digits": {"0|1": {"action": "copy"}}})
        >>> sorted(t)
        ['0', '1']
        >>> t["0"][0].task.actions
        (Action(name='copy', option=None),)

    """
    # All states must be known before "*" rules are spread over them.
    transitions: Transitions = {}
    for states in raw.values():
        for state_key in states:
            for state in state_key.split("|"):
                transitions.setdefault(state, [])

    for pattern_key, states in raw.items():
        patterns = pattern_key.split("|")
        for state_key, body in states.items():
            task = _make_task(body)
            for state in state_key.split("|"):
                targets = transitions.values() if state == "*" else (transitions[state],)
                for pattern in patterns:
                    for rules in targets:
                        rules.append(Transition(pattern, task))
    return transitions


__all__ = ["Action", "Task", "Transition", "Transitions", "compile_transitions"]
