"""Actions shared by all grammars.

Every action has the signature

    action(interp, buffer, m, option) -> str | Node | list | None

where m is the matched value and option the parameter given in the
transition table. Grammar-local actions with the same name take precedence.

Families:
- "x=" accumulators append m to buffer register x
- insert/write/copy emit nodes or literal text
- ce, pu, text, tex-math, ... run another grammar on m
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from chemtex.nodes import Bond, Color0, Frac, Mark, MarkKind, Parsed, Rm, TexMath

if TYPE_CHECKING:
    from chemtex.buffer import Buffer
    from chemtex.machine import ActionFunction, Interpreter

_FRACTION_RE = re.compile(r"([0-9]+|\$[a-z]\$|[a-z])/([0-9]+)(\$[a-z]\$|[a-z])?$")


def accumulate(register: str) -> ActionFunction:
    """Build the action appending the match to a buffer register."""

    def action(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> None:
        buffer.append(register, m)

    return action


def run_machine(machine_name: str) -> ActionFunction:
    """Build the action parsing the match with another grammar."""

    def action(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> list[Parsed]:
        return interp.run(m, machine_name)

    return action


def _append_option_to_o(interp: Interpreter, buffer: Buffer, m: Any, option: str) -> None:
    buffer.append("o", option)


def _insert(interp: Interpreter, buffer: Buffer, m: Any, option: MarkKind) -> Mark:
    return Mark(option)


def _insert_p1(interp: Interpreter, buffer: Buffer, m: str, option: Callable[[str], Parsed]) -> Parsed:
    return option(m)


def _copy(interp: Interpreter, buffer: Buffer, m: Any, option: Any) -> Any:
    return m


def _write(interp: Interpreter, buffer: Buffer, m: Any, option: str) -> str:
    return option


def _rm(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> Rm:
    return Rm(m)


def bond(interp: Interpreter, buffer: Buffer, m: str, option: str | None) -> Bond:
    return Bond(option or m)


def _color0(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> Color0:
    return Color0(m)


def _fraction(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> list[Parsed]:
    """1/2, -n/2, 1/2$x$ as sign, fraction and trailing math variable."""
    ret: list[Parsed] = []
    if m[:1] in ("+", "-"):
        ret.append(m[0])
        m = m[1:]
    n = _FRACTION_RE.match(m)
    if n is None:
        return ret + [m]
    ret.append(Frac(n.group(1).replace("$", ""), n.group(2)))
    if n.group(3):
        ret.append(TexMath(n.group(3).replace("$", "")))
    return ret


ACTIONS: dict[str, ActionFunction] = {
    "a=": accumulate("a"),
    "b=": accumulate("b"),
    "p=": accumulate("p"),
    "o=": accumulate("o"),
    "o=+p1": _append_option_to_o,
    "q=": accumulate("q"),
    "d=": accumulate("d"),
    "rm=": accumulate("rm"),
    "text=": accumulate("text"),
    "insert": _insert,
    "insert+p1": _insert_p1,
    "copy": _copy,
    "write": _write,
    "rm": _rm,
    "text": run_machine("text"),
    "tex-math": run_machine("tex-math"),
    "tex-math tight": run_machine("tex-math tight"),
    "bond": bond,
    "color0-output": _color0,
    "ce": run_machine("ce"),
    "pu": run_machine("pu"),
    "1/2": _fraction,
    "9,9": run_machine("9,9"),
}

__all__ = ["ACTIONS", "accumulate", "bond", "run_machine"]
