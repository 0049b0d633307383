"""The ce grammar: chemical equations.

States track how far the current entity has got:

    0       start of a term        1   after a space or separator
    2       after a hyphen         3   after a bond
    a       amount read            as  amount followed by a space
    o       main symbol            q   right subscript
    d, D    right superscript      qd, qD, dq  subscript/superscript mixes
    b, p, bp  left superscript/subscript
    r, rt, rd, rdt, rdq  arrow, arrow conditions and their C/M/T prefixes

Text is accumulated in the buffer registers and flushed by "output" into a
ChemFive node (or an Arrow node once an arrow is pending). Pieces of the
entity are parsed by the fragment grammars at flush time.
"""

from __future__ import annotations

import re
from typing import Any

from chemtex import patterns
from chemtex.actions import bond
from chemtex.buffer import PERSISTENT, Buffer
from chemtex.machine import Interpreter, StateMachine, concat
from chemtex.nodes import (
    Arrow,
    ChemFive,
    Color,
    CommaEnumeration,
    FirstLevelEscape,
    FracCe,
    Mark,
    MarkKind,
    Operator,
    Overset,
    Parsed,
    StateOfAggregation,
    Text,
    Underbrace,
    Underset,
)
from chemtex.transitions import compile_transitions

_CONDITION_KINDS = {"M": "math", "T": "text"}
_COUNT = re.compile(r"[1-9][0-9]*$")

# =============================================================================
# Flushing
# =============================================================================


def _run(interp: Interpreter, text: str | None, machine_name: str) -> tuple[Parsed, ...]:
    return tuple(interp.run(text, machine_name))


def _condition(interp: Interpreter, text: str | None, kind: str | None) -> tuple[Parsed, ...]:
    if kind == "M":
        return _run(interp, text, "tex-math")
    if kind == "T":
        return (Text(text or ""),)
    return _run(interp, text, "ce")


def output(interp: Interpreter, buffer: Buffer, m: Any = None, entity_follows: int | None = None) -> list[Parsed]:
    """Flush the buffer into a ChemFive or Arrow node.

    entity_follows:
        None  nothing pending means nothing to emit, and a space just read
              is dropped with it
        1     an entity follows: keep a preceding space
        2     as 1, and a pending amount stays an amount instead of
              becoming the main symbol
    """
    ret: list[Parsed] = []
    if buffer.r:
        ret.append(
            Arrow(
                buffer.r,
                above=_condition(interp, buffer.rd, buffer.rdt),
                below=_condition(interp, buffer.rq, buffer.rqt),
                above_kind=_CONDITION_KINDS.get(buffer.rdt or "", "equation"),
                below_kind=_CONDITION_KINDS.get(buffer.rqt or "", "equation"),
            )
        )
    elif not buffer.is_empty() or entity_follows:
        if buffer.sb:
            ret.append(Mark(MarkKind.ENTITY_SKIP))
        if not (buffer.o or buffer.q or buffer.d or buffer.b or buffer.p) and entity_follows != 2:
            buffer.o, buffer.a = buffer.a, None
        elif not (buffer.o or buffer.q or buffer.d) and (buffer.b or buffer.p):
            buffer.o, buffer.d, buffer.q = buffer.a, buffer.b, buffer.p
            buffer.a = buffer.b = buffer.p = None
        elif buffer.o and buffer.d_type == "kv" and patterns.match("d-oxidation$", buffer.d or ""):
            buffer.d_type = "oxidation"
        elif buffer.o and buffer.d_type == "kv" and not buffer.q:
            buffer.d_type = None
        ret.append(
            ChemFive(
                amount=_run(interp, buffer.a, "a"),
                left_sup=_run(interp, buffer.b, "bd"),
                left_sub=_run(interp, buffer.p, "pq"),
                symbol=_run(interp, buffer.o, "o"),
                right_sub=_run(interp, buffer.q, "pq"),
                right_sup=_run(interp, buffer.d, "oxidation" if buffer.d_type == "oxidation" else "bd"),
                d_type=buffer.d_type,
            )
        )
    buffer.reset(keep=PERSISTENT)
    return ret


# =============================================================================
# Local actions
# =============================================================================


def _o_after_d(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> list[Parsed]:
    # A plain number after a bond-superscript belongs to the next entity.
    if _COUNT.match(buffer.d or ""):
        pending = buffer.d
        buffer.d = None
        ret = output(interp, buffer)
        ret.append(Mark(MarkKind.TINY_SKIP))
        buffer.b = pending
    else:
        ret = output(interp, buffer)
    buffer.append("o", m)
    return ret


def _d_kv(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> None:
    buffer.d = m
    buffer.d_type = "kv"


def _charge_or_bond(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> list[Parsed] | None:
    if buffer.begins_with_bond:
        ret: list[Parsed] = []
        concat(ret, output(interp, buffer))
        concat(ret, bond(interp, buffer, m, "-"))
        return ret
    buffer.d = m
    return None


def _hyphen_after_o_or_d(interp: Interpreter, buffer: Buffer, m: str, is_after_d: bool) -> list[Parsed]:
    """Decide between a continuation hyphen and a single bond.

    A hyphen follows an orbital, a single lowercase Greek or Latin letter,
    or a math-mode Latin letter (n-Butyl, sp-orbital). A lone Latin letter
    is switched to math mode.
    """
    symbol = buffer.o or ""
    c1 = patterns.match("orbital", symbol)
    c2 = patterns.match("one lowercase greek letter $", symbol)
    c3 = patterns.match("one lowercase latin letter $", symbol)
    c4 = patterns.match("$one lowercase latin letter$ $", symbol)
    hyphen_follows = m == "-" and bool((c1 and c1.remainder == "") or c2 or c3 or c4)
    if (
        hyphen_follows
        and not (buffer.a or buffer.b or buffer.p or buffer.d or buffer.q)
        and not c1
        and c3
    ):
        buffer.o = "$" + symbol + "$"

    ret: list[Parsed] = []
    if hyphen_follows:
        concat(ret, output(interp, buffer))
        ret.append(Mark(MarkKind.HYPHEN))
        return ret
    digits = patterns.match("digits", buffer.d or "")
    if is_after_d and digits and digits.remainder == "":
        buffer.append("d", m)
        concat(ret, output(interp, buffer))
    else:
        concat(ret, output(interp, buffer))
        concat(ret, bond(interp, buffer, m, "-"))
    return ret


def _amount_to_symbol(interp: Interpreter, buffer: Buffer, m: Any, option: Any) -> None:
    buffer.o, buffer.a = buffer.a, None


def _set_flag(name: str, value: bool):
    def action(interp: Interpreter, buffer: Buffer, m: Any, option: Any) -> None:
        setattr(buffer, name, value)

    return action


def _change_parenthesis_level(delta: int):
    def action(interp: Interpreter, buffer: Buffer, m: Any, option: Any) -> None:
        buffer.parenthesis_level += delta

    return action


def _state_of_aggregation(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> StateOfAggregation:
    return StateOfAggregation(_run(interp, m, "o"))


def _comma(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> CommaEnumeration:
    separator = m.rstrip()
    if separator != m and buffer.parenthesis_level == 0:
        return CommaEnumeration(separator, "L")
    return CommaEnumeration(separator, "M")


def _oxidation_output(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> list[Parsed]:
    return ["{", *interp.run(m, "oxidation"), "}"]


def _pair(node_class: type):
    def action(interp: Interpreter, buffer: Buffer, m: list[str], option: Any) -> Parsed:
        return node_class(_run(interp, m[0], "ce"), _run(interp, m[1], "ce"))

    return action


def _color_output(interp: Interpreter, buffer: Buffer, m: list[str], option: Any) -> Color:
    return Color(m[0], _run(interp, m[1], "ce"))


def _set_register(name: str):
    def action(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> None:
        setattr(buffer, name, m)

    return action


def _operator(interp: Interpreter, buffer: Buffer, m: str, option: str | None) -> Operator:
    return Operator(option or m)


ACTIONS = {
    "output": output,
    "o after d": _o_after_d,
    "d= kv": _d_kv,
    "charge or bond": _charge_or_bond,
    "- after o/d": _hyphen_after_o_or_d,
    "a to o": _amount_to_symbol,
    "sb=true": _set_flag("sb", True),
    "sb=false": _set_flag("sb", False),
    "beginsWithBond=true": _set_flag("begins_with_bond", True),
    "beginsWithBond=false": _set_flag("begins_with_bond", False),
    "parenthesisLevel++": _change_parenthesis_level(1),
    "parenthesisLevel--": _change_parenthesis_level(-1),
    "state of aggregation": _state_of_aggregation,
    "comma": _comma,
    "oxidation-output": _oxidation_output,
    "frac-output": _pair(FracCe),
    "overset-output": _pair(Overset),
    "underset-output": _pair(Underset),
    "underbrace-output": _pair(Underbrace),
    "color-output": _color_output,
    "r=": _set_register("r"),
    "rdt=": _set_register("rdt"),
    "rd=": _set_register("rd"),
    "rqt=": _set_register("rqt"),
    "rq=": _set_register("rq"),
    "operator": _operator,
}

# =============================================================================
# Transitions
# =============================================================================

_HYPHEN = ("insert", MarkKind.HYPHEN)
_SINGLE_BOND = ("bond", "-")

TRANSITIONS = compile_transitions(
    {
        "empty": {"*": {"action": "output"}},
        "else": {"0|1|2": {"action": "beginsWithBond=false", "revisit": True, "continue": True}},
        "oxidation$": {"0": {"action": "oxidation-output"}},
        "CMT": {
            "r": {"action": "rdt=", "next": "rt"},
            "rd": {"action": "rqt=", "next": "rdt"},
        },
        "arrowUpDown": {"0|1|2|as": {"action": ["sb=false", "output", "operator"], "next": "1"}},
        "uprightEntities": {"0|1|2": {"action": ["o=", "output"], "next": "1"}},
        "orbital": {"0|1|2|3": {"action": "o=", "next": "o"}},
        "->": {
            "0|1|2|3": {"action": "r=", "next": "r"},
            "a|as": {"action": ["output", "r="], "next": "r"},
            "*": {"action": ["output", "r="], "next": "r"},
        },
        "+": {
            "o": {"action": "d= kv", "next": "d"},
            "d|D": {"action": "d=", "next": "d"},
            "q": {"action": "d=", "next": "qd"},
            "qd|qD": {"action": "d=", "next": "qd"},
            "dq": {"action": ["output", "d="], "next": "d"},
            "3": {"action": ["sb=false", "output", "operator"], "next": "0"},
        },
        "amount": {"0|2": {"action": "a=", "next": "a"}},
        "pm-operator": {
            "0|1|2|a|as": {"action": ["sb=false", "output", ("operator", "\\pm")], "next": "0"}
        },
        "operator": {"0|1|2|a|as": {"action": ["sb=false", "output", "operator"], "next": "0"}},
        "-$": {
            "o|q": {"action": ["charge or bond", "output"], "next": "qd"},
            "d": {"action": "d=", "next": "d"},
            "D": {"action": ["output", _SINGLE_BOND], "next": "3"},
            "q": {"action": "d=", "next": "qd"},
            "qd": {"action": "d=", "next": "qd"},
            "qD|dq": {"action": ["output", _SINGLE_BOND], "next": "3"},
        },
        "-9": {"3|o": {"action": ["output", _HYPHEN], "next": "3"}},
        "- orbital overlap": {
            "o": {"action": ["output", _HYPHEN], "next": "2"},
            "d": {"action": ["output", _HYPHEN], "next": "2"},
        },
        "-": {
            "0|1|2": {
                "action": [("output", 1), "beginsWithBond=true", _SINGLE_BOND],
                "next": "3",
            },
            "3": {"action": _SINGLE_BOND},
            "a": {"action": ["output", _HYPHEN], "next": "2"},
            "as": {"action": [("output", 2), _SINGLE_BOND], "next": "3"},
            "b": {"action": "b="},
            "o": {"action": ("- after o/d", False), "next": "2"},
            "q": {"action": ("- after o/d", False), "next": "2"},
            "d|qd|dq": {"action": ("- after o/d", True), "next": "2"},
            "D|qD|p": {"action": ["output", _SINGLE_BOND], "next": "3"},
        },
        "amount2": {"1|3": {"action": "a=", "next": "a"}},
        "letters": {
            "0|1|2|3|a|as|b|p|bp|o": {"action": "o=", "next": "o"},
            "q|dq": {"action": ["output", "o="], "next": "o"},
            "d|D|qd|qD": {"action": "o after d", "next": "o"},
        },
        "digits": {
            "o": {"action": "q=", "next": "q"},
            "d|D": {"action": "q=", "next": "dq"},
            "q": {"action": ["output", "o="], "next": "o"},
            "a": {"action": "o=", "next": "o"},
        },
        "space A": {"b|p|bp": {"action": []}},
        "space": {
            "a": {"action": [], "next": "as"},
            "0": {"action": "sb=false"},
            "1|2": {"action": "sb=true"},
            "r|rt|rd|rdt|rdq": {"action": "output", "next": "0"},
            "*": {"action": ["output", "sb=true"], "next": "1"},
        },
        "1st-level escape": {
            "1|2": {"action": ["output", ("insert+p1", FirstLevelEscape)]},
            "*": {"action": ["output", ("insert+p1", FirstLevelEscape)], "next": "0"},
        },
        "[(...)]": {
            "r|rt": {"action": "rd=", "next": "rd"},
            "rd|rdt": {"action": "rq=", "next": "rdq"},
        },
        "...": {
            "o|d|D|dq|qd|qD": {"action": ["output", ("bond", "...")], "next": "3"},
            "*": {"action": [("output", 1), ("insert", MarkKind.ELLIPSIS)], "next": "1"},
        },
        ". __* ": {"*": {"action": ["output", ("insert", MarkKind.ADDITION_COMPOUND)], "next": "1"}},
        "state of aggregation $": {"*": {"action": ["output", "state of aggregation"], "next": "1"}},
        "{[(": {
            "a|as|o": {"action": ["o=", "output", "parenthesisLevel++"], "next": "2"},
            "0|1|2|3": {"action": ["o=", "output", "parenthesisLevel++"], "next": "2"},
            "*": {"action": ["output", "o=", "output", "parenthesisLevel++"], "next": "2"},
        },
        ")]}": {
            "0|1|2|3|b|p|bp|o": {"action": ["o=", "parenthesisLevel--"], "next": "o"},
            "a|as|d|D|q|qd|qD|dq": {"action": ["output", "o=", "parenthesisLevel--"], "next": "o"},
        },
        ", ": {"*": {"action": ["output", "comma"], "next": "0"}},
        # ^ and _ without a usable argument
        "^_": {"*": {"action": []}},
        "^{(...)}|^($...$)": {
            "0|1|2|as": {"action": "b=", "next": "b"},
            "p": {"action": "b=", "next": "bp"},
            "3|o": {"action": "d= kv", "next": "D"},
            "q": {"action": "d=", "next": "qD"},
            "d|D|qd|qD|dq": {"action": ["output", "d="], "next": "D"},
        },
        "^a|^\\x{}{}|^\\x{}|^\\x|'": {
            "0|1|2|as": {"action": "b=", "next": "b"},
            "p": {"action": "b=", "next": "bp"},
            "3|o": {"action": "d= kv", "next": "d"},
            "q": {"action": "d=", "next": "qd"},
            "d|qd|D|qD": {"action": "d="},
            "dq": {"action": ["output", "d="], "next": "d"},
        },
        "_{(state of aggregation)}$": {
            "d|D|q|qd|qD|dq": {"action": ["output", "q="], "next": "q"},
        },
        "_{(...)}|_($...$)|_9|_\\x{}{}|_\\x{}|_\\x": {
            "0|1|2|as": {"action": "p=", "next": "p"},
            "b": {"action": "p=", "next": "bp"},
            "3|o": {"action": "q=", "next": "q"},
            "d|D": {"action": "q=", "next": "dq"},
            "q|qd|qD|dq": {"action": ["output", "q="], "next": "q"},
        },
        "=<>": {
            "0|1|2|3|a|as|o|q|d|D|qd|qD|dq": {"action": [("output", 2), "bond"], "next": "3"},
        },
        "#": {
            "0|1|2|3|a|as|o": {"action": [("output", 2), ("bond", "#")], "next": "3"},
        },
        "{}^": {"*": {"action": [("output", 1), ("insert", MarkKind.TINY_SKIP)], "next": "1"}},
        "{}": {"*": {"action": ("output", 1), "next": "1"}},
        "{...}": {
            "0|1|2|3|a|as|b|p|bp": {"action": "o=", "next": "o"},
            "o|d|D|q|qd|qD|dq": {"action": ["output", "o="], "next": "o"},
        },
        "$...$": {
            "a": {"action": "a="},  # 2$n$
            "0|1|2|3|as|b|p|bp|o": {"action": "o=", "next": "o"},  # not an amount
            "as|o": {"action": "o="},
            "q|d|D|qd|qD|dq": {"action": ["output", "o="], "next": "o"},
        },
        "\\bond{(...)}": {"*": {"action": [("output", 2), "bond"], "next": "3"}},
        "\\frac{(...)}": {"*": {"action": [("output", 1), "frac-output"], "next": "3"}},
        "\\overset{(...)}": {"*": {"action": [("output", 2), "overset-output"], "next": "3"}},
        "\\underset{(...)}": {"*": {"action": [("output", 2), "underset-output"], "next": "3"}},
        "\\underbrace{(...)}": {"*": {"action": [("output", 2), "underbrace-output"], "next": "3"}},
        "\\color{(...)}{(...)}": {"*": {"action": [("output", 2), "color-output"], "next": "3"}},
        "\\color{(...)}": {"*": {"action": [("output", 2), "color0-output"]}},
        "\\ce{(...)}": {"*": {"action": [("output", 2), "ce"], "next": "3"}},
        "\\,": {"*": {"action": [("output", 1), "copy"], "next": "1"}},
        "\\pu{(...)}": {
            "*": {"action": ["output", ("write", "{"), "pu", ("write", "}")], "next": "3"},
        },
        "\\x{}{}|\\x{}|\\x": {
            "0|1|2|3|a|as|b|p|bp|o|c0": {"action": ["o=", "output"], "next": "3"},
            "*": {"action": ["output", "o=", "output"], "next": "3"},
        },
        "others": {"*": {"action": [("output", 1), "copy"], "next": "3"}},
        "else2": {
            "a": {"action": "a to o", "next": "o", "revisit": True},
            "as": {"action": ["output", "sb=true"], "next": "1", "revisit": True},
            "r|rt|rd|rdt|rdq": {"action": "output", "next": "0", "revisit": True},
            "*": {"action": ["output", "copy"], "next": "3"},
        },
    }
)

MACHINE = StateMachine("ce", TRANSITIONS, ACTIONS)
