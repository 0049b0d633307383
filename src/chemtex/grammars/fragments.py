"""Small grammars for the pieces of a chemical entity.

The ce grammar collects raw text for each part of an entity and hands it to
one of these when the entity is flushed:

    a               amount (2, 1/2, $n$)
    o               main symbol
    text            free text in {...}
    pq              left/right subscripts
    bd              left/right superscripts
    oxidation       Roman-numeral oxidation state
    tex-math        inline math, passed through
    tex-math tight  inline math inside amounts; + and - lose operator spacing
    9,9             decimal comma in numbers
"""

from __future__ import annotations

from functools import partial
from typing import Any

from chemtex.buffer import Buffer
from chemtex.machine import Interpreter, StateMachine
from chemtex.nodes import (
    Color,
    CommaEnumeration,
    Mark,
    MarkKind,
    Parsed,
    RomanNumeral,
    StateOfAggregation,
    TexMath,
    Text,
)
from chemtex.transitions import compile_transitions

_PU_IN_BRACES = [("write", "{"), "pu", ("write", "}")]

# =============================================================================
# a: amounts
# =============================================================================

AMOUNT = StateMachine(
    "a",
    compile_transitions(
        {
            "empty": {"*": {"action": []}},
            "1/2$": {"0": {"action": "1/2"}},
            "else": {"0": {"action": [], "next": "1", "revisit": True}},
            "${(...)}$__$(...)$": {"*": {"action": "tex-math tight", "next": "1"}},
            ",": {"*": {"action": ("insert", MarkKind.COMMA_DECIMAL)}},
            "else2": {"*": {"action": "copy"}},
        }
    ),
)

# =============================================================================
# o: main symbol
# =============================================================================

SYMBOL = StateMachine(
    "o",
    compile_transitions(
        {
            "empty": {"*": {"action": []}},
            "1/2$": {"0": {"action": "1/2"}},
            "else": {"0": {"action": [], "next": "1", "revisit": True}},
            "letters": {"*": {"action": "rm"}},
            "\\ca": {"*": {"action": ("insert", MarkKind.CIRCA)}},
            "\\pu{(...)}": {"*": {"action": _PU_IN_BRACES}},
            "\\x{}{}|\\x{}|\\x": {"*": {"action": "copy"}},
            "${(...)}$__$(...)$": {"*": {"action": "tex-math"}},
            "{(...)}": {"*": {"action": [("write", "{"), "text", ("write", "}")]}},
            "else2": {"*": {"action": "copy"}},
        }
    ),
)

# =============================================================================
# text: free text
# =============================================================================


def _output_text(interp: Interpreter, buffer: Buffer, m: Any = None, option: Any = None) -> Text | None:
    if buffer.text:
        ret = Text(buffer.text)
        buffer.reset()
        return ret
    return None


TEXT = StateMachine(
    "text",
    compile_transitions(
        {
            "empty": {"*": {"action": "output"}},
            "{...}": {"*": {"action": "text="}},
            "${(...)}$__$(...)$": {"*": {"action": "tex-math"}},
            "\\greek": {"*": {"action": ["output", "rm"]}},
            "\\pu{(...)}": {"*": {"action": ["output", *_PU_IN_BRACES]}},
            "\\,|\\x{}{}|\\x{}|\\x": {"*": {"action": ["output", "copy"]}},
            "else": {"*": {"action": "text="}},
        }
    ),
    {"output": _output_text},
)

# =============================================================================
# pq and bd: subscripts and superscripts
# =============================================================================


def _subscript_aggregation(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> StateOfAggregation:
    return StateOfAggregation(tuple(interp.run(m, "o")), subscript=True)


def _color_output(machine_name: str):
    def action(interp: Interpreter, buffer: Buffer, m: list[str], option: Any) -> Color:
        return Color(m[0], tuple(interp.run(m[1], machine_name)))

    return action


SUBSCRIPT = StateMachine(
    "pq",
    compile_transitions(
        {
            "empty": {"*": {"action": []}},
            "state of aggregation $": {"*": {"action": "state of aggregation"}},
            "i$": {"0": {"action": [], "next": "!f", "revisit": True}},
            "(KV letters),": {"0": {"action": "rm", "next": "0"}},
            "formula$": {"0": {"action": [], "next": "f", "revisit": True}},
            "1/2$": {"0": {"action": "1/2"}},
            "else": {"0": {"action": [], "next": "!f", "revisit": True}},
            "${(...)}$__$(...)$": {"*": {"action": "tex-math"}},
            "{(...)}": {"*": {"action": "text"}},
            "a-z": {"f": {"action": "tex-math"}},
            "letters": {"*": {"action": "rm"}},
            "-9.,9": {"*": {"action": "9,9"}},
            ",": {"*": {"action": ("insert+p1", partial(CommaEnumeration, size="S"))}},
            "\\color{(...)}{(...)}": {"*": {"action": "color-output"}},
            "\\color{(...)}": {"*": {"action": "color0-output"}},
            "\\ce{(...)}": {"*": {"action": "ce"}},
            "\\pu{(...)}": {"*": {"action": _PU_IN_BRACES}},
            "\\,|\\x{}{}|\\x{}|\\x": {"*": {"action": "copy"}},
            "else2": {"*": {"action": "copy"}},
        }
    ),
    {
        "state of aggregation": _subscript_aggregation,
        "color-output": _color_output("pq"),
    },
)

SUPERSCRIPT = StateMachine(
    "bd",
    compile_transitions(
        {
            "empty": {"*": {"action": []}},
            "x$": {"0": {"action": [], "next": "!f", "revisit": True}},
            "formula$": {"0": {"action": [], "next": "f", "revisit": True}},
            "else": {"0": {"action": [], "next": "!f", "revisit": True}},
            "-9.,9 no missing 0": {"*": {"action": "9,9"}},
            ".": {"*": {"action": ("insert", MarkKind.ELECTRON_DOT)}},
            "a-z": {"f": {"action": "tex-math"}},
            "x": {"*": {"action": ("insert", MarkKind.KV_X)}},
            "letters": {"*": {"action": "rm"}},
            "'": {"*": {"action": ("insert", MarkKind.PRIME)}},
            "${(...)}$__$(...)$": {"*": {"action": "tex-math"}},
            "{(...)}": {"*": {"action": "text"}},
            "\\color{(...)}{(...)}": {"*": {"action": "color-output"}},
            "\\color{(...)}": {"*": {"action": "color0-output"}},
            "\\ce{(...)}": {"*": {"action": "ce"}},
            "\\pu{(...)}": {"*": {"action": _PU_IN_BRACES}},
            "\\,|\\x{}{}|\\x{}|\\x": {"*": {"action": "copy"}},
            "else2": {"*": {"action": "copy"}},
        }
    ),
    {"color-output": _color_output("bd")},
)

# =============================================================================
# oxidation: Roman numerals
# =============================================================================


def _roman_numeral(interp: Interpreter, buffer: Buffer, m: Any, option: Any) -> RomanNumeral:
    return RomanNumeral(buffer.o or "")


OXIDATION = StateMachine(
    "oxidation",
    compile_transitions(
        {
            "empty": {"*": {"action": "roman-numeral"}},
            "pm-operator": {"*": {"action": ("o=+p1", "\\pm")}},
            "else": {"*": {"action": "o="}},
        }
    ),
    {"roman-numeral": _roman_numeral},
)

# =============================================================================
# tex-math: inline math
# =============================================================================


def _output_math(interp: Interpreter, buffer: Buffer, m: Any = None, option: Any = None) -> TexMath | None:
    if buffer.o:
        ret = TexMath(buffer.o)
        buffer.reset()
        return ret
    return None


def _tight_operator(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> None:
    buffer.append("o", "{" + m + "}")


_MATH_RULES: dict[str, dict[str, dict[str, Any]]] = {
    "empty": {"*": {"action": "output"}},
    "\\ce{(...)}": {"*": {"action": ["output", "ce"]}},
    "\\pu{(...)}": {"*": {"action": ["output", *_PU_IN_BRACES]}},
    "{...}|\\,|\\x{}{}|\\x{}|\\x": {"*": {"action": "o="}},
}

TEX_MATH = StateMachine(
    "tex-math",
    compile_transitions({**_MATH_RULES, "else": {"*": {"action": "o="}}}),
    {"output": _output_math},
)

TEX_MATH_TIGHT = StateMachine(
    "tex-math tight",
    compile_transitions(
        {
            **_MATH_RULES,
            "-|+": {"*": {"action": "tight operator"}},
            "else": {"*": {"action": "o="}},
        }
    ),
    {"output": _output_math, "tight operator": _tight_operator},
)

# =============================================================================
# 9,9: decimal comma
# =============================================================================


def _comma_decimal(interp: Interpreter, buffer: Buffer, m: Any, option: Any) -> Parsed:
    return Mark(MarkKind.COMMA_DECIMAL)


DECIMAL = StateMachine(
    "9,9",
    compile_transitions(
        {
            "empty": {"*": {"action": []}},
            ",": {"*": {"action": "comma"}},
            "else": {"*": {"action": "copy"}},
        }
    ),
    {"comma": _comma_decimal},
)

MACHINES = (AMOUNT, SYMBOL, TEXT, SUBSCRIPT, SUPERSCRIPT, OXIDATION, TEX_MATH, TEX_MATH_TIGHT, DECIMAL)
