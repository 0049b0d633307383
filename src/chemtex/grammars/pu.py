"""The pu grammars: physical units.

    pu       number, then a unit or a fraction of units (J/mol, J//mol)
    pu-2     one unit: upright symbols, powers, multiplication and spaces
    pu-9,9   digit grouping with thin spaces
"""

from __future__ import annotations

import re
from typing import Any

from chemtex import patterns
from chemtex.buffer import Buffer
from chemtex.machine import Interpreter, StateMachine
from chemtex.nodes import Mark, MarkKind, Operator, Parsed, PuFrac, Rm
from chemtex.transitions import compile_transitions

_CELSIUS = re.compile("\u00b0C|\\^oC|\\^\\{o\\}C")
_FAHRENHEIT = re.compile("\u00b0F|\\^oF|\\^\\{o\\}F")


def _sign(sign: str | None) -> list[Parsed]:
    if sign in ("+-", "+/-"):
        return ["\\pm "]
    return [sign] if sign else []


def _unwrap(text: str | None) -> str | None:
    """Strip one pair of braces enclosing the whole text."""
    found = patterns.match("{(...)}", text or "")
    if found and found.remainder == "":
        return found.value
    return text


def _degrees(text: str | None) -> str | None:
    if not text:
        return text
    text = _CELSIUS.sub(lambda _: "{}^{\\circ}C", text)
    return _FAHRENHEIT.sub(lambda _: "{}^{\\circ}F", text)


# =============================================================================
# pu
# =============================================================================


def _enumber(interp: Interpreter, buffer: Buffer, m: list[str | None], option: Any) -> list[Parsed]:
    # m: sign, number, uncertainty, e/E, multiplication sign, exponent
    sign, number, uncertainty, e, times, exponent = m
    ret = _sign(sign)
    if number:
        ret.extend(interp.run(number, "pu-9,9"))
        if uncertainty:
            if "," in uncertainty or "." in uncertainty:
                ret.extend(interp.run(uncertainty, "pu-9,9"))
            else:
                ret.append(uncertainty)
        if e or times:
            # 1.2e7 and 1.2*10^7 multiply with a dot; 1.2E7 and 1.2x10^7 with a cross.
            if e == "e" or times == "*":
                ret.append(Mark(MarkKind.CDOT))
            else:
                ret.append(Mark(MarkKind.TIMES))
    if exponent:
        ret.append("10^{" + exponent + "}")
    return ret


def _number_power(interp: Interpreter, buffer: Buffer, m: list[str | None], option: Any) -> list[Parsed]:
    sign, number, exponent = m
    ret = _sign(sign)
    ret.extend(interp.run(number, "pu-9,9"))
    ret.append("^{" + (exponent or "") + "}")
    return ret


def _space(interp: Interpreter, buffer: Buffer, m: Any, option: Any) -> Mark:
    return Mark(MarkKind.PU_SPACE_1)


def _operator(interp: Interpreter, buffer: Buffer, m: str, option: str | None) -> Operator:
    return Operator(option or m)


def _output_unit(interp: Interpreter, buffer: Buffer, m: Any = None, option: Any = None) -> list[Parsed] | PuFrac:
    """Flush the unit; a denominator in q makes it a fraction."""
    buffer.d = _degrees(_unwrap(buffer.d))
    buffer.q = _degrees(_unwrap(buffer.q))
    ret: list[Parsed] | PuFrac
    if buffer.q:
        numerator = interp.run(buffer.d, "pu")
        denominator = interp.run(buffer.q, "pu")
        if buffer.o == "//":
            ret = PuFrac(tuple(numerator), tuple(denominator))
        else:
            compound = len(numerator) > 1 or len(denominator) > 1
            ret = [
                *numerator,
                Mark(MarkKind.SPACED_SLASH if compound else MarkKind.SLASH),
                *denominator,
            ]
    else:
        ret = interp.run(buffer.d, "pu-2")
    buffer.reset()
    return ret


PU = StateMachine(
    "pu",
    compile_transitions(
        {
            "empty": {"*": {"action": "output"}},
            "space$": {"*": {"action": ["output", "space"]}},
            "{[(|)]}": {"0|a": {"action": "copy"}},
            "(-)(9)^(-9)": {"0": {"action": "number^", "next": "a"}},
            "(-)(9.,9)(e)(99)": {"0": {"action": "enumber", "next": "a"}},
            "space": {"0|a": {"action": []}},
            "pm-operator": {"0|a": {"action": ("operator", "\\pm"), "next": "0"}},
            "operator": {"0|a": {"action": "copy", "next": "0"}},
            "//": {"d": {"action": "o=", "next": "/"}},
            "/": {"d": {"action": "o=", "next": "/"}},
            "{...}|else": {
                "0|d": {"action": "d=", "next": "d"},
                "a": {"action": ["space", "d="], "next": "d"},
                "/|q": {"action": "q=", "next": "q"},
            },
        }
    ),
    {
        "enumber": _enumber,
        "number^": _number_power,
        "operator": _operator,
        "space": _space,
        "output": _output_unit,
    },
)

# =============================================================================
# pu-2
# =============================================================================


def _tight_cdot(interp: Interpreter, buffer: Buffer, m: Any, option: Any) -> Mark:
    return Mark(MarkKind.TIGHT_CDOT)


def _power(interp: Interpreter, buffer: Buffer, m: str, option: Any) -> None:
    buffer.rm = (buffer.rm or "") + "^{" + m + "}"


def _space_2(interp: Interpreter, buffer: Buffer, m: Any, option: Any) -> Mark:
    return Mark(MarkKind.PU_SPACE_2)


def _output_symbol(interp: Interpreter, buffer: Buffer, m: Any = None, option: Any = None) -> list[Parsed] | Rm:
    ret: list[Parsed] | Rm = []
    if buffer.rm:
        found = patterns.match("{(...)}", buffer.rm)
        if found and found.remainder == "":
            ret = interp.run(found.value, "pu")
        else:
            ret = Rm(buffer.rm)
    buffer.reset()
    return ret


UNIT = StateMachine(
    "pu-2",
    compile_transitions(
        {
            "empty": {"*": {"action": "output"}},
            "*": {"*": {"action": ["output", "cdot"], "next": "0"}},
            "\\x": {"*": {"action": "rm="}},
            "space": {"*": {"action": ["output", "space"], "next": "0"}},
            "^{(...)}|^(-1)": {"1": {"action": "^(-1)"}},
            "-9.,9": {
                "0": {"action": "rm=", "next": "0"},
                "1": {"action": "^(-1)", "next": "0"},
            },
            "{...}|else": {"*": {"action": "rm=", "next": "1"}},
        }
    ),
    {
        "cdot": _tight_cdot,
        "^(-1)": _power,
        "space": _space_2,
        "output": _output_symbol,
    },
)

# =============================================================================
# pu-9,9
# =============================================================================


def _decimal_comma(interp: Interpreter, buffer: Buffer, m: Any, option: Any) -> Mark:
    return Mark(MarkKind.COMMA_DECIMAL)


def _group_integer_part(interp: Interpreter, buffer: Buffer, m: Any = None, option: Any = None) -> list[Parsed]:
    """Group digits by three from the right: 12345 -> 12 345."""
    digits = buffer.text or ""
    buffer.reset()
    if len(digits) <= 4:
        return [digits]
    head = len(digits) % 3 or 3
    ret: list[Parsed] = [digits[:head]]
    for i in range(head, len(digits), 3):
        ret.append(Mark(MarkKind.THOUSAND_SEPARATOR))
        ret.append(digits[i : i + 3])
    return ret


def _group_fraction_part(interp: Interpreter, buffer: Buffer, m: Any = None, option: Any = None) -> list[Parsed]:
    """Group digits by three from the left: 12345 -> 123 45."""
    digits = buffer.text or ""
    buffer.reset()
    if len(digits) <= 4:
        return [digits]
    ret: list[Parsed] = []
    i = 0
    while i < len(digits) - 3:
        ret.append(digits[i : i + 3])
        ret.append(Mark(MarkKind.THOUSAND_SEPARATOR))
        i += 3
    ret.append(digits[i:])
    return ret


DIGIT_GROUPS = StateMachine(
    "pu-9,9",
    compile_transitions(
        {
            "empty": {
                "0": {"action": "output-0"},
                "o": {"action": "output-o"},
            },
            ",": {"0": {"action": ["output-0", "comma"], "next": "o"}},
            ".": {"0": {"action": ["output-0", "copy"], "next": "o"}},
            "else": {"*": {"action": "text="}},
        }
    ),
    {
        "comma": _decimal_comma,
        "output-0": _group_integer_part,
        "output-o": _group_fraction_part,
    },
)

MACHINES = (PU, UNIT, DIGIT_GROUPS)
