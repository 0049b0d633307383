"""Typed output nodes for chemtex.

Grammars emit a flat sequence of literal strings and nodes; nodes carry
nested sub-parses as tuples of the same shape. All nodes are frozen
dataclasses with slots, so sequences can be shared and compared freely.

Node Hierarchy:
Node (base)
├── ChemFive            composite chemical group
├── Rm / Text / RomanNumeral / TexMath
├── StateOfAggregation
├── Bond / Arrow / Operator
├── Frac / PuFrac / FracCe
├── Overset / Underset / Underbrace
├── Color / Color0
├── FirstLevelEscape / CommaEnumeration
└── Mark                payload-free markers (see MarkKind)

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, TypeAlias, Union

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all output nodes."""


Parsed: TypeAlias = Union[str, Node]
"""One element of a grammar's output: literal TeX text or a node."""

Parse: TypeAlias = tuple[Parsed, ...]
"""A complete sub-parse."""


# =============================================================================
# Chemistry
# =============================================================================


@dataclass(frozen=True, slots=True)
class ChemFive(Node):
    """One chemical entity: amount, left and right scripts, main symbol.

    Rendered as  amount  {}^{left_sup}_{left_sub} symbol _{right_sub}^{right_sup}.

    d_type decides how the right-hand pair is read:
    "kv" for a Kekulé valence/charge written after a bond, "oxidation" for a
    Roman-numeral oxidation state, None for an ordinary charge.

    """

    amount: Parse = ()
    left_sup: Parse = ()
    left_sub: Parse = ()
    symbol: Parse = ()
    right_sub: Parse = ()
    right_sup: Parse = ()
    d_type: Literal["kv", "oxidation"] | None = None


@dataclass(frozen=True, slots=True)
class StateOfAggregation(Node):
    """Phase suffix such as (aq) or (s); subscript form inside scripts."""

    p1: Parse
    subscript: bool = False


@dataclass(frozen=True, slots=True)
class Bond(Node):
    """Chemical bond. kind is the source spelling: "-", "=", "#", "~-", "->"..."""

    kind: str


@dataclass(frozen=True, slots=True)
class Arrow(Node):
    """Reaction arrow with optional conditions above and below.

    above_kind/below_kind record how the condition text was parsed:
    "equation" (as \\ce), "math" (M prefix) or "text" (T prefix).

    """

    kind: str
    above: Parse = ()
    below: Parse = ()
    above_kind: Literal["equation", "math", "text"] = "equation"
    below_kind: Literal["equation", "math", "text"] = "equation"


@dataclass(frozen=True, slots=True)
class Operator(Node):
    """Binary operator between entities: +, -, =, \\pm, arrows up/down."""

    kind: str


# =============================================================================
# Text runs
# =============================================================================


@dataclass(frozen=True, slots=True)
class Rm(Node):
    """Upright letters (element symbols, unit names)."""

    p1: str


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Free text run."""

    p1: str


@dataclass(frozen=True, slots=True)
class RomanNumeral(Node):
    """Oxidation number written in Roman numerals."""

    p1: str


@dataclass(frozen=True, slots=True)
class TexMath(Node):
    """Raw TeX math passed through unchanged."""

    p1: str


# =============================================================================
# Two-part constructs
# =============================================================================


@dataclass(frozen=True, slots=True)
class Frac(Node):
    """Simple numeric fraction such as 1/2 used as an amount or index."""

    p1: str
    p2: str


@dataclass(frozen=True, slots=True)
class PuFrac(Node):
    """Unit fraction written with //."""

    p1: Parse
    p2: Parse


@dataclass(frozen=True, slots=True)
class FracCe(Node):
    """\\frac{..}{..} with chemical numerator and denominator."""

    p1: Parse
    p2: Parse


@dataclass(frozen=True, slots=True)
class Overset(Node):
    p1: Parse
    p2: Parse


@dataclass(frozen=True, slots=True)
class Underset(Node):
    p1: Parse
    p2: Parse


@dataclass(frozen=True, slots=True)
class Underbrace(Node):
    p1: Parse
    p2: Parse


@dataclass(frozen=True, slots=True)
class Color(Node):
    """\\color{name}{content}."""

    color1: str
    color2: Parse


@dataclass(frozen=True, slots=True)
class Color0(Node):
    """Bare \\color{name} switch."""

    color: str


# =============================================================================
# Escapes and markers
# =============================================================================


@dataclass(frozen=True, slots=True)
class FirstLevelEscape(Node):
    """Host-language row/column escape (&, \\\\, \\hline).

    Its presence keeps the surrounding output unwrapped.

    """

    p1: str


@dataclass(frozen=True, slots=True)
class CommaEnumeration(Node):
    """Comma or semicolon in an enumeration.

    size is the spacing after the separator: "L" at top level after a
    space, "M" inside parentheses, "S" inside scripts.

    """

    p1: str
    size: Literal["L", "M", "S"] = "M"


class MarkKind(Enum):
    """Payload-free output markers."""

    TINY_SKIP = "tiny skip"
    ENTITY_SKIP = "entity skip"
    PU_SPACE_1 = "pu space 1"
    PU_SPACE_2 = "pu space 2"
    THOUSAND_SEPARATOR = "1000 separator"
    COMMA_DECIMAL = "comma decimal"
    HYPHEN = "hyphen"
    ADDITION_COMPOUND = "addition compound"
    ELECTRON_DOT = "electron dot"
    KV_X = "KV x"
    PRIME = "prime"
    CDOT = "cdot"
    TIGHT_CDOT = "tight cdot"
    TIMES = "times"
    CIRCA = "circa"
    ELLIPSIS = "ellipsis"
    SLASH = "/"
    SPACED_SLASH = " / "


@dataclass(frozen=True, slots=True)
class Mark(Node):
    kind: MarkKind


__all__ = [
    "Arrow",
    "Bond",
    "ChemFive",
    "Color",
    "Color0",
    "CommaEnumeration",
    "FirstLevelEscape",
    "Frac",
    "FracCe",
    "Mark",
    "MarkKind",
    "Node",
    "Operator",
    "Overset",
    "Parse",
    "Parsed",
    "PuFrac",
    "Rm",
    "RomanNumeral",
    "StateOfAggregation",
    "TexMath",
    "Text",
    "Underbrace",
    "Underset",
]
