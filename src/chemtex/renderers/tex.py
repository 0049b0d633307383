"""TeX renderer using StringBuilder pattern.

Turns grammar output into TeX math markup. Every node class has exactly one
rendering; kinds without one (bond, arrow, operator) raise instead of
producing partial output.

Thread Safety:
TexRenderer holds no per-render state. Each render() call builds its own
StringBuilder, so one instance can be shared across threads.
"""

from __future__ import annotations

from collections.abc import Sequence

from chemtex.errors import UnknownBondError, UnknownNodeError
from chemtex.nodes import (
    Arrow,
    Bond,
    ChemFive,
    Color,
    Color0,
    CommaEnumeration,
    FirstLevelEscape,
    Frac,
    FracCe,
    Mark,
    MarkKind,
    Operator,
    Overset,
    Parsed,
    PuFrac,
    Rm,
    RomanNumeral,
    StateOfAggregation,
    TexMath,
    Text,
    Underbrace,
    Underset,
)
from chemtex.stringbuilder import StringBuilder

BONDS: dict[str, str] = {
    "-": "{-}",
    "1": "{-}",
    "=": "{=}",
    "2": "{=}",
    "#": "{\\equiv}",
    "3": "{\\equiv}",
    "~": "{\\tripledash}",
    "~-": "{\\rlap{\\lower.1em{-}}\\raise.1em{\\tripledash}}",
    "~=": "{\\rlap{\\lower.2em{-}}\\rlap{\\raise.2em{\\tripledash}}-}",
    "~--": "{\\rlap{\\lower.2em{-}}\\rlap{\\raise.2em{\\tripledash}}-}",
    "-~-": "{\\rlap{\\lower.2em{-}}\\rlap{\\raise.2em{-}}\\tripledash}",
    "...": "{{\\cdot}{\\cdot}{\\cdot}}",
    "....": "{{\\cdot}{\\cdot}{\\cdot}{\\cdot}}",
    "->": "{\\rightarrow}",
    "<-": "{\\leftarrow}",
    "<": "{<}",
    ">": "{>}",
}

ARROWS: dict[str, str] = {
    "->": "rightarrow",
    "\u2192": "rightarrow",
    "\u27f6": "rightarrow",
    "<-": "leftarrow",
    "<->": "leftrightarrow",
    "<-->": "leftrightarrows",
    "<=>": "rightleftharpoons",
    "\u21cc": "rightleftharpoons",
    "<=>>": "Rightleftharpoons",
    "<<=>": "Leftrightharpoons",
}

# No extensible \x... form exists for these; conditions are stacked instead.
_STACKED_ARROWS = frozenset({"<=>", "<=>>", "<<=>", "<-->"})

OPERATORS: dict[str, str] = {
    "+": " {}+{} ",
    "-": " {}-{} ",
    "=": " {}={} ",
    "<": " {}<{} ",
    ">": " {}>{} ",
    "<<": " {}\\ll{} ",
    ">>": " {}\\gg{} ",
    "\\pm": " {}\\pm{} ",
    "\\approx": " {}\\approx{} ",
    "$\\approx$": " {}\\approx{} ",
    "v": " \\downarrow{} ",
    "(v)": " \\downarrow{} ",
    "^": " \\uparrow{} ",
    "(^)": " \\uparrow{} ",
}

MARKS: dict[MarkKind, str] = {
    MarkKind.TINY_SKIP: "\\mkern2mu",
    MarkKind.ENTITY_SKIP: "~",
    MarkKind.PU_SPACE_1: "~",
    MarkKind.PU_SPACE_2: "\\mkern3mu ",
    MarkKind.THOUSAND_SEPARATOR: "\\mkern2mu ",
    MarkKind.COMMA_DECIMAL: "{,}",
    MarkKind.HYPHEN: "\\text{-}",
    MarkKind.ADDITION_COMPOUND: "\\,{\\cdot}\\,",
    MarkKind.ELECTRON_DOT: "\\mkern1mu \\bullet\\mkern1mu ",
    MarkKind.KV_X: "{\\times}",
    MarkKind.PRIME: "\\prime ",
    MarkKind.CDOT: "\\cdot ",
    MarkKind.TIGHT_CDOT: "\\mkern1mu{\\cdot}\\mkern1mu ",
    MarkKind.TIMES: "\\times ",
    MarkKind.CIRCA: "{\\sim}",
    MarkKind.ELLIPSIS: "\\ldots ",
    MarkKind.SLASH: "/",
    MarkKind.SPACED_SLASH: "\\,/\\,",
}

_ENUMERATION_SKIPS = {"L": "\\mkern6mu ", "M": "\\mkern3mu ", "S": "\\mkern1mu "}


def _math_choice(fraction: str) -> str:
    return "\\mathchoice{\\textstyle" + fraction + "}{" + fraction + "}{" + fraction + "}{" + fraction + "}"


def _brace_signed(text: str) -> str:
    # A leading sign would otherwise read as a binary operator.
    if text[:1] in ("+", "-"):
        return "{" + text + "}"
    return text


class TexRenderer:
    """Render grammar output to TeX.

    Usage:
        >>> from chemtex.machine import default_interpreter
        >>> nodes = default_interpreter().run("H2O", "ce")
        >>> TexRenderer().render(nodes, wrap_in_braces=True)
        '{\\\\mathrm{H}{\\\\vphantom{A}}_{\\\\smash[t]{2}}\\\\mathrm{O}}'

    Thread Safety:
        Stateless; share one instance freely.
    """

    __slots__ = ()

    def render(self, nodes: Sequence[Parsed] | None, wrap_in_braces: bool = False) -> str:
        """Render nodes to TeX.

        Args:
            nodes: Output of a grammar run
            wrap_in_braces: Enclose the result in one brace pair, unless it
                is empty or contains a top-level row/column escape

        Raises:
            UnknownBondError: a Bond kind has no rendering
            UnknownNodeError: an unknown node class, arrow or operator kind
        """
        if not nodes:
            return ""
        sb = StringBuilder()
        escaped = False
        for node in nodes:
            if isinstance(node, str):
                sb.append(node)
                continue
            self._render_node(node, sb)
            if isinstance(node, FirstLevelEscape):
                escaped = True
        if wrap_in_braces and not escaped and sb:
            return "{" + sb.build() + "}"
        return sb.build()

    def _inner(self, nodes: Sequence[Parsed] | None) -> str:
        return self.render(nodes, False)

    def _render_node(self, node: Parsed, sb: StringBuilder) -> None:
        """Dispatch on node class."""
        match node:
            case ChemFive():
                self._render_chem_five(node, sb)
            case Rm() | RomanNumeral():
                sb.append("\\mathrm{").append(node.p1).append("}")
            case Text():
                self._render_text(node, sb)
            case StateOfAggregation():
                sb.append("\\mskip1mu " if node.subscript else "\\mskip2mu ")
                sb.append(self._inner(node.p1))
            case Bond():
                bond = BONDS.get(node.kind)
                if bond is None:
                    raise UnknownBondError(node.kind)
                sb.append(bond)
            case Frac():
                sb.append(_math_choice("\\frac{" + node.p1 + "}{" + node.p2 + "}"))
            case PuFrac():
                sb.append(_math_choice("\\frac{" + self._inner(node.p1) + "}{" + self._inner(node.p2) + "}"))
            case TexMath():
                sb.append(node.p1).append(" ")
            case FracCe():
                sb.extend(["\\frac{", self._inner(node.p1), "}{", self._inner(node.p2), "}"])
            case Overset():
                sb.extend(["\\overset{", self._inner(node.p1), "}{", self._inner(node.p2), "}"])
            case Underset():
                sb.extend(["\\underset{", self._inner(node.p1), "}{", self._inner(node.p2), "}"])
            case Underbrace():
                sb.extend(["\\underbrace{", self._inner(node.p1), "}_{", self._inner(node.p2), "}"])
            case Color():
                sb.extend(["{\\color{", node.color1, "}{", self._inner(node.color2), "}}"])
            case Color0():
                sb.extend(["\\color{", node.color, "}"])
            case Arrow():
                self._render_arrow(node, sb)
            case Operator():
                operator = OPERATORS.get(node.kind)
                if operator is None:
                    raise UnknownNodeError(f"operator {node.kind!r}")
                sb.append(operator)
            case FirstLevelEscape():
                sb.append(node.p1).append(" ")
            case CommaEnumeration():
                sb.extend(["{", node.p1, "}", _ENUMERATION_SKIPS[node.size]])
            case Mark():
                sb.append(MARKS[node.kind])
            case _:
                raise UnknownNodeError(type(node).__name__)

    def _render_chem_five(self, node: ChemFive, sb: StringBuilder) -> None:
        amount = self._inner(node.amount)
        left_sup = self._inner(node.left_sup)
        left_sub = self._inner(node.left_sub)
        symbol = self._inner(node.symbol)
        right_sub = self._inner(node.right_sub)
        right_sup = self._inner(node.right_sup)

        if amount:
            sb.append(_brace_signed(amount)).append("\\,")
        if left_sup or left_sub:
            # Left scripts are right-aligned against the symbol.
            sb.append("{\\vphantom{A}}")
            sb.extend(["^{\\hphantom{", left_sup, "}}_{\\hphantom{", left_sub, "}}"])
            sb.append("\\mkern-1.5mu")
            sb.append("{\\vphantom{A}}")
            sb.extend(["^{\\smash[t]{\\vphantom{2}}\\llap{", left_sup, "}}"])
            sb.extend(["_{\\vphantom{2}\\llap{\\smash[t]{", left_sub, "}}}"])
        if symbol:
            sb.append(_brace_signed(symbol))

        sup = "^{" + right_sup + "}" if right_sup else ""
        sub = "_{\\smash[t]{" + right_sub + "}}" if right_sub else ""
        if node.d_type == "kv":
            if sup or sub:
                sb.append("{\\vphantom{A}}")
            sb.append(sup).append(sub)
        elif node.d_type == "oxidation":
            if sup:
                sb.append("{\\vphantom{A}}").append(sup)
            if sub:
                sb.append("{\\vphantom{A}}").append(sub)
        else:
            if sub:
                sb.append("{\\vphantom{A}}").append(sub)
            if sup:
                sb.append("{\\vphantom{A}}").append(sup)

    def _render_text(self, node: Text, sb: StringBuilder) -> None:
        if "^" in node.p1 or "_" in node.p1:
            # Scripts need math mode; keep the first space and hyphen visible.
            p1 = node.p1.replace(" ", "~", 1).replace("-", "\\text{-}", 1)
            sb.append("\\mathrm{").append(p1).append("}")
        else:
            sb.append("\\text{").append(node.p1).append("}")

    def _render_arrow(self, node: Arrow, sb: StringBuilder) -> None:
        arrow = ARROWS.get(node.kind)
        if arrow is None:
            raise UnknownNodeError(f"arrow {node.kind!r}")
        above = self._inner(node.above)
        below = self._inner(node.below)
        if not (above or below):
            sb.extend([" {}\\mathrel{\\long", arrow, "}{} "])
        elif node.kind in _STACKED_ARROWS:
            arrow = "\\long" + arrow
            if above:
                arrow = "\\overset{" + above + "}{" + arrow + "}"
            if below:
                lower = "\\lower2mu" if node.kind == "<-->" else "\\lower6mu"
                arrow = "\\underset{" + lower + "{" + below + "}}{" + arrow + "}"
            sb.extend([" {}\\mathrel{", arrow, "}{} "])
        else:
            if below:
                arrow += "[{" + below + "}]"
            arrow += "{" + above + "}"
            sb.extend([" {}\\mathrel{\\x", arrow, "}{} "])


__all__ = ["ARROWS", "BONDS", "MARKS", "OPERATORS", "TexRenderer"]
