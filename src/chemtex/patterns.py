"""Named matchers used by the transition tables.

Each pattern tests the start of the remaining input and returns either None
or a PatternMatch(value, remainder). Regular patterns are compiled regexes
applied with re.match; the rest are functions built on find_observe_groups,
a scanner that tracks brace depth so that "{...}" groups nest.

Value convention for regex patterns:
    - two or more groups: the list of groups (None where a group did not
      take part)
    - otherwise: the first group, or the whole match if it is empty

Thread Safety:
All patterns are pure functions of their input. The table is built at
import time and never mutated.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from chemtex.errors import MismatchedBraceError, UnknownPatternError


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """Successful match: captured value and the input left after it."""

    value: str | list[str | None]
    remainder: str


PatternFunction = Callable[[str], PatternMatch | None]
Delimiter = str | re.Pattern[str]

# =============================================================================
# Balanced-group scanning
# =============================================================================


def _match_delimiter(text: str, delimiter: Delimiter) -> str | None:
    if isinstance(delimiter, str):
        return delimiter if text.startswith(delimiter) else None
    m = delimiter.match(text)
    return m.group(0) if m else None


def _find_end(text: str, start: int, end: Delimiter) -> tuple[int, int] | None:
    """Find end at brace depth 0, scanning from start.

    Returns (begin, end) offsets of the end delimiter, or None if the text
    runs out first.
    """
    braces = 0
    i = start
    while i < len(text):
        found = _match_delimiter(text[i:], end)
        if found is not None and braces == 0:
            return i, i + len(found)
        char = text[i]
        if char == "{":
            braces += 1
        elif char == "}":
            if braces == 0:
                raise MismatchedBraceError(text, i)
            braces -= 1
        i += 1
    return None


def find_observe_groups(
    text: str,
    begin_excl: Delimiter,
    begin_incl: Delimiter,
    end_incl: Delimiter,
    end_excl: Delimiter,
    begin2_excl: Delimiter = "",
    begin2_incl: Delimiter = "",
    end2_incl: Delimiter = "",
    end2_excl: Delimiter = "",
    combine: bool = False,
) -> PatternMatch | None:
    """Match a delimited group, honoring nested braces.

    The *_excl delimiters are consumed but left out of the value, the
    *_incl delimiters are kept in it. When a second group is described,
    both groups must match; the value is then [group1, group2], or their
    concatenation if combine is set.

    Raises:
        MismatchedBraceError: a "}" closes nothing before the end delimiter

    Example:
        >>> find_observe_groups("{a{b}}c", "{", "", "", "}")
        PatternMatch(value='a{b}', remainder='c')

    """
    found = _match_delimiter(text, begin_excl)
    if found is None:
        return None
    text = text[len(found) :]
    found = _match_delimiter(text, begin_incl)
    if found is None:
        return None
    end = _find_end(text, len(found), end_incl or end_excl)
    if end is None:
        return None
    end_begin, end_end = end
    group1 = text[: end_end if end_incl else end_begin]
    if not (begin2_excl or begin2_incl):
        return PatternMatch(group1, text[end_end:])
    second = find_observe_groups(text[end_end:], begin2_excl, begin2_incl, end2_incl, end2_excl)
    if second is None:
        return None
    groups = [group1, second.value]
    return PatternMatch("".join(groups) if combine else groups, second.remainder)


# =============================================================================
# Regular patterns
# =============================================================================

_GREEK_NAMES = (
    "alpha|beta|gamma|delta|epsilon|zeta|eta|theta|iota|kappa|lambda|mu|nu|xi|omicron|pi|rho"
    "|sigma|tau|upsilon|phi|chi|psi|omega"
)
_GREEK_MACRO = rf"\\(?:{_GREEK_NAMES}|Gamma|Delta|Theta|Lambda|Xi|Pi|Sigma|Upsilon|Phi|Psi|Omega)"
_MACRO_END = r"(?:\s+|\{\}|(?![a-zA-Z]))"
_NUMBER = r"[0-9]+(?:[,.][0-9]+)?|[0-9]*(?:\.[0-9]+)"
_PM = r"\+\-|\+/\-|\+|\-|\\pm\s?"
_MACRO_OPEN = re.compile(r"\\[a-zA-Z]+\{")

_REGEX_PATTERNS: dict[str, str] = {
    "empty": r"$",
    "else": r".",
    "else2": r".",
    "space": r"\s",
    "space A": r"\s(?=[A-Z\\$])",
    "space$": r"\s$",
    "a-z": r"[a-z]",
    "x": r"x",
    "x$": r"x$",
    "i$": r"i$",
    "letters": rf"(?:[a-zA-Z\u03B1-\u03C9\u0391-\u03A9?@]|(?:{_GREEK_MACRO}{_MACRO_END}))+",
    "\\greek": rf"{_GREEK_MACRO}{_MACRO_END}",
    "one lowercase latin letter $": r"(?:([a-z])(?:$|[^a-zA-Z]))$",
    "$one lowercase latin letter$ $": r"\$(?:([a-z])(?:$|[^a-zA-Z]))\$$",
    "one lowercase greek letter $": (
        rf"(?:\$?[\u03B1-\u03C9]\$?|\$?\\(?:{_GREEK_NAMES})\s*\$?){_MACRO_END}$"
    ),
    "digits": r"[0-9]+",
    "-9.,9": rf"[+\-]?(?:{_NUMBER})",
    "-9.,9 no missing 0": r"[+\-]?[0-9]+(?:[.,][0-9]+)?",
    "(-)(9)^(-9)": rf"({_PM})?([0-9]+(?:[,.][0-9]+)?|[0-9]*(?:\.[0-9]+)?)\^([+\-]?[0-9]+|\{{[+\-]?[0-9]+\}})",
    "_{(state of aggregation)}$": r"_\{(\([a-z]{1,3}\))\}",
    "{[(": r"(?:\\\{|\[|\()",
    ")]}": r"(?:\)|\]|\\\})",
    ", ": r"[,;]\s*",
    ",": r"[,;]",
    ".": r"[.]",
    ". __* ": r"([.\u22C5\u00B7\u2022]|[*])\s*",
    "...": r"\.\.\.(?=$|[^.])",
    "^a": r"\^([0-9]+|[^\\_])",
    "^\\x": r"\^(\\[a-zA-Z]+)\s*",
    "^(-1)": r"\^(-?[0-9]+)",
    "'": r"'",
    "_9": r"_([+\-]?[0-9]+|[^\\])",
    "_\\x": r"_(\\[a-zA-Z]+)\s*",
    "^_": r"(?:\^(?=_)|_(?=\^)|[\^_]$)",
    "{}^": r"\{\}(?=\^)",
    "{}": r"\{\}",
    "=<>": r"[=<>]",
    "#": r"[#\u2261]",
    "+": r"\+",
    "-$": r"-(?=[\s_},;\]/]|$|\([a-z]+\))",
    "-9": r"-(?=[0-9])",
    "- orbital overlap": r"-(?=(?:[spd]|sp)(?:$|[\s,;\)\]\}]))",
    "-": r"-",
    "pm-operator": r"(?:\\pm|\$\\pm\$|\+-|\+/-)",
    "operator": r"(?:\+|(?:[\-=<>]|<<|>>|\\approx|\$\\approx\$)(?=\s|$|-?[0-9]))",
    "arrowUpDown": r"(?:v|\(v\)|\^|\(\^\))(?=$|[\s,;\)\]\}])",
    "->": r"(?:<->|<-->|->|<-|<=>>|<<=>|<=>|[\u2192\u27F6\u21CC])",
    "CMT": r"[CMT](?=\[)",
    "1st-level escape": r"(&|\\\\|\\hline)\s*",
    "\\,": r"(?:\\[, ;:])",
    "\\ca": r"\\ca(?:\s+|(?![a-zA-Z]))",
    "\\x": r"(?:\\[a-zA-Z]+\s*|\\[_&{}%])",
    "orbital": r"(?:[0-9]{1,2}[spdfgh]|[0-9]{0,2}sp)(?=$|[^a-zA-Z])",
    "others": r"[/~|]",
    "oxidation$": r"(?:[+-][IVX]+|(?:\\pm|\$\\pm\$|\+-|\+/-)\s*0)$",
    "d-oxidation$": r"(?:[+-]?[IVX]+|(?:\\pm|\$\\pm\$|\+-|\+/-)\s*0)$",
    "1/2$": r"[+\-]?(?:[0-9]+|\$[a-z]\$|[a-z])/[0-9]+(?:\$[a-z]\$|[a-z])?$",
    "(KV letters),": r"(?:[A-Z][a-z]{0,2}|i)(?=,)",
    "uprightEntities": r"(?:pH|pOH|pC|pK|iPr|iBu)(?=$|[^a-zA-Z])",
    "/": r"\s*(/)\s*",
    "//": r"\s*(//)\s*",
    "*": r"\s*[*.]\s*",
}


def _regex_matcher(regex: re.Pattern[str]) -> PatternFunction:
    def match(text: str) -> PatternMatch | None:
        m = regex.match(text)
        if m is None:
            return None
        groups = m.groups()
        remainder = text[m.end() :]
        if len(groups) >= 2:
            return PatternMatch(list(groups), remainder)
        return PatternMatch((groups[0] if groups else None) or m.group(0), remainder)

    return match


# =============================================================================
# Custom patterns
# =============================================================================

_SCIENTIFIC_RE = re.compile(
    rf"({_PM})?({_NUMBER})?(\((?:{_NUMBER})\))?"
    r"(?:(?:([eE])|\s*(\*|x|\\times|\u00D7)\s*10\^)([+\-]?[0-9]+|\{[+\-]?[0-9]+\}))?"
)
_AGGREGATION_OPEN = re.compile(r"\([a-z]{1,3}(?=[\),])")
_PHRASE_END = re.compile(r"($|[\s,;\)\]\}])")
_CRYSTAL_SYSTEM_RE = re.compile(r"(?:\((?:\\ca\s?)?\$[amothc]\$\))")
_AMOUNT_RE = re.compile(
    r"(?:(?:(?:\([+\-]?[0-9]+/[0-9]+\)|[+\-]?(?:[0-9]+|\$[a-z]\$|[a-z])/[0-9]+"
    r"|[+\-]?[0-9]+[.,][0-9]+|[+\-]?\.[0-9]+|[+\-]?[0-9]+)(?:[a-z](?=\s*[A-Z]))?)"
    r"|[+\-]?[a-z](?=\s*[A-Z])|\+(?!\s))"
)
_MATH_AMOUNT_RE = re.compile(
    r"\$(?:\(?[+\-]?(?:[0-9]*[a-z]?[+\-])?[0-9]*[a-z](?:[+\-][0-9]*[a-z]?)?\)?|\+|-)\$$"
)
_AGGREGATION_ONLY_RE = re.compile(r"\([a-z]+\)$")
_FORMULA_RE = re.compile(
    r"(?:[a-z]|(?:[0-9 +\-,.()]+[a-z])+[0-9 +\-,.()]*|(?:[a-z][0-9 +\-,.()]+)+[a-z]?)$"
)


def _scientific_number(text: str) -> PatternMatch | None:
    # The regex can succeed on an empty string; that is not a number.
    m = _SCIENTIFIC_RE.match(text)
    if m and m.group(0):
        return PatternMatch(list(m.groups()), text[m.end() :])
    return None


def _state_of_aggregation(text: str) -> PatternMatch | None:
    # (aq), (aq,$\infty$), (aq, sat) at the end of a phrase, or a crystal system ($o$)
    found = find_observe_groups(text, "", _AGGREGATION_OPEN, ")", "")
    if found and _PHRASE_END.match(found.remainder):
        return found
    m = _CRYSTAL_SYSTEM_RE.match(text)
    if m:
        return PatternMatch(m.group(0), text[m.end() :])
    return None


def _amount(text: str) -> PatternMatch | None:
    # 2, 0.5, 1/2, -2, n/2, +, $2n-1$, $-$
    m = _AMOUNT_RE.match(text)
    if m:
        return PatternMatch(m.group(0), text[m.end() :])
    found = find_observe_groups(text, "", "$", "$", "")
    if found:
        m = _MATH_AMOUNT_RE.match(found.value)
        if m:
            return PatternMatch(m.group(0), text[m.end() :])
    return None


def _formula(text: str) -> PatternMatch | None:
    if _AGGREGATION_ONLY_RE.match(text):
        return None
    m = _FORMULA_RE.match(text)
    if m:
        return PatternMatch(m.group(0), text[m.end() :])
    return None


def _groups(*delimiters: Delimiter, combine: bool = False) -> PatternFunction:
    def match(text: str) -> PatternMatch | None:
        return find_observe_groups(text, *delimiters, combine=combine)

    return match


def _color_with_content(text: str) -> PatternMatch | None:
    # \color{red}{...} or \color\red{...}
    return find_observe_groups(text, "\\color{", "", "", "}", "{", "", "", "}") or (
        find_observe_groups(text, "\\color", "\\", "", re.compile(r"(?=\{)"), "{", "", "", "}")
    )


def _tex_math(text: str) -> PatternMatch | None:
    return find_observe_groups(text, "${", "", "", "}$") or find_observe_groups(
        text, "$", "", "", "$"
    )


_CUSTOM_PATTERNS: dict[str, PatternFunction] = {
    "(-)(9.,9)(e)(99)": _scientific_number,
    "state of aggregation $": _state_of_aggregation,
    "^{(...)}": _groups("^{", "", "", "}"),
    "^($...$)": _groups("^", "$", "$", ""),
    "^\\x{}{}": _groups("^", _MACRO_OPEN, "}", "", "", "{", "}", "", combine=True),
    "^\\x{}": _groups("^", _MACRO_OPEN, "}", ""),
    "_{(...)}": _groups("_{", "", "", "}"),
    "_($...$)": _groups("_", "$", "$", ""),
    "_\\x{}{}": _groups("_", _MACRO_OPEN, "}", "", "", "{", "}", "", combine=True),
    "_\\x{}": _groups("_", _MACRO_OPEN, "}", ""),
    "{...}": _groups("", "{", "}", ""),
    "{(...)}": _groups("{", "", "", "}"),
    "$...$": _groups("", "$", "$", ""),
    "${(...)}$__$(...)$": _tex_math,
    "\\bond{(...)}": _groups("\\bond{", "", "", "}"),
    "[(...)]": _groups("[", "", "", "]"),
    "\\x{}{}": _groups("", _MACRO_OPEN, "}", "", "", "{", "}", "", combine=True),
    "\\x{}": _groups("", _MACRO_OPEN, "}", ""),
    "\\frac{(...)}": _groups("\\frac{", "", "", "}", "{", "", "", "}"),
    "\\overset{(...)}": _groups("\\overset{", "", "", "}", "{", "", "", "}"),
    "\\underset{(...)}": _groups("\\underset{", "", "", "}", "{", "", "", "}"),
    "\\underbrace{(...)}": _groups("\\underbrace{", "", "", "}_", "{", "", "", "}"),
    "\\color{(...)}": _groups("\\color{", "", "", "}"),
    "\\color{(...)}{(...)}": _color_with_content,
    "\\ce{(...)}": _groups("\\ce{", "", "", "}"),
    "\\pu{(...)}": _groups("\\pu{", "", "", "}"),
    "amount": _amount,
    "amount2": _amount,
    "formula$": _formula,
}

PATTERNS: dict[str, PatternFunction] = {
    **{name: _regex_matcher(re.compile(source)) for name, source in _REGEX_PATTERNS.items()},
    **_CUSTOM_PATTERNS,
}


def match(name: str, text: str) -> PatternMatch | None:
    """Apply the named pattern to the start of text.

    Raises:
        UnknownPatternError: name is not in the pattern table
        MismatchedBraceError: a balanced-group scan met an unmatched "}"

    Example:
        >>> match("digits", "12ab")
        PatternMatch(value='12', remainder='ab')
        >>> match("digits", "ab12") is None
        True

    """
    try:
        pattern = PATTERNS[name]
    except KeyError:
        raise UnknownPatternError(name) from None
    return pattern(text)


__all__ = ["PATTERNS", "PatternMatch", "find_observe_groups", "match"]
