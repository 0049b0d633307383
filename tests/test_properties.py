"""Property-based tests for translation invariants using Hypothesis.

Random input may legitimately be rejected; the properties only constrain
what happens when it is accepted.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from chemtex import ChemTexError, Translator, translate
from chemtex.machine import default_interpreter
from chemtex.utils.text import normalize_input

# No braces, dollars, backslashes or row escapes: those have their own tests
_CE_ALPHABET = "ABCHNOSabcxyz0123456789+-=()^_ .,;*<>#'[]"


def _outcome(source: str, mode: str) -> str | type:
    try:
        return translate(source, mode)
    except ChemTexError as e:
        return type(e)


class TestEquationInvariants:
    @given(st.text(alphabet=_CE_ALPHABET, max_size=40))
    @settings(max_examples=200)
    def test_deterministic(self, source: str) -> None:
        assert _outcome(source, "equation") == _outcome(source, "equation")

    @given(st.text(alphabet=_CE_ALPHABET, max_size=40))
    @settings(max_examples=200)
    def test_braces_balanced(self, source: str) -> None:
        out = _outcome(source, "equation")
        if not isinstance(out, str):
            return
        depth = 0
        for char in out:
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            assert depth >= 0, out
        assert depth == 0, out

    @given(st.text(alphabet=_CE_ALPHABET, max_size=40))
    @settings(max_examples=100)
    def test_pass_through_wraps_equation_output(self, source: str) -> None:
        inner = Translator(outer_braces=False)
        try:
            expected = "{" + inner(source, "equation") + "}"
        except ChemTexError as e:
            assert _outcome("\\ce{" + source + "}", "pass-through") is type(e)
            return
        assert translate("\\ce{" + source + "}") == expected


class TestUnitInvariants:
    @given(st.from_regex(r"[0-9]{1,15}", fullmatch=True))
    def test_digit_grouping_keeps_digits(self, digits: str) -> None:
        out = default_interpreter().run(digits, "pu-9,9")
        assert "".join(item for item in out if isinstance(item, str)) == digits

    @given(st.from_regex(r"[0-9]{1,15}", fullmatch=True))
    def test_digit_groups_at_most_three_when_split(self, digits: str) -> None:
        groups = [item for item in default_interpreter().run(digits, "pu-9,9") if isinstance(item, str)]
        if len(groups) > 1:
            assert all(1 <= len(group) <= 3 for group in groups)


class TestNormalization:
    @given(st.text(max_size=200))
    def test_idempotent(self, text: str) -> None:
        once = normalize_input(text)
        assert normalize_input(once) == once

    @given(st.text(max_size=200))
    def test_no_line_breaks_remain(self, text: str) -> None:
        assert "\n" not in normalize_input(text)
