"""Tests for chemtex.patterns: named matchers and the balanced-group scanner."""

import pytest

from chemtex.errors import MismatchedBraceError, UnknownPatternError
from chemtex.patterns import PATTERNS, PatternMatch, find_observe_groups, match


class TestRegexPatterns:
    """Regex-backed patterns anchor at the start of the input."""

    def test_digits(self) -> None:
        assert match("digits", "12ab") == PatternMatch("12", "ab")
        assert match("digits", "ab12") is None

    def test_empty_only_matches_end(self) -> None:
        assert match("empty", "") == PatternMatch("", "")
        assert match("empty", "x") is None

    def test_single_group_returns_group(self) -> None:
        assert match("^a", "^2+") == PatternMatch("2", "+")
        assert match("_9", "_12x") == PatternMatch("12", "x")

    def test_letters_include_greek_macros(self) -> None:
        assert match("letters", "NaCl2") == PatternMatch("NaCl", "2")
        assert match("letters", "\\alpha2").value == "\\alpha"

    def test_arrow_alternatives_longest_first(self) -> None:
        assert match("->", "<=>> B").value == "<=>>"
        assert match("->", "<--> B").value == "<-->"
        assert match("->", "-> B").value == "->"

    def test_operator_needs_space_or_number_after(self) -> None:
        assert match("operator", "- B") is not None
        assert match("operator", "-B") is None
        assert match("operator", "+B").value == "+"

    def test_charge_minus_at_end_of_phrase(self) -> None:
        assert match("-$", "-") is not None
        assert match("-$", "- ") is not None
        assert match("-$", "-C") is None

    def test_oxidation_states(self) -> None:
        assert match("oxidation$", "+II") is not None
        assert match("oxidation$", "II") is None
        assert match("d-oxidation$", "II") is not None

    def test_orbital(self) -> None:
        assert match("orbital", "2p") is not None
        assert match("orbital", "sp") is not None
        assert match("orbital", "2px") is None

    def test_first_level_escape(self) -> None:
        assert match("1st-level escape", "&  B") == PatternMatch("&", "B")
        assert match("1st-level escape", "\\\\ B").value == "\\\\"

    def test_unit_slashes(self) -> None:
        assert match("/", " / mol") == PatternMatch("/", "mol")
        assert match("//", "//mol") == PatternMatch("//", "mol")


class TestCustomPatterns:
    """Function-backed patterns."""

    def test_scientific_number_groups(self) -> None:
        found = match("(-)(9.,9)(e)(99)", "1.2e3 m")
        assert found is not None
        assert found.value == [None, "1.2", None, "e", None, "3"]
        assert found.remainder == " m"

    def test_scientific_number_with_uncertainty(self) -> None:
        found = match("(-)(9.,9)(e)(99)", "1.23(4)")
        assert found.value == [None, "1.23", "(4)", None, None, None]

    def test_scientific_number_times_ten(self) -> None:
        found = match("(-)(9.,9)(e)(99)", "-2 x 10^5")
        assert found.value == ["-", "2", None, None, "x", "5"]

    def test_scientific_number_rejects_empty_match(self) -> None:
        assert match("(-)(9.,9)(e)(99)", "kg") is None

    def test_state_of_aggregation_at_phrase_end(self) -> None:
        assert match("state of aggregation $", "(aq) + B") == PatternMatch("(aq)", " + B")
        assert match("state of aggregation $", "(aq)x") is None

    def test_crystal_system(self) -> None:
        assert match("state of aggregation $", "($c$)").value == "($c$)"

    def test_amount(self) -> None:
        assert match("amount", "2H2O") == PatternMatch("2", "H2O")
        assert match("amount", "1/2 O2") == PatternMatch("1/2", " O2")
        assert match("amount", "$n$ H2O") == PatternMatch("$n$", " H2O")
        assert match("amount", "H2O") is None

    def test_formula(self) -> None:
        assert match("formula$", "x") is not None
        assert match("formula$", "2n+1") is not None
        assert match("formula$", "(aq)") is None

    def test_braced_groups(self) -> None:
        assert match("^{(...)}", "^{2+}") == PatternMatch("2+", "")
        assert match("{...}", "{a{b}}c") == PatternMatch("{a{b}}", "c")
        assert match("{(...)}", "{a{b}}c") == PatternMatch("a{b}", "c")

    def test_two_groups(self) -> None:
        assert match("\\frac{(...)}", "\\frac{1}{2}x") == PatternMatch(["1", "2"], "x")
        assert match("\\color{(...)}{(...)}", "\\color{red}{A}") == PatternMatch(["red", "A"], "")

    def test_combined_groups(self) -> None:
        assert match("\\x{}{}", "\\mathrm{a}{b}c") == PatternMatch("\\mathrm{a}{b}", "c")

    def test_tex_math_both_forms(self) -> None:
        assert match("${(...)}$__$(...)$", "${x}$ y").value == "x"
        assert match("${(...)}$__$(...)$", "$x$ y").value == "x"

    def test_every_table_entry_is_callable(self) -> None:
        for name, function in PATTERNS.items():
            assert callable(function), name


class TestFindObserveGroups:
    """Balanced-group scanner."""

    def test_nested_braces(self) -> None:
        assert find_observe_groups("{a{b}}c", "{", "", "", "}") == PatternMatch("a{b}", "c")

    def test_end_inside_braces_is_skipped(self) -> None:
        found = find_observe_groups("[a{]}]b", "[", "", "", "]")
        assert found == PatternMatch("a{]}", "b")

    def test_missing_end_returns_none(self) -> None:
        assert find_observe_groups("{abc", "{", "", "", "}") is None

    def test_missing_begin_returns_none(self) -> None:
        assert find_observe_groups("abc}", "{", "", "", "}") is None

    def test_stray_closing_brace_raises(self) -> None:
        with pytest.raises(MismatchedBraceError) as exc_info:
            find_observe_groups("[x}]", "[", "", "", "]")
        assert exc_info.value.offset == 1
        assert exc_info.value.fragment == "x}]"


class TestMatchFunction:
    def test_unknown_pattern_raises(self) -> None:
        with pytest.raises(UnknownPatternError) as exc_info:
            match("no such pattern", "x")
        assert exc_info.value.name == "no such pattern"
