"""End-to-end tests of the public API: translate, parse, render, Translator."""

import pytest

import chemtex
from chemtex import (
    MismatchedBraceError,
    Mode,
    Translator,
    UnknownBondError,
    parse,
    render,
    translate,
)
from chemtex.nodes import ChemFive, Rm

WATER = "{\\mathrm{H}{\\vphantom{A}}_{\\smash[t]{2}}\\mathrm{O}}"


class TestMode:
    def test_values(self) -> None:
        assert Mode("pass-through") is Mode.PASS_THROUGH
        assert Mode("equation") is Mode.EQUATION
        assert Mode("unit") is Mode.UNIT

    def test_machine_names(self) -> None:
        assert Mode.PASS_THROUGH.machine_name == "tex"
        assert Mode.EQUATION.machine_name == "ce"
        assert Mode.UNIT.machine_name == "pu"

    def test_unknown_mode(self) -> None:
        with pytest.raises(ValueError):
            translate("H2O", "chemistry")


class TestTranslateEquation:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("H2O", WATER),
            ("A + B -> C", "{\\mathrm{A} {}+{} \\mathrm{B} {}\\mathrel{\\longrightarrow}{} \\mathrm{C}}"),
            ("A^{2+}", "{\\mathrm{A}{\\vphantom{A}}^{2+}}"),
            ("Fe^{II}", "{\\mathrm{Fe}{\\vphantom{A}}^{\\mathrm{II}}}"),
            ("2H2O", "{2\\,\\mathrm{H}{\\vphantom{A}}_{\\smash[t]{2}}\\mathrm{O}}"),
            ("SO4^2-", "{\\mathrm{SO}{\\vphantom{A}}_{\\smash[t]{4}}{\\vphantom{A}}^{2-}}"),
            ("H-C", "{\\mathrm{H}{-}\\mathrm{C}}"),
            ("C=C", "{\\mathrm{C}{=}\\mathrm{C}}"),
            ("x-ray", "{x \\text{-}\\mathrm{ray}}"),
            ("NaCl(aq)", "{\\mathrm{NaCl}\\mskip2mu (\\mathrm{aq})}"),
            ("CO2 ^", "{\\mathrm{CO}{\\vphantom{A}}_{\\smash[t]{2}} \\uparrow{} }"),
        ],
    )
    def test_translate(self, source: str, expected: str) -> None:
        assert translate(source, Mode.EQUATION) == expected

    def test_arrow_with_condition(self) -> None:
        expected = (
            "{\\mathrm{A} {}\\mathrel{\\xrightarrow{"
            "\\mathrm{H}{\\vphantom{A}}_{\\smash[t]{2}}\\mathrm{O}"
            "}}{} \\mathrm{B}}"
        )
        assert translate("A ->[H2O] B", "equation") == expected

    def test_equilibrium(self) -> None:
        assert " {}\\mathrel{\\longrightleftharpoons}{} " in translate("A <=> B", "equation")
        assert (
            " {}\\mathrel{\\overset{\\mathrm{x}}{\\longrightleftharpoons}}{} "
            in translate("A <=>[x] B", "equation")
        )

    def test_isotope(self) -> None:
        out = translate("^{14}C", "equation")
        assert "\\llap{14}" in out
        assert out.endswith("\\mathrm{C}}")

    def test_addition_compound(self) -> None:
        out = translate("CuSO4*5H2O", "equation")
        assert "\\,{\\cdot}\\," in out
        assert "5\\,\\mathrm{H}" in out

    def test_fraction_amount(self) -> None:
        out = translate("1/2 O2", "equation")
        assert out.startswith(
            "{\\mathchoice{\\textstyle\\frac{1}{2}}{\\frac{1}{2}}{\\frac{1}{2}}{\\frac{1}{2}}\\,\\mathrm{O}"
        )

    def test_first_level_escape_is_not_wrapped(self) -> None:
        assert translate("A & B", "equation") == "\\mathrm{A}& \\mathrm{B}"

    def test_empty(self) -> None:
        assert translate("", "equation") == ""

    def test_unicode_minus_is_normalized(self) -> None:
        assert translate("H\u2212C", "equation") == translate("H-C", "equation")


class TestTranslateUnit:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("1.23(4)", "{1.23(4)}"),
            ("12345", "{12\\mkern2mu 345}"),
            ("1.2e3 m", "{1.2\\cdot 10^{3}~\\mathrm{m}}"),
            ("kJ/mol", "{\\mathrm{kJ}/\\mathrm{mol}}"),
            ("123 kJ/mol", "{123~\\mathrm{kJ}/\\mathrm{mol}}"),
            ("-5 \u00b0C", "{-5~\\mathrm{{}^{\\circ}C}}"),
            ("5 m s^-1", "{5~\\mathrm{m}\\mkern3mu \\mathrm{s^{-1}}}"),
            ("1.2 +- 0.1 m", "{1.2 {}\\pm{} 0.1~\\mathrm{m}}"),
        ],
    )
    def test_translate(self, source: str, expected: str) -> None:
        assert translate(source, Mode.UNIT) == expected

    def test_display_fraction(self) -> None:
        out = translate("J//mol", "unit")
        assert out == (
            "{\\mathchoice{\\textstyle\\frac{\\mathrm{J}}{\\mathrm{mol}}}"
            "{\\frac{\\mathrm{J}}{\\mathrm{mol}}}"
            "{\\frac{\\mathrm{J}}{\\mathrm{mol}}}"
            "{\\frac{\\mathrm{J}}{\\mathrm{mol}}}}"
        )


class TestTranslatePassThrough:
    def test_default_mode(self) -> None:
        assert translate("Water: \\ce{H2O}.") == "Water: " + WATER + "."

    def test_plain_text_unchanged(self) -> None:
        assert translate("no chemistry here") == "no chemistry here"

    def test_unit_command(self) -> None:
        assert translate("\\pu{kJ/mol}") == "{\\mathrm{kJ}/\\mathrm{mol}}"

    def test_several_commands(self) -> None:
        out = translate("\\ce{H2O} and \\ce{H2O}")
        assert out == WATER + " and " + WATER

    def test_no_outer_wrap(self) -> None:
        assert translate("x", "pass-through") == "x"


class TestParseAndRender:
    def test_parse_returns_tuple(self) -> None:
        nodes = parse("H", "equation")
        assert nodes == (ChemFive(symbol=(Rm("H"),)),)

    def test_render_round_trip(self) -> None:
        assert render(parse("H2O", "equation"), wrap_in_braces=True) == WATER

    def test_parse_accepts_bond_translate_rejects(self) -> None:
        nodes = parse("A\\bond{?}B", "equation")
        assert nodes
        with pytest.raises(UnknownBondError):
            render(nodes)

    def test_parse_error_propagates(self) -> None:
        with pytest.raises(MismatchedBraceError):
            parse("A ->[x}] B", "equation")


class TestTranslator:
    def test_call(self) -> None:
        assert Translator()("H2O", "equation") == WATER

    def test_no_outer_braces(self) -> None:
        tex = Translator(outer_braces=False)
        assert tex("CO2", "equation") == "\\mathrm{CO}{\\vphantom{A}}_{\\smash[t]{2}}"

    def test_config_property(self) -> None:
        tex = Translator(stagnation_limit=20)
        assert tex.config.stagnation_limit == 20
        assert tex.config.outer_braces is True

    def test_parse(self) -> None:
        assert Translator().parse("H", "equation") == parse("H", "equation")

    def test_translate_many(self) -> None:
        tex = Translator()
        assert tex.translate_many(["H2O", "H2O"], "equation") == [WATER, WATER]

    def test_translate_many_empty(self) -> None:
        assert Translator().translate_many([]) == []


class TestPackage:
    def test_version(self) -> None:
        assert chemtex.__version__ == "0.1.0"

    def test_all_exports_exist(self) -> None:
        for name in chemtex.__all__:
            assert hasattr(chemtex, name), name
