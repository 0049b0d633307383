"""Tests for chemtex.utils."""

import logging

from chemtex.utils import get_logger, normalize_input


class TestNormalizeInput:
    def test_line_breaks_become_spaces(self) -> None:
        assert normalize_input("A\nB") == "A B"

    def test_dash_variants(self) -> None:
        assert normalize_input("a\u2212b\u2013c\u2014d\u2010e") == "a-b-c-d-e"

    def test_ellipsis(self) -> None:
        assert normalize_input("A\u2026") == "A..."

    def test_plain_text_unchanged(self) -> None:
        assert normalize_input("H2O -> H2 + O2") == "H2O -> H2 + O2"


class TestGetLogger:
    def test_adds_prefix(self) -> None:
        assert get_logger("mymodule").name == "chemtex.mymodule"

    def test_keeps_package_names(self) -> None:
        assert get_logger("chemtex.machine").name == "chemtex.machine"
        assert get_logger("chemtex").name == "chemtex"

    def test_returns_stdlib_logger(self) -> None:
        assert isinstance(get_logger("x"), logging.Logger)

    def test_grammar_runs_traced_at_debug(self, caplog) -> None:
        from chemtex.machine import default_interpreter

        with caplog.at_level(logging.DEBUG, logger="chemtex"):
            default_interpreter().run("H2O", "ce")
        messages = [r.getMessage() for r in caplog.records if r.name == "chemtex.machine"]
        assert "run ce on 'H2O'" in messages
        assert "run pq on '2'" in messages
