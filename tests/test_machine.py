"""Tests for the state-machine interpreter using small synthetic grammars."""

import pytest

from chemtex.actions import ACTIONS, run_machine
from chemtex.config import TranslateConfig, translate_config_context
from chemtex.errors import (
    StagnationError,
    UnknownActionError,
    UnknownMachineError,
    UnknownPatternError,
    UnmatchedInputError,
)
from chemtex.machine import Interpreter, StateMachine, concat, default_interpreter
from chemtex.nodes import Rm
from chemtex.transitions import compile_transitions


def _interpreter(raw: dict, actions: dict | None = None) -> Interpreter:
    machine = StateMachine("test", compile_transitions(raw), actions or {})
    return Interpreter({"test": machine}, ACTIONS)


class TestRun:
    """Basic interpreter behavior."""

    def test_empty_input_yields_nothing(self) -> None:
        interp = _interpreter({"else": {"*": {"action": "copy"}}})
        assert interp.run("", "test") == []
        assert interp.run(None, "test") == []

    def test_copies_until_empty(self) -> None:
        interp = _interpreter({"empty": {"*": {"action": []}}, "else": {"*": {"action": "copy"}}})
        assert interp.run("ab", "test") == ["a", "b"]

    def test_first_declared_rule_wins(self) -> None:
        interp = _interpreter(
            {
                "empty": {"*": {"action": []}},
                "else": {"0": {"action": ("write", "E")}},
                "digits": {"0": {"action": ("write", "D")}},
            }
        )
        assert interp.run("1", "test") == ["E"]

    def test_first_declared_rule_wins_reversed(self) -> None:
        interp = _interpreter(
            {
                "empty": {"*": {"action": []}},
                "digits": {"0": {"action": ("write", "D")}},
                "else": {"0": {"action": ("write", "E")}},
            }
        )
        assert interp.run("1", "test") == ["D"]

    def test_state_changes_select_rules(self) -> None:
        interp = _interpreter(
            {
                "empty": {"*": {"action": []}},
                "digits": {"0": {"action": ("write", "N"), "next": "1"}, "1": {"action": ("write", "M")}},
                "else": {"*": {"action": "copy"}},
            }
        )
        assert interp.run("1a2", "test") == ["N", "a", "M"]

    def test_revisit_does_not_consume(self) -> None:
        interp = _interpreter(
            {
                "empty": {"*": {"action": []}},
                "else": {
                    "0": {"action": ("write", "<"), "next": "1", "revisit": True},
                    "1": {"action": "copy"},
                },
            }
        )
        assert interp.run("ab", "test") == ["<", "a", "b"]

    def test_continue_tries_later_rules(self) -> None:
        interp = _interpreter(
            {
                "empty": {"*": {"action": []}},
                "else": {"0": {"action": ("write", "+"), "revisit": True, "continue": True}},
                "letters": {"0": {"action": "rm"}},
            }
        )
        assert interp.run("ab", "test") == ["+", Rm("ab")]

    def test_local_actions_shadow_shared_ones(self) -> None:
        interp = _interpreter(
            {"empty": {"*": {"action": []}}, "else": {"*": {"action": "copy"}}},
            {"copy": lambda interp, buffer, m, option: m.upper()},
        )
        assert interp.run("ab", "test") == ["A", "B"]

    def test_input_is_normalized(self) -> None:
        interp = _interpreter({"empty": {"*": {"action": []}}, "else": {"*": {"action": "copy"}}})
        assert interp.run("a−\n", "test") == ["a", "-", " "]

    def test_unknown_machine(self) -> None:
        with pytest.raises(UnknownMachineError) as exc_info:
            _interpreter({}).run("x", "nope")
        assert exc_info.value.name == "nope"

    def test_unknown_machine_from_action(self) -> None:
        interp = _interpreter({"else": {"*": {"action": "nested"}}}, {"nested": run_machine("missing")})
        with pytest.raises(UnknownMachineError):
            interp.run("x", "test")


class TestFailures:
    """Grammar defects surface as InternalInconsistencyError subclasses."""

    def test_stagnation_is_detected(self) -> None:
        interp = _interpreter({"else": {"0": {"action": [], "revisit": True}}})
        with pytest.raises(StagnationError) as exc_info:
            interp.run("a", "test")
        assert exc_info.value.limit == 10
        assert exc_info.value.remaining == "a"

    def test_stagnation_limit_comes_from_config(self) -> None:
        interp = _interpreter({"else": {"0": {"action": [], "revisit": True}}})
        with translate_config_context(TranslateConfig(stagnation_limit=3)):
            with pytest.raises(StagnationError) as exc_info:
                interp.run("a", "test")
        assert exc_info.value.limit == 3

    def test_no_matching_rule(self) -> None:
        interp = _interpreter({"digits": {"0": {"action": "copy"}}})
        with pytest.raises(UnmatchedInputError) as exc_info:
            interp.run("1a", "test")
        err = exc_info.value
        assert (err.machine, err.state, err.remaining) == ("test", "0", "a")

    def test_unknown_pattern(self) -> None:
        interp = _interpreter({"no such pattern": {"0": {"action": "copy"}}})
        with pytest.raises(UnknownPatternError):
            interp.run("a", "test")

    def test_unknown_action(self) -> None:
        interp = _interpreter({"else": {"0": {"action": "bogus"}}})
        with pytest.raises(UnknownActionError) as exc_info:
            interp.run("a", "test")
        assert exc_info.value.name == "bogus"
        assert exc_info.value.machine == "test"


class TestConcat:
    def test_drops_empty_scalars(self) -> None:
        output: list = []
        concat(output, None)
        concat(output, "")
        concat(output, [])
        assert output == []

    def test_flattens_one_level(self) -> None:
        output: list = ["a"]
        concat(output, ["b", ""])
        concat(output, Rm("c"))
        assert output == ["a", "b", "", Rm("c")]


class TestDefaultInterpreter:
    def test_is_shared(self) -> None:
        assert default_interpreter() is default_interpreter()

    def test_knows_builtin_grammars(self) -> None:
        interp = default_interpreter()
        for name in ("tex", "ce", "pu", "pu-2", "pu-9,9", "a", "o", "text", "pq", "bd",
                     "oxidation", "tex-math", "tex-math tight", "9,9"):
            assert interp.machine(name).name == name
