"""Generic state-machine interpreter driving every grammar.

A grammar is a StateMachine: compiled transitions plus a table of local
actions. Interpreter.run() walks the input:

1. take the rule list of the current state (or of "*")
2. try rules in order; on the first match run its actions, collecting
   their output
3. switch state, consume the match unless the rule revisits
4. stop trying rules unless the rule continues

until a rule matches the empty remainder. Actions are looked up in the
machine's own table first, then in the shared table of chemtex.actions.
Actions may call Interpreter.run() on captured text with another machine;
each run gets its own Buffer.

Thread Safety:
An Interpreter holds only immutable tables. Runs share nothing, so one
instance may serve many threads.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from chemtex import patterns
from chemtex.buffer import Buffer
from chemtex.config import get_translate_config
from chemtex.errors import StagnationError, UnknownActionError, UnknownMachineError, UnmatchedInputError
from chemtex.nodes import Parsed
from chemtex.transitions import Transitions
from chemtex.utils.logger import get_logger
from chemtex.utils.text import normalize_input

logger = get_logger(__name__)

ActionResult = Parsed | list[Parsed] | None
ActionFunction = Callable[["Interpreter", Buffer, Any, Any], ActionResult]


@dataclass(frozen=True, slots=True)
class StateMachine:
    """A named grammar: compiled transitions and grammar-local actions."""

    name: str
    transitions: Transitions
    actions: Mapping[str, ActionFunction] = field(default_factory=dict)


def concat(output: list[Parsed], result: ActionResult) -> None:
    """Append an action result, flattening one level of list.

    Empty scalars (None, "") are dropped; empty strings inside a list are kept.
    """
    if not result:
        return
    if isinstance(result, list):
        output.extend(result)
    else:
        output.append(result)


class Interpreter:
    """Run named grammars over text.

    Usage:
        >>> Interpreter().run("H2O", "ce")
        [ChemFive(symbol=(Rm(p1='H'),), right_sub=('2',), ...), ChemFive(...)]

    """

    __slots__ = ("_machines", "_generic_actions")

    def __init__(
        self,
        machines: Mapping[str, StateMachine] | None = None,
        generic_actions: Mapping[str, ActionFunction] | None = None,
    ) -> None:
        """Initialize interpreter.

        Args:
            machines: Grammar registry (defaults to chemtex.grammars.MACHINES)
            generic_actions: Shared actions (defaults to chemtex.actions.ACTIONS)
        """
        if machines is None:
            from chemtex.grammars import MACHINES

            machines = MACHINES
        if generic_actions is None:
            from chemtex.actions import ACTIONS

            generic_actions = ACTIONS
        self._machines = machines
        self._generic_actions = generic_actions

    def machine(self, name: str) -> StateMachine:
        """Look up a grammar by name."""
        try:
            return self._machines[name]
        except KeyError:
            raise UnknownMachineError(name) from None

    def run(self, text: str | None, machine_name: str = "ce", state: str = "0") -> list[Parsed]:
        """Parse text with the named grammar.

        Args:
            text: Input; None and "" yield an empty result
            machine_name: Grammar to run
            state: Start state

        Returns:
            Output strings and nodes in order

        Raises:
            UnmatchedInputError: no rule of the current state matched
            StagnationError: input stopped shrinking for too many iterations
            UnknownActionError: a rule names an action nobody defines
            UnknownMachineError: machine_name names no registered grammar
            MalformedInputError: raised by patterns or actions on bad input
        """
        if not text:
            return []
        machine = self.machine(machine_name)
        limit = get_translate_config().stagnation_limit
        text = normalize_input(text)
        logger.debug("run %s on %r", machine_name, text)

        buffer = Buffer()
        output: list[Parsed] = []
        last_text: str | None = None
        watchdog = limit
        while True:
            if last_text != text:
                watchdog = limit
                last_text = text
            else:
                watchdog -= 1

            rules = machine.transitions.get(state)
            if rules is None:
                rules = machine.transitions.get("*", [])
            matched = False
            for rule in rules:
                found = patterns.match(rule.pattern, text)
                if found is None:
                    continue
                matched = True
                task = rule.task
                for action in task.actions:
                    function = self._resolve(machine, action.name)
                    concat(output, function(self, buffer, found.value, action.option))

                state = task.next_state or state
                if not text:
                    return output
                if not task.revisit:
                    text = found.remainder
                if not task.continue_after:
                    break

            if not matched:
                raise UnmatchedInputError(machine_name, state, text)
            if watchdog <= 0:
                raise StagnationError(machine_name, state, text, limit)

    def _resolve(self, machine: StateMachine, name: str) -> ActionFunction:
        function = machine.actions.get(name) or self._generic_actions.get(name)
        if function is None:
            raise UnknownActionError(name, machine.name)
        return function


_default: Interpreter | None = None
_default_lock = threading.Lock()


def default_interpreter() -> Interpreter:
    """Shared interpreter over the built-in grammars.

    Thread Safety:
        Created once under a lock; later calls read the reference only.
    """
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Interpreter()
    return _default


__all__ = ["ActionFunction", "Interpreter", "StateMachine", "concat", "default_interpreter"]
