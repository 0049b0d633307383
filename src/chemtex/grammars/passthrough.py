"""The tex grammar: host text with embedded \\ce{...} and \\pu{...}.

Everything outside the two commands is copied verbatim. Each command body is
translated by its own grammar and wrapped in a brace group, so that the
result can stand where the command stood.
"""

from __future__ import annotations

from chemtex.machine import StateMachine
from chemtex.transitions import compile_transitions

MACHINE = StateMachine(
    "tex",
    compile_transitions(
        {
            "empty": {"0": {"action": "copy"}},
            "\\ce{(...)}": {"0": {"action": [("write", "{"), "ce", ("write", "}")]}},
            "\\pu{(...)}": {"0": {"action": [("write", "{"), "pu", ("write", "}")]}},
            "else": {"0": {"action": "copy"}},
        }
    ),
)
