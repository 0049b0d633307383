"""Built-in grammars, keyed by name.

    tex                      host text (pass-through)
    ce                       chemical equations
    pu                       physical units, with pu-2 and pu-9,9
    a, o, text, pq, bd,      parts of a chemical entity
    oxidation, tex-math,
    tex-math tight, 9,9
"""

from __future__ import annotations

from chemtex.grammars import ce, fragments, passthrough, pu
from chemtex.machine import StateMachine

MACHINES: dict[str, StateMachine] = {
    machine.name: machine
    for machine in (passthrough.MACHINE, ce.MACHINE, *pu.MACHINES, *fragments.MACHINES)
}

__all__ = ["MACHINES"]
