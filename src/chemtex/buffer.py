"""Per-invocation accumulator for the interpreter.

Every grammar run gets a fresh Buffer. Actions append matched text to its
registers and flush them into output nodes; flushing resets the registers
with reset(keep=...).

Registers (named after their position around a chemical symbol):
    a   amount                      2 in 2H2O
    b   left superscript            14 in ^{14}C
    p   left subscript              6 in _{6}C
    o   main symbol                 H in H2O
    q   right subscript             2 in H2O
    d   right superscript           2+ in Ca^{2+}
    d_type                          "kv" / "oxidation" / None
    r   reaction arrow              -> or <=>
    rd, rdt                         text above the arrow and its kind (C/M/T)
    rq, rqt                         text below the arrow and its kind
    text, rm                        text runs for the text and unit grammars
    sb                              a space preceded the pending entity

parenthesis_level and begins_with_bond survive flushes within one run.

Thread Safety:
Buffer instances are local to one interpreter run.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

PERSISTENT = ("parenthesis_level", "begins_with_bond")


@dataclass(slots=True)
class Buffer:
    a: str | None = None
    b: str | None = None
    p: str | None = None
    o: str | None = None
    q: str | None = None
    d: str | None = None
    d_type: str | None = None
    r: str | None = None
    rd: str | None = None
    rdt: str | None = None
    rq: str | None = None
    rqt: str | None = None
    text: str | None = None
    rm: str | None = None
    sb: bool = False
    parenthesis_level: int = 0
    begins_with_bond: bool = False

    def append(self, register: str, value: str) -> None:
        """Append value to a string register, treating None as empty."""
        setattr(self, register, (getattr(self, register) or "") + value)

    def is_empty(self) -> bool:
        """True when no entity register holds text."""
        return not (self.a or self.b or self.p or self.o or self.q or self.d)

    def reset(self, keep: tuple[str, ...] = ()) -> None:
        """Clear every register except those named in keep."""
        for f in fields(self):
            if f.name not in keep:
                setattr(self, f.name, f.default)
