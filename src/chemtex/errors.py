"""Exception classes for chemtex.

Two families, both aborting the current translation:

- MalformedInputError: the input itself is broken (unbalanced braces,
  unknown bond type). Report it to the user.
- InternalInconsistencyError: a grammar table is incomplete or loops.
  Report it as a defect; it never depends on recoverable state.
"""

from __future__ import annotations


class ChemTexError(Exception):
    """Base exception for all chemtex errors.

    Subclass this for specific error categories.
    """

    pass


# =============================================================================
# Malformed input
# =============================================================================


class MalformedInputError(ChemTexError):
    """Input that cannot be translated as written."""

    pass


class MismatchedBraceError(MalformedInputError):
    """Closing brace without a matching opening brace.

    Raised by the balanced-group scanner.
    """

    def __init__(self, fragment: str, offset: int) -> None:
        """Initialize with the scanned fragment and the brace offset.

        Args:
            fragment: Text being scanned when the brace was found
            offset: Index of the offending "}" within fragment
        """
        self.fragment = fragment
        self.offset = offset
        super().__init__(
            f"Extra close brace or missing open brace at offset {offset} in {fragment!r}"
        )


class UnknownBondError(MalformedInputError):
    """Bond kind with no TeX rendering, e.g. from ``\\bond{?}``."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Unknown bond type ({kind})")


# =============================================================================
# Internal inconsistency
# =============================================================================


class InternalInconsistencyError(ChemTexError):
    """A grammar table or the generator has a gap.

    Never caused by user input alone; treat as a bug report.
    """

    pass


class StagnationError(InternalInconsistencyError):
    """The interpreter kept revisiting the same input without progress."""

    def __init__(self, machine: str, state: str, remaining: str, limit: int) -> None:
        self.machine = machine
        self.state = state
        self.remaining = remaining
        self.limit = limit
        super().__init__(
            f"No progress after {limit} iterations in machine {machine!r} "
            f"(state {state!r}, remaining {remaining!r})"
        )


class UnmatchedInputError(InternalInconsistencyError):
    """No transition of the active state matched the remaining input."""

    def __init__(self, machine: str, state: str, remaining: str) -> None:
        self.machine = machine
        self.state = state
        self.remaining = remaining
        super().__init__(
            f"Unexpected input in machine {machine!r} (state {state!r}): {remaining!r}"
        )


class UnknownPatternError(InternalInconsistencyError):
    """A transition table refers to a pattern that does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown pattern ({name})")


class UnknownMachineError(InternalInconsistencyError):
    """A grammar or action refers to a state machine that does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown state machine ({name})")


class UnknownActionError(InternalInconsistencyError):
    """A transition table refers to an action that does not exist."""

    def __init__(self, name: str, machine: str | None = None) -> None:
        self.name = name
        self.machine = machine
        where = f" in machine {machine!r}" if machine else ""
        super().__init__(f"Unknown action ({name}){where}")


class UnknownNodeError(InternalInconsistencyError):
    """The generator received a node, arrow or operator it cannot render."""

    def __init__(self, what: str) -> None:
        self.what = what
        super().__init__(f"No TeX rendering for {what}")


__all__ = [
    "ChemTexError",
    "InternalInconsistencyError",
    "MalformedInputError",
    "MismatchedBraceError",
    "StagnationError",
    "UnknownActionError",
    "UnknownBondError",
    "UnknownMachineError",
    "UnknownNodeError",
    "UnknownPatternError",
    "UnmatchedInputError",
]
