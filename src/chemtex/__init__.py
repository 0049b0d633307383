"""
chemtex — mhchem notation to TeX

Translates chemical equations (\\ce) and physical units (\\pu) written in
mhchem notation into plain TeX math markup. Pure Python, zero runtime
dependencies.

Quick Start:
    >>> from chemtex import translate
    >>> translate("H2O", "equation")
    '{\\\\mathrm{H}{\\\\vphantom{A}}_{\\\\smash[t]{2}}\\\\mathrm{O}}'
    >>> translate("Water: \\\\ce{H2O}.")
    'Water: {\\\\mathrm{H}{\\\\vphantom{A}}_{\\\\smash[t]{2}}\\\\mathrm{O}}.'

    >>> # Inspect the intermediate nodes
    >>> from chemtex import parse, render
    >>> nodes = parse("1.2e3 m", "unit")
    >>> render(nodes)
    '1.2\\\\cdot 10^{3}~\\\\mathrm{m}'

    >>> # Or hold a configuration in a reusable translator
    >>> from chemtex import Translator
    >>> tex = Translator(outer_braces=False)
    >>> tex("CO2", "equation")
    '\\\\mathrm{CO}{\\\\vphantom{A}}_{\\\\smash[t]{2}}'
"""

from collections.abc import Sequence
from enum import Enum

from chemtex.config import (
    TranslateConfig,
    get_translate_config,
    reset_translate_config,
    set_translate_config,
    translate_config_context,
)
from chemtex.errors import (
    ChemTexError,
    InternalInconsistencyError,
    MalformedInputError,
    MismatchedBraceError,
    StagnationError,
    UnknownActionError,
    UnknownBondError,
    UnknownMachineError,
    UnknownNodeError,
    UnknownPatternError,
    UnmatchedInputError,
)
from chemtex.machine import Interpreter, StateMachine, default_interpreter
from chemtex.nodes import Node, Parse, Parsed
from chemtex.renderers.protocol import NodeRenderer
from chemtex.renderers.tex import TexRenderer
from chemtex.serialization import from_json, to_json
from chemtex.utils.logger import get_logger

__version__ = "0.1.0"

logger = get_logger(__name__)


class Mode(str, Enum):
    """How the source text is read.

    PASS_THROUGH: host text; only \\ce{...} and \\pu{...} are translated
    EQUATION: the whole source is a \\ce argument
    UNIT: the whole source is a \\pu argument
    """

    PASS_THROUGH = "pass-through"
    EQUATION = "equation"
    UNIT = "unit"

    @property
    def machine_name(self) -> str:
        """Name of the grammar that reads this mode."""
        return _MACHINE_NAMES[self]


_MACHINE_NAMES = {Mode.PASS_THROUGH: "tex", Mode.EQUATION: "ce", Mode.UNIT: "pu"}

_renderer = TexRenderer()


def parse(source: str, mode: Mode | str = Mode.PASS_THROUGH) -> Parse:
    """Parse source into output nodes without rendering.

    Args:
        source: Text to translate
        mode: Mode or its string value

    Returns:
        Literal strings and nodes, in order

    Raises:
        ValueError: unknown mode
        MalformedInputError: the input cannot be translated
        InternalInconsistencyError: a grammar defect was hit

    Example:
        >>> parse("A^{2+}", "equation")
        (ChemFive(..., symbol=(Rm(p1='A'),), ..., right_sup=('2', '+'), d_type=None),)
    """
    mode = Mode(mode)
    try:
        return tuple(default_interpreter().run(source, mode.machine_name))
    except ChemTexError as e:
        logger.debug("parse failed in %s mode: %s", mode.value, e)
        raise


def render(nodes: Sequence[Parsed], wrap_in_braces: bool = False) -> str:
    """Render output nodes to TeX.

    Args:
        nodes: Output of parse()
        wrap_in_braces: Enclose the result in one brace pair

    Raises:
        UnknownBondError: a bond kind has no TeX rendering
        UnknownNodeError: a node, arrow or operator kind has no rendering
    """
    try:
        return _renderer.render(nodes, wrap_in_braces)
    except ChemTexError as e:
        logger.debug("render failed: %s", e)
        raise


def translate(source: str, mode: Mode | str = Mode.PASS_THROUGH) -> str:
    """Translate source to TeX in one call.

    In equation and unit mode the result is wrapped in one brace pair
    (unless the current TranslateConfig disables outer_braces). Pass-through
    output wraps each translated command instead.

    Args:
        source: Text to translate
        mode: Mode or its string value

    Returns:
        TeX string; "" for empty input

    Example:
        >>> translate("A + B -> C", "equation")
        '{\\\\mathrm{A} {}+{} \\\\mathrm{B} {}\\\\mathrel{\\\\longrightarrow}{} \\\\mathrm{C}}'
    """
    mode = Mode(mode)
    nodes = parse(source, mode)
    wrap = mode is not Mode.PASS_THROUGH and get_translate_config().outer_braces
    return render(nodes, wrap_in_braces=wrap)


class Translator:
    """Reusable translator holding an immutable configuration.

    Usage:
        >>> tex = Translator(stagnation_limit=20)
        >>> tex("H2O", "equation")
        '{\\\\mathrm{H}{\\\\vphantom{A}}_{\\\\smash[t]{2}}\\\\mathrm{O}}'

        >>> # Batch use
        >>> tex.translate_many(["H2O", "CO2"], "equation")
        ['{...}', '{...}']

    Thread Safety:
        Sets config via ContextVar (thread-local) for the duration of each
        call. Safe to share one instance across threads.

    """

    __slots__ = ("_config",)

    def __init__(self, *, stagnation_limit: int = 10, outer_braces: bool = True) -> None:
        """Initialize translator.

        Args:
            stagnation_limit: Iterations without progress before a grammar
                run is aborted
            outer_braces: Wrap equation and unit output in braces
        """
        self._config = TranslateConfig(stagnation_limit=stagnation_limit, outer_braces=outer_braces)

    @property
    def config(self) -> TranslateConfig:
        return self._config

    def __call__(self, source: str, mode: Mode | str = Mode.PASS_THROUGH) -> str:
        """Translate source to TeX under this translator's configuration."""
        with translate_config_context(self._config):
            return translate(source, mode)

    def parse(self, source: str, mode: Mode | str = Mode.PASS_THROUGH) -> Parse:
        """Parse source under this translator's configuration."""
        with translate_config_context(self._config):
            return parse(source, mode)

    def translate_many(self, sources: Sequence[str], mode: Mode | str = Mode.PASS_THROUGH) -> list[str]:
        """Translate several sources, setting the configuration once."""
        with translate_config_context(self._config):
            return [translate(source, mode) for source in sources]


__all__ = [
    # Core
    "Interpreter",
    "Mode",
    "StateMachine",
    "Translator",
    "__version__",
    "default_interpreter",
    "parse",
    "render",
    "translate",
    # Nodes and rendering
    "Node",
    "NodeRenderer",
    "Parse",
    "Parsed",
    "TexRenderer",
    # Configuration
    "TranslateConfig",
    "get_translate_config",
    "reset_translate_config",
    "set_translate_config",
    "translate_config_context",
    # Errors
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
    # Serialization
    "from_json",
    "to_json",
]
