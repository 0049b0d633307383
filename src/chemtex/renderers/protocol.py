"""NodeRenderer protocol: stable interface for node-sequence renderers.

Any renderer that implements ``render(nodes, wrap_in_braces) -> str``
conforms to this protocol. The built-in ``TexRenderer`` is the reference
implementation.

Example:
    from chemtex.renderers.protocol import NodeRenderer

    def typeset(renderer: NodeRenderer, nodes) -> str:
        return renderer.render(nodes, wrap_in_braces=True)

"""

from collections.abc import Sequence
from typing import Protocol

from chemtex.nodes import Parsed


class NodeRenderer(Protocol):
    """Protocol for renderers of grammar output."""

    def render(self, nodes: Sequence[Parsed], wrap_in_braces: bool = False) -> str:
        """Render a node sequence to a string.

        Args:
            nodes: Literal strings and nodes, as produced by a grammar.
            wrap_in_braces: Enclose non-empty output in one brace pair.

        Returns:
            Rendered string output.

        """
        ...
