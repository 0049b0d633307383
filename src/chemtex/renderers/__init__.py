"""chemtex renderers.

Renderers convert grammar output (strings and typed nodes) into an output
format.

Available Renderers:
- TexRenderer: Renders nodes to TeX math markup using StringBuilder pattern

Thread Safety:
Renderers keep no per-render state on the instance.
Safe for concurrent use from multiple threads.

"""

from chemtex.renderers.protocol import NodeRenderer
from chemtex.renderers.tex import TexRenderer

__all__ = ["NodeRenderer", "TexRenderer"]
