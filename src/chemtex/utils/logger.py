"""Logger access for chemtex.

Every module logs under the ``chemtex`` namespace. The library installs no
handlers; grammar runs and failed translations are traced at DEBUG level.

Example:
    >>> import logging
    >>> logging.basicConfig(level=logging.DEBUG)
    >>> from chemtex import translate
    >>> translate("H2O", "equation")  # logs "run ce on 'H2O'" and nested runs
    '{...}'
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Logger for name, moved under the "chemtex." namespace if outside it.

    >>> get_logger("grammars.ce").name
    'chemtex.grammars.ce'
    >>> get_logger("chemtex.machine").name
    'chemtex.machine'
    """
    if not (name == "chemtex" or name.startswith("chemtex.")):
        name = f"chemtex.{name}"
    return logging.getLogger(name)
