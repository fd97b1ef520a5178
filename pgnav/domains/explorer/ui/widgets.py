"""Explorer tree widget."""

from __future__ import annotations

from typing import Any

from textual.widgets import Tree

from pgnav.domains.shell.app.keymap import get_action_bindings


class ExplorerTree(Tree[Any]):
    """Server tree; explorer keys are routed to app actions."""

    BINDINGS = list(get_action_bindings("tree", action_prefix="app."))
