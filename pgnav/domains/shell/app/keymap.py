"""Keymap provider for keybinding configuration.

All key -> action mappings live here so screens and tests share one source:

    from pgnav.domains.shell.app.keymap import get_keymap

    key = get_keymap().action("execute_query")  # "ctrl+r"
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from textual.binding import Binding

KEY_DISPLAY_OVERRIDES: dict[str, str] = {
    "question_mark": "?",
    "slash": "/",
    "escape": "esc",
    "enter": "enter",
    "delete": "del",
}


def format_key(key: str) -> str:
    """Format a key name for display in UI hints."""
    if key in KEY_DISPLAY_OVERRIDES:
        return KEY_DISPLAY_OVERRIDES[key]
    if key.startswith("ctrl+"):
        return f"^{key.split('+', 1)[1]}"
    return key


@dataclass
class ActionKeyDef:
    """Definition of an action keybinding."""

    key: str
    action: str
    description: str
    context: str = "global"  # "global" for app-wide keys, "tree" for explorer-only keys
    show: bool = True
    priority: bool = False


class KeymapProvider(ABC):
    """Abstract base class for keymap providers."""

    @abstractmethod
    def get_action_keys(self) -> list[ActionKeyDef]:
        pass

    def action(self, action_name: str) -> str | None:
        """Get the first key bound to an action."""
        for ak in self.get_action_keys():
            if ak.action == action_name:
                return ak.key
        return None

    def actions_for_key(self, key: str) -> list[str]:
        return [ak.action for ak in self.get_action_keys() if ak.key == key]


class DefaultKeymapProvider(KeymapProvider):
    """Default keymap with hardcoded bindings."""

    def get_action_keys(self) -> list[ActionKeyDef]:
        return [
            # Explorer
            ActionKeyDef("a", "add_server", "Add server", context="tree"),
            ActionKeyDef("c", "connect_selected", "Connect", context="tree"),
            ActionKeyDef("e", "enter_credentials", "Credentials", context="tree"),
            ActionKeyDef("w", "configure_firewall", "Firewall", context="tree", show=False),
            ActionKeyDef("n", "create_database", "New DB", context="tree", show=False),
            ActionKeyDef("delete", "delete_selected", "Delete", context="tree"),
            ActionKeyDef("d", "delete_selected", "Delete", context="tree", show=False),
            ActionKeyDef("f", "refresh_tree", "Refresh", context="tree"),
            ActionKeyDef("x", "disconnect", "Disconnect", context="tree"),
            # Global
            ActionKeyDef("ctrl+n", "new_function_query", "New function"),
            ActionKeyDef("ctrl+o", "open_query", "Open"),
            ActionKeyDef("ctrl+s", "save_query", "Save"),
            ActionKeyDef("ctrl+r", "execute_query", "Execute", priority=True),
            ActionKeyDef("ctrl+e", "focus_explorer", "Explorer", show=False),
            ActionKeyDef("ctrl+q", "quit", "Quit", priority=True),
        ]


_keymap_provider: KeymapProvider | None = None


def get_keymap() -> KeymapProvider:
    global _keymap_provider
    if _keymap_provider is None:
        _keymap_provider = DefaultKeymapProvider()
    return _keymap_provider


def set_keymap(provider: KeymapProvider | None) -> None:
    """Replace the keymap (tests); ``None`` restores the default."""
    global _keymap_provider
    _keymap_provider = provider


def get_action_bindings(context: str, *, action_prefix: str = "") -> tuple[Binding, ...]:
    """Generate Textual bindings for the action keys of one context."""
    return tuple(
        Binding(
            ak.key,
            f"{action_prefix}{ak.action}",
            ak.description,
            show=ak.show,
            key_display=format_key(ak.key),
            priority=ak.priority,
        )
        for ak in get_keymap().get_action_keys()
        if ak.context == context
    )
