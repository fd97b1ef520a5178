"""Tests for the keymap provider."""

import pytest

from pgnav.domains.shell.app.keymap import (
    ActionKeyDef,
    DefaultKeymapProvider,
    KeymapProvider,
    format_key,
    get_action_bindings,
    get_keymap,
    set_keymap,
)


class SingleKeyProvider(KeymapProvider):
    def get_action_keys(self):
        return [ActionKeyDef("F5", "execute_query", "Run")]


@pytest.fixture(autouse=True)
def restore_keymap():
    yield
    set_keymap(None)


class TestKeymap:
    def test_default_lookup(self):
        assert get_keymap().action("execute_query") == "ctrl+r"
        assert get_keymap().action("no_such_action") is None

    def test_delete_has_two_keys(self):
        provider = DefaultKeymapProvider()
        assert provider.actions_for_key("delete") == ["delete_selected"]
        assert provider.actions_for_key("d") == ["delete_selected"]

    def test_keys_are_unique_per_context(self):
        seen = set()
        for ak in DefaultKeymapProvider().get_action_keys():
            assert (ak.context, ak.key) not in seen
            seen.add((ak.context, ak.key))

    def test_tree_bindings_route_to_app(self):
        bindings = get_action_bindings("tree", action_prefix="app.")
        assert all(binding.action.startswith("app.") for binding in bindings)
        assert "app.connect_selected" in {binding.action for binding in bindings}

    def test_global_bindings_exclude_tree_keys(self):
        actions = {binding.action for binding in get_action_bindings("global")}
        assert "execute_query" in actions
        assert "add_server" not in actions

    def test_custom_provider(self):
        set_keymap(SingleKeyProvider())
        assert [binding.key for binding in get_action_bindings("global")] == ["F5"]

    @pytest.mark.parametrize(("key", "display"), [("ctrl+r", "^r"), ("delete", "del"), ("a", "a")])
    def test_format_key(self, key, display):
        assert format_key(key) == display
