"""Explorer tree mixin: loads catalog children on expand."""

from __future__ import annotations

import asyncio
from typing import Any

from rich.markup import escape
from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from pgnav.domains.connections.ui.remediation import ScreenRemediation
from pgnav.domains.explorer.domain.nodes import (
    DatabaseNode,
    FolderNode,
    RoutineNode,
    ServerNode,
    TableNode,
)
from pgnav.domains.explorer.ui.node_kind import database_scope, get_node_kind
from pgnav.domains.query.app.templates import select_table_query
from pgnav.shared.core.errors import RemediationCancelled
from pgnav.shared.ui.dialogs import ConfirmScreen
from pgnav.shared.ui.protocols import AppProtocol


class TreeMixin:
    """Mixin providing the server explorer tree."""

    _loading_nodes: set[str]

    def _format_node_label(self: AppProtocol, data: Any) -> str:
        label = escape(data.label)
        if isinstance(data, ServerNode):
            return f"{label} [dim]{escape(data.description)}[/]"
        if isinstance(data, DatabaseNode):
            if self.connected_database == (data.server_name, data.database):
                return f"{label} [green](connected)[/]"
            return label
        if isinstance(data, FolderNode):
            return f"[bold]{label}[/]"
        return label

    def _populate_servers(self: AppProtocol) -> None:
        tree = self.object_tree
        tree.clear()
        for server in self.connection_service.list_servers():
            data = ServerNode(server)
            tree.root.add(self._format_node_label(data), data=data, allow_expand=True)
        tree.root.expand()

    def _selected_data(self: AppProtocol) -> Any:
        node = self.object_tree.cursor_node
        return node.data if node is not None else None

    def _selected_server(self: AppProtocol) -> Any:
        data = self._selected_data()
        scope = database_scope(data)
        if scope is None:
            return None
        return self.connection_service.get_server(scope[0])

    async def _resolve_config(self: AppProtocol, server_name: str, database: str | None = None) -> Any:
        server = self.connection_service.get_server(server_name)
        return await self.connection_service.resolve(server, database or server.database, ScreenRemediation(self))

    def on_tree_node_expanded(self: AppProtocol, event: Tree.NodeExpanded) -> None:
        data = event.node.data
        if data is None or not getattr(data, "allow_expand", False):
            return
        self._load_children(event.node)

    def on_tree_node_selected(self: AppProtocol, event: Tree.NodeSelected) -> None:
        data = event.node.data
        if isinstance(data, RoutineNode):
            self.query_input.text = data.definition
            self.query_path = None
            self._update_status_bar()
            self.notify(f"Opened {data.row.kind.value} {data.label}")
        elif isinstance(data, TableNode):
            self.query_input.text = select_table_query(data.row)
            self.query_path = None
            self._update_status_bar()

    def _load_children(self: AppProtocol, node: TreeNode[Any]) -> None:
        key = node.data.node_id
        if key in self._loading_nodes:
            return
        self._loading_nodes.add(key)
        node.remove_children()
        node.add_leaf("[dim]Loading...[/]")
        self.run_worker(self._load_children_async(node), name=f"load-{key}", group="tree")

    async def _load_children_async(self: AppProtocol, node: TreeNode[Any]) -> None:
        data = node.data
        try:
            server_name, database = database_scope(data)
            config = await self._resolve_config(server_name, database)
            children = await asyncio.to_thread(self.walker.list_children, data, config)
        except RemediationCancelled as exc:
            node.remove_children()
            node.collapse()
            self.notify(str(exc), severity="warning")
            return
        except Exception as exc:
            node.remove_children()
            node.collapse()
            self._show_error(exc, f"Could not load {data.label}")
            return
        finally:
            self._loading_nodes.discard(data.node_id)

        node.remove_children()
        for child in children:
            label = self._format_node_label(child)
            if child.allow_expand:
                node.add(label, data=child, allow_expand=True)
            else:
                node.add_leaf(label, data=child)
        if not children and isinstance(data, FolderNode):
            node.add_leaf(f"[dim]No {escape(data.label.lower())}[/]")
        self.log.debug(f"Loaded {len(children)} children for {data.node_id}")

    def _reload_node(self: AppProtocol, node: TreeNode[Any]) -> None:
        if node.data is None or node is self.object_tree.root:
            self._populate_servers()
        elif not node.is_expanded:
            node.expand()
        else:
            self._load_children(node)

    def action_refresh_tree(self: AppProtocol) -> None:
        node = self.object_tree.cursor_node
        if node is None:
            self._populate_servers()
            return
        if getattr(node.data, "allow_expand", False) and node.is_expanded:
            self._load_children(node)
        elif node.parent is not None:
            self._reload_node(node.parent)

    def action_focus_explorer(self: AppProtocol) -> None:
        self.object_tree.focus()

    def action_delete_selected(self: AppProtocol) -> None:
        node = self.object_tree.cursor_node
        if node is None or node.data is None:
            return
        kind = get_node_kind(node)
        if kind in ("server", "database", "table", "function", "procedure"):
            self.run_worker(self._delete_node_async(node), name="delete-node", group="ddl", exclusive=True)
        else:
            self.notify("Nothing to delete here", severity="warning")

    async def _delete_node_async(self: AppProtocol, node: TreeNode[Any]) -> None:
        data = node.data
        if isinstance(data, ServerNode):
            prompt = f'Remove server "{data.server_name}"?'
        elif isinstance(data, DatabaseNode):
            prompt = f'Drop database "{data.database}"? This cannot be undone.'
        elif isinstance(data, TableNode):
            prompt = f'Drop table "{data.row.schema}.{data.row.name}"? This cannot be undone.'
        else:
            prompt = f'Drop {data.row.kind.value} "{data.row.name}({data.row.args})"? This cannot be undone.'
        if not await self.push_screen_wait(ConfirmScreen(prompt, confirm_label="Delete", danger=True)):
            return

        try:
            if isinstance(data, ServerNode):
                self.connection_service.remove_server(data.server_name)
                if self.connected_database and self.connected_database[0] == data.server_name:
                    self.connected_database = None
                self._populate_servers()
                self._update_status_bar()
                self.notify(f"Removed server {data.server_name}")
                return
            if isinstance(data, DatabaseNode):
                config = await self._resolve_config(data.server_name)
                await asyncio.to_thread(self.connection_service.drop_database, config, data.database)
                if self.connected_database == (data.server_name, data.database):
                    self.connected_database = None
                    self._update_status_bar()
            elif isinstance(data, TableNode):
                config = await self._resolve_config(data.server_name, data.database)
                await asyncio.to_thread(self.connection_service.drop_table, config, data)
            else:
                config = await self._resolve_config(data.server_name, data.database)
                await asyncio.to_thread(self.connection_service.drop_routine, config, data)
        except RemediationCancelled as exc:
            self.notify(str(exc), severity="warning")
            return
        except Exception as exc:
            self._show_error(exc, f"Could not delete {data.label}")
            return

        self.notify(f"Deleted {data.label}")
        if node.parent is not None:
            self._reload_node(node.parent)
