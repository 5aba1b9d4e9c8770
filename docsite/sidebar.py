from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

ROOT_PATH = "/"
ROOT_TITLE = "Overview"


@dataclass(frozen=True)
class SidebarNode:
    title: str
    path: str
    children: tuple[SidebarNode, ...] = ()


@dataclass(frozen=True)
class SidebarInputItem:
    title: str
    path: str
    hidden: Optional[bool] = None
    hide_children: Optional[bool] = None
    order: Optional[int] = None


@dataclass
class _Node:
    title: str
    path: str
    hidden: Optional[bool] = None
    hide_children: Optional[bool] = None
    order: Optional[int] = None
    children: list[_Node] = field(default_factory=list)


def sidebar_path_for(canonical_path: str) -> str:
    if canonical_path != ROOT_PATH and canonical_path.endswith("/"):
        return canonical_path[:-1]
    return canonical_path


def _ensure_node(path: str, root: _Node) -> _Node:
    if path == ROOT_PATH:
        return root
    if not path.startswith("/"):
        raise ValueError(f"Bad sidebar path: {path}")
    tokens = path[1:].split("/")
    name = tokens.pop()
    parent = _ensure_node("/" + "/".join(tokens), root)
    for child in parent.children:
        if child.path == path:
            return child
    node = _Node(title=name, path=path)
    parent.children.append(node)
    return node


def trim_hidden(node: _Node) -> None:
    # hideChildren empties the subtree without visiting it
    if node.hide_children:
        node.children = []
        return
    node.children = [
        child for child in node.children if not child.hidden and not child.path.endswith("/404")
    ]
    for child in node.children:
        trim_hidden(child)


def _freeze(node: _Node) -> SidebarNode:
    return SidebarNode(
        title=node.title,
        path=node.path,
        children=tuple(_freeze(child) for child in node.children),
    )


def compute_sidebar(items: Iterable[SidebarInputItem]) -> SidebarNode:
    """Build the navigation tree for ``items``.

    Children keep insertion order; ``order`` is carried on the nodes but not
    used for sorting. The root page's ``hidden`` and ``hideChildren`` flags
    are ignored.
    """
    root = _Node(title=ROOT_TITLE, path=ROOT_PATH)
    for item in items:
        node = _ensure_node(item.path, root)
        node.title = item.title
        node.order = item.order
        if node is root:
            continue
        node.hidden = item.hidden
        node.hide_children = item.hide_children
    trim_hidden(root)
    return _freeze(root)


def compute_breadcrumbs(root: SidebarNode, path: str) -> list[SidebarNode]:
    """Return the chain of nodes from the root down to ``path`` (exclusive)."""
    path = sidebar_path_for(path)
    chain: list[SidebarNode] = []

    def visit(node: SidebarNode) -> bool:
        if node.path == path:
            return True
        for child in node.children:
            if path == child.path or path.startswith(child.path + "/"):
                chain.append(node)
                return visit(child)
        return False

    if path == ROOT_PATH or not visit(root):
        return []
    return chain
