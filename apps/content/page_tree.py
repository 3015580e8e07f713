"""
Page hierarchy helpers for the Municipal CMS Platform

Pure functions over page-like objects: anything with ``id``,
``parent_id``, ``sort_order`` and ``title`` attributes (model instances
or lightweight snapshots). Nodes produced by build_hierarchy are dicts.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Protocol


class PageLike(Protocol):
    id: int
    parent_id: int | None
    sort_order: int
    title: str


def _sort_key(page: PageLike) -> tuple[int, str]:
    return (page.sort_order or 0, (page.title or "").lower())


def build_hierarchy(pages: Sequence[PageLike], serialize: Any = None) -> list[dict[str, Any]]:
    """
    Nest pages under their parents.

    Each node is ``serialize(page)`` (default ``{"id", "title", "parentId",
    "sortOrder"}``) plus a ``children`` list. Pages whose parent is not in
    ``pages`` are dropped. Siblings follow sort_order, then title.
    """
    to_node = serialize or (
        lambda p: {"id": p.id, "title": p.title, "parentId": p.parent_id, "sortOrder": p.sort_order}
    )
    nodes: dict[int, dict[str, Any]] = {}
    for page in sorted(pages, key=_sort_key):
        nodes[page.id] = {**to_node(page), "children": []}

    roots: list[dict[str, Any]] = []
    for page in sorted(pages, key=_sort_key):
        node = nodes[page.id]
        if not page.parent_id:
            roots.append(node)
        elif page.parent_id in nodes:
            nodes[page.parent_id]["children"].append(node)
    return roots


def flatten_pages(pages: Sequence[PageLike]) -> list[tuple[PageLike, int]]:
    """Depth-first ``(page, depth)`` pairs, siblings ordered by sort_order then title"""
    children: dict[int | None, list[PageLike]] = {}
    known_ids = {page.id for page in pages}
    for page in pages:
        parent = page.parent_id if page.parent_id in known_ids else None
        children.setdefault(parent, []).append(page)

    result: list[tuple[PageLike, int]] = []

    def visit(parent_id: int | None, depth: int) -> None:
        for page in sorted(children.get(parent_id, []), key=_sort_key):
            result.append((page, depth))
            visit(page.id, depth + 1)

    visit(None, 0)
    return result


def get_descendant_ids(page_id: int, pages: Iterable[PageLike]) -> set[int]:
    """Ids of every page below ``page_id`` (the page itself excluded)"""
    children: dict[int, list[int]] = {}
    for page in pages:
        if page.parent_id:
            children.setdefault(page.parent_id, []).append(page.id)

    descendants: set[int] = set()
    stack = list(children.get(page_id, []))
    while stack:
        current = stack.pop()
        if current in descendants:
            continue
        descendants.add(current)
        stack.extend(children.get(current, []))
    return descendants


def is_descendant_of(page_id: int, ancestor_id: int, pages: Iterable[PageLike]) -> bool:
    return page_id in get_descendant_ids(ancestor_id, pages)


def get_page_depth(page: PageLike, pages: Iterable[PageLike]) -> int:
    """Number of ancestors; stops on cycles and on parents missing from ``pages``"""
    parents = {p.id: p.parent_id for p in pages}
    depth = 0
    seen = {page.id}
    current = page.parent_id
    while current and current in parents and current not in seen:
        seen.add(current)
        depth += 1
        current = parents[current]
    return depth


def sort_pages_by_hierarchy(pages: Sequence[PageLike]) -> list[PageLike]:
    """Parents before their children; sort_order then title at every level"""
    return [page for page, _depth in flatten_pages(pages)]
