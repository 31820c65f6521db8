"""Generic labeled tree built from XML parts of a presentation package.

Nodes carry a tag, attributes, children and optional text and know nothing
about the presentation schema, so unknown or extra structure is preserved
instead of rejected.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TypeVar

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class TreeNode:
    tag: str
    namespace: str | None = None
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: tuple["TreeNode", ...] = ()
    text: str | None = None

    @property
    def is_leaf(self) -> bool:
        return not self.children


def split_tag(tag: str) -> tuple[str | None, str]:
    """Split ``{namespace}local`` into its parts."""
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return None, tag


def parse_tree(payload: bytes) -> TreeNode:
    """Parse an XML document; raises ``xml.etree.ElementTree.ParseError``."""
    return _convert(ET.fromstring(payload))


def _convert(root: ET.Element) -> TreeNode:
    # Post-order without recursion: deeply nested parts must not hit the
    # interpreter recursion limit.
    built: dict[int, TreeNode] = {}
    stack: list[tuple[ET.Element, bool]] = [(root, False)]
    while stack:
        element, expanded = stack.pop()
        if not expanded:
            stack.append((element, True))
            stack.extend((child, False) for child in element)
            continue
        namespace, local = split_tag(element.tag) if isinstance(element.tag, str) else (None, "")
        built[id(element)] = TreeNode(
            tag=local,
            namespace=namespace,
            attributes=dict(element.attrib),
            children=tuple(built.pop(id(child)) for child in element),
            text=element.text,
        )
    return built[id(root)]


def fold(node: TreeNode, func: Callable[[T, TreeNode], T], initial: T) -> T:
    """Reduce the tree in document order (pre-order, left to right)."""
    acc = initial
    stack = [node]
    while stack:
        current = stack.pop()
        acc = func(acc, current)
        stack.extend(reversed(current.children))
    return acc


def iter_leaves(node: TreeNode) -> Iterator[TreeNode]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_leaf:
            yield current
        else:
            stack.extend(reversed(current.children))


__all__ = ["TreeNode", "fold", "iter_leaves", "parse_tree", "split_tag"]
