from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from src.handout.notes.xml_tree import fold, iter_leaves, parse_tree, split_tag


def test_split_tag_handles_namespaced_and_plain_tags() -> None:
    assert split_tag("{urn:a}t") == ("urn:a", "t")
    assert split_tag("plain") == (None, "plain")


def test_parse_tree_keeps_structure_attributes_and_text() -> None:
    tree = parse_tree(b'<root xmlns:x="urn:x"><x:item id="1">one</x:item><empty/></root>')

    assert tree.tag == "root"
    assert tree.namespace is None
    assert [child.tag for child in tree.children] == ["item", "empty"]
    item = tree.children[0]
    assert item.namespace == "urn:x"
    assert item.attributes == {"id": "1"}
    assert item.text == "one"
    assert item.is_leaf


def test_fold_visits_nodes_in_document_order() -> None:
    tree = parse_tree(b"<a><b><c/></b><d/></a>")

    order = fold(tree, lambda acc, node: [*acc, node.tag], [])

    assert order == ["a", "b", "c", "d"]


def test_iter_leaves_yields_leaves_left_to_right() -> None:
    tree = parse_tree(b"<a><b><c>1</c><e>2</e></b><d>3</d></a>")

    assert [leaf.text for leaf in iter_leaves(tree)] == ["1", "2", "3"]


def test_parse_tree_survives_deep_nesting() -> None:
    depth = 2000
    payload = ("<n>" * depth + "leaf" + "</n>" * depth).encode()

    tree = parse_tree(payload)

    leaves = list(iter_leaves(tree))
    assert len(leaves) == 1
    assert leaves[0].text == "leaf"


def test_parse_tree_rejects_malformed_documents() -> None:
    with pytest.raises(ET.ParseError):
        parse_tree(b"<a><b></a>")
