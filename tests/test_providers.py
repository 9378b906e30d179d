import pytest

from pageguard import ConfigurationError, MemoryTree, UnknownNode


def test_ancestors_are_root_first():
    tree = MemoryTree()
    tree.add(1)
    tree.add(5, parent=1)
    tree.add(10, parent=5)
    assert [node.id for node in tree(10)] == [1, 5]
    assert tree.ancestors(1) == []


def test_unknown_node_raises():
    with pytest.raises(UnknownNode):
        MemoryTree().ancestors(3)


def test_from_mapping_builds_flags():
    tree = MemoryTree.from_mapping(
        {
            "nodes": {
                "1": {"parent": None, "template": "home"},
                "7": {"parent": 1, "hidden": True},
                "8": {"parent": "7", "unpublished": True},
            }
        }
    )
    assert tree.get(7).hidden
    assert tree.get(8).unpublished
    assert [node.id for node in tree.ancestors(8)] == [1, 7]


def test_from_mapping_rejects_bad_documents():
    with pytest.raises(ConfigurationError):
        MemoryTree.from_mapping({"pages": {}})
    with pytest.raises(ConfigurationError):
        MemoryTree.from_mapping({"nodes": {"x": {}}})


def test_from_mapping_reads_text_flags():
    tree = MemoryTree.from_mapping(
        {
            "nodes": {
                "1": {"hidden": "false", "unpublished": "0"},
                "2": {"parent": 1, "hidden": "true", "unpublished": "1"},
            }
        }
    )
    assert not tree.get(1).hidden
    assert not tree.get(1).unpublished
    assert tree.get(2).hidden
    assert tree.get(2).unpublished


def test_from_mapping_rejects_unknown_flag_text():
    with pytest.raises(ConfigurationError, match="hidden"):
        MemoryTree.from_mapping({"nodes": {"1": {"hidden": "maybe"}}})
