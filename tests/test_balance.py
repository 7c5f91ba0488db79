import logging

import pytest

from avlmap import AVLTree, AVLNode
from avlmap import balance
from avlmap.errors import IntegrityError


def shape(node):
    if node is None:
        return None
    return (node.key, shape(node.left), shape(node.right))


def build_chain(keys):
    """Build a right-leaning chain by hand, bypassing rebalancing."""
    tree = AVLTree()
    prev = None
    for k in keys:
        node = AVLNode(k, str(k), tree)
        if prev is None:
            tree._root = node
        else:
            prev._set_right_child(node)
        prev = node
    tree._len = len(keys)

    node = prev
    while node is not None:
        balance.update_height(node)
        node = node.parent
    return tree


def test_height_queries():
    tree = build_chain([1, 2, 3])
    root = tree.root

    assert balance.height(None) == 0
    assert balance.height(root) == 3
    assert balance.height(root.right.right) == 1
    assert balance.balance_factor(root) == -2
    assert balance.balance_factor(root.right) == -1
    assert root.balance_factor == -2


def test_rotate_left_leaves_heights():
    tree = build_chain([1, 2])
    x = tree.root

    y = balance.rotate_left(tree, x)

    assert tree.root is y
    assert y.key == 2
    assert y.parent is None
    assert y.left is x
    assert x.parent is y
    assert x.right is None
    # the plain rotation does not touch cached heights
    assert x.height == 2
    assert y.height == 1


def test_rotations_are_inverse():
    tree = build_chain([1, 2, 3])
    balance.rotate_left(tree, tree.root)
    assert shape(tree.root) == (2, (1, None, None), (3, None, None))

    x = balance.rotate_right(tree, tree.root)

    assert x.key == 1
    assert x.parent is None
    assert shape(tree.root) == (1, None, (2, None, (3, None, None)))


def test_avl_rotate_left_updates_heights():
    tree = build_chain([1, 2, 3])
    y = balance.avl_rotate_left(tree, tree.root)

    assert shape(tree.root) == (2, (1, None, None), (3, None, None))
    assert y.height == 2
    assert y.left.height == 1
    assert y.right.height == 1
    tree.check()


def test_avl_rotate_inner_node():
    tree = build_chain([1, 2, 3, 4])
    balance.avl_rotate_left(tree, tree.root.right)

    assert shape(tree.root) == (1, None, (3, (2, None, None), (4, None, None)))
    assert tree.root.right.parent is tree.root
    assert tree.root.right.height == 2


def test_rotation_requires_pivot():
    tree = build_chain([1])
    with pytest.raises(AssertionError):
        balance.rotate_left(tree, tree.root)
    with pytest.raises(AssertionError):
        balance.rotate_right(tree, tree.root)


def test_check_reports_imbalance():
    tree = build_chain([1, 2, 3])
    with pytest.raises(IntegrityError):
        tree.check()


def test_check_reports_stale_height():
    tree = AVLTree()
    for k in (2, 1, 3):
        tree.insert(k, k)
    tree.root._height = 5

    with pytest.raises(IntegrityError):
        tree.check()


def test_scenario_single_rotation(caplog):
    caplog.set_level(logging.DEBUG, logger="avlmap.balance")
    tree = AVLTree()

    tree.insert(10, "a")
    tree.insert(20, "b")
    assert tree.fixups == 0
    tree.insert(30, "c")

    assert tree.fixups == 1
    assert "RR fix-up at key 10" in caplog.text
    assert shape(tree.root) == (20, (10, None, None), (30, None, None))
    assert tree.root.balance_factor == 0
    assert tree.root.left.balance_factor == 0
    assert tree.root.right.balance_factor == 0
    tree.check()


def test_scenario_double_rotation(caplog):
    caplog.set_level(logging.DEBUG, logger="avlmap.balance")
    tree = AVLTree()

    for k in (30, 10, 20):
        tree.insert(k, k)

    assert tree.fixups == 1
    assert "LR fix-up at key 30" in caplog.text
    assert shape(tree.root) == (20, (10, None, None), (30, None, None))
    tree.check()


def test_scenario_mirrored_double_rotation(caplog):
    caplog.set_level(logging.DEBUG, logger="avlmap.balance")
    tree = AVLTree()

    for k in (10, 30, 20):
        tree.insert(k, k)

    assert "RL fix-up at key 10" in caplog.text
    assert shape(tree.root) == (20, (10, None, None), (30, None, None))


def test_scenario_delete_minimum():
    tree = AVLTree()
    for k in range(1, 8):
        tree.insert(k, k)

    assert shape(tree.root) == (
        4,
        (2, (1, None, None), (3, None, None)),
        (6, (5, None, None), (7, None, None)),
    )

    tree.delete(1)

    assert tree.check() == 3
    assert tree.size() == 6

    keys = []
    node = tree.min_node()
    while node is not None:
        keys.append(node.key)
        node = tree.successor(node)
    assert keys == [2, 3, 4, 5, 6, 7]


def test_scenario_extremes():
    tree = AVLTree()
    for k in (5, 3, 8, 1, 4):
        tree.insert(k, k)

    assert tree.successor(tree.search(8)) is None
    assert tree.predecessor(tree.search(1)) is None
    assert tree.max_node().key == 8
    assert tree.min_node().key == 1


def test_empty_tree():
    tree = AVLTree()

    assert tree.size() == 0
    assert tree.height() == 0
    assert tree.search(1) is None
    assert tree.min_node() is None
    assert tree.max_node() is None
    assert tree.print() == "<empty tree>"
    assert tree.check() == 0

    tree.delete(1)
    assert tree.size() == 0


def test_delete_root_with_adjacent_successor():
    tree = AVLTree()
    for k in (20, 10, 30):
        tree.insert(k, k)

    succ = tree.search(30)
    tree.delete(20)

    assert tree.root is succ
    assert shape(tree.root) == (30, (10, None, None), None)
    assert tree.root.height == 2
    tree.check()


def test_delete_root_with_distant_successor():
    tree = AVLTree()
    for k in range(1, 8):
        tree.insert(k, k)

    succ = tree.search(5)
    tree.delete(4)

    assert tree.root is succ
    assert shape(tree.root) == (
        5,
        (2, (1, None, None), (3, None, None)),
        (6, None, (7, None, None)),
    )
    assert tree.check() == 3


def test_delete_rotates_along_path(caplog):
    caplog.set_level(logging.DEBUG, logger="avlmap.balance")

    # Minimal AVL tree of height 5: removing its shallowest leaf forces a
    # fix-up on two levels of the path.
    tree = AVLTree()
    for k in (8, 5, 11, 3, 7, 10, 12, 2, 4, 6, 9, 1):
        tree.insert(k, k)
    assert tree.check() == 5

    fixups = tree.fixups
    tree.delete(12)

    assert tree.fixups - fixups == 2
    assert "fix-up at key 11" in caplog.text
    assert "fix-up at key 8" in caplog.text
    assert tree.check() == 4
    assert tree.root.key == 5


def test_print_tree():
    tree = AVLTree()
    for k in (2, 1, 3):
        tree.insert(k, k)

    assert tree.print() == (
        "    1: h=1 bf= 0\n" "2: h=2 bf= 0\n" "    3: h=1 bf= 0\n"
    )
