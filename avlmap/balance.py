"""Rotation primitives and the AVL rebalancing walks.

Everything in here operates on explicit node handles. Rotations may replace
the root of the tree, so each of them also takes the owning tree.

Heights are cached on the nodes and are never recomputed recursively: after a
structural change, `update_height` must be applied bottom-up, to a child
before its parent, so that the parent never reads a stale child height.
"""
from __future__ import annotations

import logging
from typing import Optional, TypeVar, TYPE_CHECKING

from .node import AVLNode

if TYPE_CHECKING:
    from .tree import AVLTree

K = TypeVar("K")
V = TypeVar("V")

logger = logging.getLogger(__name__)


def height(x: Optional[AVLNode[K, V]]) -> int:
    if x is None:
        return 0
    return x._height


def update_height(x: AVLNode[K, V]):
    x._height = 1 + max(height(x._left), height(x._right))


def balance_factor(x: AVLNode[K, V]) -> int:
    return height(x._left) - height(x._right)


def rotate_left(tree: AVLTree[K, V], x: AVLNode[K, V]) -> AVLNode[K, V]:
    """Rotate `x` down to the left; its right child takes its place.

    Only the links are changed; cached heights are left untouched.
    Returns the node now occupying x's former position.
    """
    y = x._right
    assert y is not None, "left rotation at {!r} requires a right child".format(x)

    x._set_right_child(y._left)
    tree._transplant(x, y)
    y._set_left_child(x)
    return y


def rotate_right(tree: AVLTree[K, V], x: AVLNode[K, V]) -> AVLNode[K, V]:
    """Mirror image of `rotate_left`."""
    y = x._left
    assert y is not None, "right rotation at {!r} requires a left child".format(x)

    x._set_left_child(y._right)
    tree._transplant(x, y)
    y._set_right_child(x)
    return y


def avl_rotate_left(tree: AVLTree[K, V], x: AVLNode[K, V]) -> AVLNode[K, V]:
    y = rotate_left(tree, x)
    # x is now y's child: its height has to be correct before y's is computed
    update_height(x)
    update_height(y)
    return y


def avl_rotate_right(tree: AVLTree[K, V], x: AVLNode[K, V]) -> AVLNode[K, V]:
    y = rotate_right(tree, x)
    update_height(x)
    update_height(y)
    return y


def fix_up(tree: AVLTree[K, V], x: AVLNode[K, V]) -> AVLNode[K, V]:
    """Restore the balance of a node whose balance factor is +2 or -2.

    Applies a single (LL / RR) or double (LR / RL) rotation and returns the
    root of the rebalanced subtree. Each call counts as one fix-up on the
    tree.
    """
    bf = balance_factor(x)
    assert bf in (2, -2), "fix-up at {!r} with balance factor {}".format(x, bf)

    if bf == 2:
        if balance_factor(x._left) == -1:
            case = "LR"
            avl_rotate_left(tree, x._left)
        else:
            case = "LL"
        pivot = avl_rotate_right(tree, x)
    else:
        if balance_factor(x._right) == 1:
            case = "RL"
            avl_rotate_right(tree, x._right)
        else:
            case = "RR"
        pivot = avl_rotate_left(tree, x)

    tree._fixups += 1
    logger.debug("%s fix-up at key %r, new subtree root %r", case, x.key, pivot.key)
    return pivot


def insert_rebalance(tree: AVLTree[K, V], x: Optional[AVLNode[K, V]]):
    """Retrace upward from `x`, the parent of a freshly inserted leaf.

    The walk ends at the first node whose balance factor drops to 0, since its
    height did not change, or right after the first fix-up, since a rotation
    restores the height the subtree had before the insert. Either way the
    ancestors above it keep valid heights and balance factors.
    """
    while x is not None:
        update_height(x)
        bf = balance_factor(x)

        if bf == 0:
            return
        elif bf == 2 or bf == -2:
            fix_up(tree, x)
            return

        x = x._parent


def delete_rebalance(tree: AVLTree[K, V], x: Optional[AVLNode[K, V]]):
    """Retrace upward from `x`, the lowest node whose subtree lost a level.

    Unlike insertion, several fix-ups may be needed on the way to the root.
    The walk stops once the subtree at the current position has the same
    height as before this step, i.e. the height loss has been absorbed.
    """
    while x is not None:
        old_height = x._height
        update_height(x)

        bf = balance_factor(x)
        if bf == 2 or bf == -2:
            x = fix_up(tree, x)

        if x._height == old_height:
            return

        x = x._parent
