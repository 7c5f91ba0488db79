from __future__ import annotations

import logging
from typing import Generic, TypeVar, Optional

from . import balance
from .errors import IntegrityError, InvalidNodeError
from .node import AVLNode

K = TypeVar("K")
V = TypeVar("V")

logger = logging.getLogger(__name__)


class AVLTree(Generic[K, V]):
    """An ordered dictionary kept height-balanced by AVL rotations.

    Search, insertion, deletion, successor and predecessor all run in
    O(log n). The tree does no locking of its own; callers sharing an
    instance between threads must serialize every operation on it.

    Node handles returned by `search`, `min_node` and friends stay valid
    until their key is deleted. Passing a deleted node (or a node from another
    tree) to `successor` or `predecessor` raises `InvalidNodeError`.
    """

    def __init__(self):
        self._root: Optional[AVLNode[K, V]] = None
        self._len: int = 0
        self._fixups: int = 0

    @property
    def root(self) -> Optional[AVLNode[K, V]]:
        return self._root

    @property
    def fixups(self) -> int:
        """Number of rebalancing fix-ups applied so far.

        A single and a double rotation each count as one fix-up.
        """
        return self._fixups

    def size(self) -> int:
        return self._len

    def height(self) -> int:
        return balance.height(self._root)

    def search(self, key: K) -> Optional[AVLNode[K, V]]:
        """Find the node holding `key`, or None if the key is not present."""
        x = self._root
        while x is not None:
            if key == x.key:
                return x
            elif key < x.key:
                x = x._left
            else:
                x = x._right
        return None

    def insert(self, key: K, value: V):
        """Insert a key, overwriting the value in place if it already exists."""
        y: Optional[AVLNode[K, V]] = None
        x = self._root
        while x is not None:
            if key == x.key:
                x.value = value
                return
            y = x
            if key < x.key:
                x = x._left
            else:
                x = x._right

        z = AVLNode(key, value, self, y)
        if y is None:
            self._root = z
        elif key < y.key:
            y._left = z
        else:
            y._right = z
        self._len += 1

        balance.insert_rebalance(self, y)

    def delete(self, key: K):
        """Remove a key from the tree. Deleting a missing key does nothing."""
        x = self.search(key)
        if x is None:
            return
        self._delete_node(x)

    def _transplant(self, u: AVLNode[K, V], v: Optional[AVLNode[K, V]]):
        parent = u._parent
        if parent is None:
            self._root = v
        elif u is parent._left:
            parent._left = v
        else:
            parent._right = v

        if v is not None:
            v._parent = parent

    def _delete_node(self, x: AVLNode[K, V]):
        if x._left is None:
            z = x._parent
            self._transplant(x, x._right)
        elif x._right is None:
            z = x._parent
            self._transplant(x, x._left)
        else:
            y = self._minimum(x._right)
            if y._parent is x:
                z = y
            else:
                z = y._parent
                self._transplant(y, y._right)
                y._set_right_child(x._right)
            self._transplant(x, y)
            y._set_left_child(x._left)
            # y now stands where x stood; nodes below it did not change height
            # unless the rebalancing walk reaches y and recomputes it
            y._height = x._height

        logger.debug(
            "deleted key %r, retracing from %r", x.key, z.key if z is not None else None
        )
        x._detach()
        self._len -= 1

        balance.delete_rebalance(self, z)

    @staticmethod
    def _minimum(x: AVLNode[K, V]) -> AVLNode[K, V]:
        while x._left is not None:
            x = x._left
        return x

    @staticmethod
    def _maximum(x: AVLNode[K, V]) -> AVLNode[K, V]:
        while x._right is not None:
            x = x._right
        return x

    def _check_owner(self, node: AVLNode[K, V]):
        if node._tree is not self:
            raise InvalidNodeError(node)

    def successor(self, node: AVLNode[K, V]) -> Optional[AVLNode[K, V]]:
        """The node with the next larger key, or None if `node` is the maximum."""
        self._check_owner(node)
        if node._right is not None:
            return self._minimum(node._right)

        x = node
        y = x._parent
        while y is not None and x is y._right:
            x = y
            y = y._parent
        return y

    def predecessor(self, node: AVLNode[K, V]) -> Optional[AVLNode[K, V]]:
        """The node with the next smaller key, or None if `node` is the minimum."""
        self._check_owner(node)
        if node._left is not None:
            return self._maximum(node._left)

        x = node
        y = x._parent
        while y is not None and x is y._left:
            x = y
            y = y._parent
        return y

    def min_node(self) -> Optional[AVLNode[K, V]]:
        if self._root is None:
            return None
        return self._minimum(self._root)

    def max_node(self) -> Optional[AVLNode[K, V]]:
        if self._root is None:
            return None
        return self._maximum(self._root)

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        node = self.search(key)
        if node is None:
            return default
        return node.value

    def check(self) -> int:
        """Validate every structural invariant of the tree.

        Checks key order, parent links, cached heights, the AVL balance
        constraint and the stored size. Raises `IntegrityError` on the first
        violation found, and returns the height of the tree otherwise.
        """
        if self._root is None:
            if self._len != 0:
                raise IntegrityError("empty tree reports size {}".format(self._len))
            return 0

        if self._root._parent is not None:
            raise IntegrityError("root {!r} has a parent".format(self._root))

        count = 0
        prev: Optional[AVLNode[K, V]] = None
        stack = []
        x = self._root

        # in-order walk with an explicit stack, checking order as we go
        while stack or x is not None:
            while x is not None:
                stack.append(x)
                x = x._left
            x = stack.pop()

            if prev is not None and not (prev.key < x.key):
                raise IntegrityError(
                    "keys out of order: {!r} before {!r}".format(prev.key, x.key)
                )
            if x._tree is not self:
                raise IntegrityError("node {!r} has the wrong owner".format(x))

            for child in (x._left, x._right):
                if child is not None and child._parent is not x:
                    raise IntegrityError(
                        "parent <> child link broken at node {!r} (child = {!r})".format(
                            x.key, child.key
                        )
                    )

            expected = 1 + max(balance.height(x._left), balance.height(x._right))
            if x._height != expected:
                raise IntegrityError(
                    "stale height at node {!r} (cached {}, actual {})".format(
                        x.key, x._height, expected
                    )
                )
            if abs(balance.balance_factor(x)) > 1:
                raise IntegrityError(
                    "balance constraint violated at node {!r}".format(x.key)
                )

            count += 1
            prev = x
            x = x._right

        if count != self._len:
            raise IntegrityError(
                "tree stored length differs from traversed number of nodes "
                "(got {}, expected {})".format(self._len, count)
            )

        return self._root._height

    def print(self) -> str:
        if self._root is None:
            return "<empty tree>"

        ret = ""
        stack = [(self._root, 0, False)]
        while stack:
            node, level, visited = stack.pop()
            if visited:
                ret += ("    " * level) + node._print_node() + "\n"
                continue
            if node._right is not None:
                stack.append((node._right, level + 1, False))
            stack.append((node, level, True))
            if node._left is not None:
                stack.append((node._left, level + 1, False))
        return ret

    def __getitem__(self, key: K) -> V:
        node = self.search(key)
        if node is None:
            raise KeyError(key)
        return node.value

    def __setitem__(self, key: K, val: V):
        self.insert(key, val)

    def __delitem__(self, key: K):
        node = self.search(key)
        if node is None:
            raise KeyError(key)
        self._delete_node(node)

    def __contains__(self, key: K) -> bool:
        return self.search(key) is not None

    def __len__(self) -> int:
        return self._len

    def __bool__(self) -> bool:
        return self._root is not None

    def __repr__(self) -> str:
        return "AVLTree(size={}, height={})".format(self._len, self.height())
