from __future__ import annotations

from typing import Generic, TypeVar, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .tree import AVLTree

K = TypeVar("K")
V = TypeVar("V")


class AVLNode(Generic[K, V]):
    __slots__ = ("_key", "value", "_height", "_parent", "_left", "_right", "_tree")

    def __init__(
        self,
        key: K,
        value: V,
        tree: AVLTree[K, V],
        parent: Optional[AVLNode[K, V]] = None,
    ):
        self._key: K = key
        self.value: V = value
        self._height: int = 1

        # _parent is a back-reference only; children are owned via _left/_right
        self._parent: Optional[AVLNode[K, V]] = parent
        self._left: Optional[AVLNode[K, V]] = None
        self._right: Optional[AVLNode[K, V]] = None
        self._tree: Optional[AVLTree[K, V]] = tree

    @property
    def key(self) -> K:
        """The key associated with this node.

        This property is immutable.
        """
        return self._key

    @property
    def height(self) -> int:
        """Cached height of the subtree rooted at this node (a leaf is 1)."""
        return self._height

    @property
    def parent(self) -> Optional[AVLNode[K, V]]:
        return self._parent

    @property
    def left(self) -> Optional[AVLNode[K, V]]:
        return self._left

    @property
    def right(self) -> Optional[AVLNode[K, V]]:
        return self._right

    @property
    def balance_factor(self) -> int:
        left = self._left._height if self._left is not None else 0
        right = self._right._height if self._right is not None else 0
        return left - right

    @property
    def attached(self) -> bool:
        """Whether this node is still part of a tree."""
        return self._tree is not None

    def _set_left_child(self, child: Optional[AVLNode[K, V]]):
        self._left = child
        if child is not None:
            child._parent = self

    def _set_right_child(self, child: Optional[AVLNode[K, V]]):
        self._right = child
        if child is not None:
            child._parent = self

    def _detach(self):
        self._tree = None
        self._parent = None
        self._left = None
        self._right = None

    def _print_node(self) -> str:
        return "{}: h={} bf={:2d}".format(self._key, self._height, self.balance_factor)

    def __repr__(self) -> str:
        return "AVLNode({!r}, {!r})".format(self._key, self.value)
