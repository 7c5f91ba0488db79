from . import balance
from . import errors
from . import node
from . import tree

from .errors import AVLMapError, IntegrityError, InvalidNodeError
from .node import AVLNode
from .tree import AVLTree

__all__ = [
    "AVLTree",
    "AVLNode",
    "AVLMapError",
    "IntegrityError",
    "InvalidNodeError",
]
