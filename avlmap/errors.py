class AVLMapError(Exception):
    pass


class InvalidNodeError(AVLMapError, ValueError):
    """Raised when a node handle does not belong to the tree it is used with.

    This covers nodes taken from another tree as well as nodes that have been
    detached by a delete.
    """

    def __init__(self, node):
        super().__init__(node)
        self.node = node

    def __str__(self) -> str:
        return "node {!r} does not belong to this tree".format(self.node)


class IntegrityError(AVLMapError, AssertionError):
    pass
