class CoordinateOutOfBounds(IndexError):
    """
    Raised when a row or column coordinate falls outside ``[0, extent)``.

    Attributes
    ----------
    axis : str
        Either ``"row"`` or ``"column"``.
    value : int
        The offending coordinate.
    extent : int
        The number of rows or columns of the matrix.
    """

    def __init__(self, axis, value=None, extent=None):
        self.axis = axis
        self.value = value
        self.extent = extent
        super().__init__(f"{axis} coordinate {value} is out of bounds for extent {extent}")


class SizeMismatch(ValueError):
    """
    Raised when operands or a target have incompatible sizes.

    Attributes
    ----------
    expected : tuple
        The size the operation required.
    actual : tuple
        The size that was supplied.
    """

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"size mismatch: expected {expected}, got {actual}")


class ModeMismatch(ValueError):
    """Raised when a compressed matrix and a store disagree on major order."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"major order mismatch: expected {expected.value}-major, got {actual.value}-major")


class CompressionInvariantViolation(RuntimeError):
    """The pointer array built by a compression pass disagrees with the number of stored values."""
