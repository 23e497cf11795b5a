from enum import IntEnum
from typing import List, NamedTuple
from HF.exceptions import InvalidArgumentException


class Connectivity(IntEnum):
    """
    Pixel connectivity : which pixels count as neighbours.

    FOUR  : up, down, left, right
    EIGHT : FOUR plus the four diagonals
    """
    FOUR = 4
    EIGHT = 8

    @classmethod
    def from_value(cls, value):
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise InvalidArgumentException(
                f"pixel connectivity value should be 4 or 8, got {value!r}"
            ) from None


# (dx, dy) offsets per connectivity
_ORTHOGONAL_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))
_DIAGONAL_OFFSETS = ((-1, -1), (-1, 1), (1, -1), (1, 1))
_OFFSETS = {
    Connectivity.FOUR: _ORTHOGONAL_OFFSETS,
    Connectivity.EIGHT: _ORTHOGONAL_OFFSETS + _DIAGONAL_OFFSETS,
}


class Pixel(NamedTuple):
    """
    A single pixel position.
    x is the row (x=0 is the topmost row), y is the column (y=0 is the leftmost column).
    Being a tuple, a Pixel can index a (H, W) np.ndarray directly : image[pixel]
    """
    x: int
    y: int

    def __str__(self):
        return f"({self.x}, {self.y})"

    def neighbours(self, connectivity, rows, cols) -> List['Pixel']:
        """
        Neighbours of the pixel according to the given connectivity,
        ignoring those outside of the image.

        Args:
            connectivity (Connectivity | int): 4 or 8
            rows (int): image height
            cols (int): image width

        Returns:
            list[Pixel]: in-bounds neighbours, orthogonal ones first
        """
        offsets = _OFFSETS[Connectivity.from_value(connectivity)]
        neighbours = []
        for dx, dy in offsets:
            nx, ny = self.x + dx, self.y + dy
            if 0 <= nx < rows and 0 <= ny < cols:
                neighbours.append(Pixel(nx, ny))
        return neighbours
