from typing import Iterable, Tuple
from HF.pixel import Connectivity, Pixel


class Hole:
    """
    A hole : the connected missing pixels and the known pixels around them.

    Args:
        interior (Iterable[Pixel]): missing pixels, in discovery order
        boundary (Iterable[Pixel]): known pixels adjacent to the interior, each once
        connectivity (Connectivity | int): connectivity the hole was traced with
        shape ((int,int)): (H, W) of the image the hole belongs to
    """
    __slots__ = ('_interior', '_interior_set', '_boundary', '_connectivity', '_shape')

    def __init__(self, interior: Iterable[Pixel], boundary: Iterable[Pixel],
                 connectivity=Connectivity.FOUR, shape: Tuple[int, int] = None):
        self._interior = tuple(Pixel(*pixel) for pixel in interior)
        self._interior_set = frozenset(self._interior)
        self._boundary = tuple(Pixel(*pixel) for pixel in boundary)
        self._connectivity = Connectivity.from_value(connectivity)
        self._shape = tuple(shape) if shape is not None else None

    @property
    def interior(self) -> Tuple[Pixel, ...]:
        return self._interior

    @property
    def boundary(self) -> Tuple[Pixel, ...]:
        return self._boundary

    @property
    def connectivity(self) -> Connectivity:
        return self._connectivity

    @property
    def shape(self):
        return self._shape

    def __len__(self):
        return len(self._interior)

    def __bool__(self):
        return len(self._interior) > 0

    def __contains__(self, pixel):
        return Pixel(*pixel) in self._interior_set

    def __eq__(self, other):
        if not isinstance(other, Hole):
            return NotImplemented
        return (self._interior == other._interior
                and self._boundary == other._boundary
                and self._connectivity == other._connectivity)

    def __hash__(self):
        return hash((self._interior, self._boundary, self._connectivity))

    def __repr__(self):
        return (f"Hole(interior={len(self._interior)} pixels, "
                f"boundary={len(self._boundary)} pixels, "
                f"connectivity={int(self._connectivity)})")

    def __str__(self):
        interior = '\t'.join(str(pixel) for pixel in self._interior)
        boundary = '\t'.join(str(pixel) for pixel in self._boundary)
        return f"Hole:\n{interior}\nHole Boundary:\n{boundary}"
