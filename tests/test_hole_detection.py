import numpy as np
import pytest
from HF.config import MISSING_VALUE
from HF.exceptions import InvalidArgumentException, NoMissingPixelException
from HF.hole import Hole
from HF.hole_detection import calculate_hole, detect_hole, find_missing_pixel
from HF.pixel import Connectivity, Pixel


def make_image(shape, missing):
    image = np.full(shape, 0.5)
    for pixel in missing:
        image[pixel] = MISSING_VALUE
    return image


def connected_component(image, seed, connectivity):
    """Missing component of seed and its known neighbours, without BFS order."""
    rows, cols = image.shape
    component = {seed}
    stack = [seed]
    while stack:
        pixel = stack.pop()
        for neighbour in pixel.neighbours(connectivity, rows, cols):
            if image[neighbour] == MISSING_VALUE and neighbour not in component:
                component.add(neighbour)
                stack.append(neighbour)
    boundary = {neighbour
                for pixel in component
                for neighbour in pixel.neighbours(connectivity, rows, cols)
                if image[neighbour] != MISSING_VALUE}
    return component, boundary


def test_find_missing_pixel_is_row_major_first():
    image = make_image((4, 5), [(3, 0), (1, 4), (1, 2), (2, 1)])
    assert find_missing_pixel(image) == Pixel(1, 2)


def test_find_missing_pixel_without_hole():
    with pytest.raises(NoMissingPixelException):
        find_missing_pixel(np.zeros((3, 3)))


def test_find_missing_pixel_custom_value():
    image = np.ones((2, 2))
    image[1, 0] = 0.0
    assert find_missing_pixel(image, missing_value=0.0) == Pixel(1, 0)


def test_three_by_four_example():
    image = np.zeros((3, 4))
    image[1, 1] = image[1, 2] = image[2, 2] = MISSING_VALUE

    seed = find_missing_pixel(image)
    assert seed == Pixel(1, 1)

    hole = calculate_hole(image, seed, connectivity=Connectivity.FOUR)
    assert hole.interior == (Pixel(1, 1), Pixel(1, 2), Pixel(2, 2))
    assert len(hole.boundary) == 6
    assert set(hole.boundary) == {Pixel(0, 1), Pixel(0, 2), Pixel(1, 0),
                                  Pixel(1, 3), Pixel(2, 1), Pixel(2, 3)}


@pytest.mark.parametrize("connectivity, boundary_size", [(4, 4), (8, 8)])
def test_isolated_missing_pixel(connectivity, boundary_size):
    image = make_image((5, 5), [(2, 2)])
    hole = detect_hole(image, connectivity=connectivity)
    assert hole.interior == (Pixel(2, 2),)
    assert len(hole.boundary) == boundary_size


def test_diagonal_pixels_join_only_with_eight_connectivity():
    image = make_image((4, 4), [(1, 1), (2, 2)])
    assert len(detect_hole(image, connectivity=4)) == 1
    assert set(detect_hole(image, connectivity=8).interior) == {Pixel(1, 1), Pixel(2, 2)}


def test_other_holes_are_ignored():
    image = make_image((5, 7), [(1, 1), (1, 2), (3, 5), (4, 5)])
    hole = detect_hole(image, connectivity=8)
    assert set(hole.interior) == {Pixel(1, 1), Pixel(1, 2)}
    assert Pixel(3, 5) not in hole.boundary


@pytest.mark.parametrize("connectivity", [4, 8])
def test_hole_matches_connected_component(connectivity):
    rng = np.random.default_rng(0)
    image = rng.random((12, 15))
    image[rng.random((12, 15)) < 0.35] = MISSING_VALUE
    seed = find_missing_pixel(image)

    hole = calculate_hole(image, seed, connectivity=connectivity)
    interior, boundary = connected_component(image, seed, connectivity)

    assert hole.interior[0] == seed
    assert len(hole.interior) == len(set(hole.interior))
    assert len(hole.boundary) == len(set(hole.boundary))
    assert set(hole.interior) == interior
    assert set(hole.boundary) == boundary
    assert not set(hole.interior) & set(hole.boundary)


def test_interior_is_in_bfs_order():
    image = make_image((1, 5), [(0, 1), (0, 2), (0, 3)])
    hole = detect_hole(image, connectivity=4)
    assert hole.interior == (Pixel(0, 1), Pixel(0, 2), Pixel(0, 3))
    assert hole.boundary == (Pixel(0, 0), Pixel(0, 4))


def test_whole_image_missing():
    image = np.full((3, 3), MISSING_VALUE)
    hole = detect_hole(image, connectivity=8)
    assert len(hole.interior) == 9
    assert hole.boundary == ()


def test_image_is_not_modified():
    image = make_image((4, 4), [(1, 1), (1, 2)])
    before = image.copy()
    detect_hole(image, connectivity=8)
    np.testing.assert_array_equal(image, before)


def test_seed_must_be_missing():
    image = make_image((3, 3), [(1, 1)])
    with pytest.raises(InvalidArgumentException):
        calculate_hole(image, Pixel(0, 0), connectivity=4)
    with pytest.raises(InvalidArgumentException):
        calculate_hole(image, Pixel(3, 0), connectivity=4)


def test_image_must_be_two_dimensional():
    with pytest.raises(InvalidArgumentException):
        find_missing_pixel(np.full((2, 2, 3), MISSING_VALUE))


def test_hole_string():
    hole = Hole([Pixel(1, 1)], [Pixel(0, 1), Pixel(1, 0)])
    assert str(hole) == "Hole:\n(1, 1)\nHole Boundary:\n(0, 1)\t(1, 0)"
    assert Pixel(1, 1) in hole
    assert len(hole) == 1


def test_hole_membership():
    image = make_image((4, 4), [(1, 1), (1, 2), (2, 2)])
    hole = detect_hole(image, connectivity=4)
    assert (1, 2) in hole
    assert Pixel(2, 2) in hole
    assert Pixel(0, 1) not in hole
    with pytest.raises(AttributeError):
        hole.extra = 1
