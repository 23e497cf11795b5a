import logging
from collections import deque
import numpy as np
from HF.config import MISSING_VALUE, DEFAULT_CONNECTIVITY
from HF.exceptions import InvalidArgumentException, NoMissingPixelException
from HF.hole import Hole
from HF.pixel import Connectivity, Pixel

logger = logging.getLogger(__name__)


def _check_image(image):
    if not isinstance(image, np.ndarray):
        image = np.asarray(image, dtype=np.float64)
    if image.ndim != 2:
        raise InvalidArgumentException(f"Expected a (H, W) image, got shape {image.shape}")
    return image


def find_missing_pixel(image, missing_value=MISSING_VALUE) -> Pixel:
    """
    Find the first missing pixel, scanning row by row from the top-left corner.

    Parameters:
        image (np.ndarray): image (H, W)
        missing_value (float): value marking a missing pixel

    Returns:
        Pixel: the row-major first missing pixel

    Raises:
        NoMissingPixelException: the image has no missing pixel
    """
    image = _check_image(image)
    missing = np.argwhere(image == missing_value)  # row-major order
    if len(missing) == 0:
        raise NoMissingPixelException()
    x, y = missing[0]
    return Pixel(int(x), int(y))


def calculate_hole(image, missing_pixel, connectivity=DEFAULT_CONNECTIVITY,
                   missing_value=MISSING_VALUE) -> Hole:
    """
    Trace the hole containing missing_pixel with a BFS over the image.

    Every visited missing pixel joins the hole interior and is expanded further,
    every visited known pixel joins the boundary and is not expanded.
    The image is only read.

    Parameters:
        image (np.ndarray): image (H, W)
        missing_pixel (Pixel): seed of the traversal, must be missing
        connectivity (Connectivity | int): 4 or 8
        missing_value (float): value marking a missing pixel

    Returns:
        Hole: interior in BFS order, boundary in first-discovery order
    """
    image = _check_image(image)
    connectivity = Connectivity.from_value(connectivity)
    rows, cols = image.shape
    seed = Pixel(*missing_pixel)
    if not (0 <= seed.x < rows and 0 <= seed.y < cols):
        raise InvalidArgumentException(f"Pixel {seed} is outside of the image {image.shape}")
    if image[seed] != missing_value:
        raise InvalidArgumentException(f"Pixel {seed} is not a missing pixel")

    interior = []
    boundary = []
    visited = np.zeros((rows, cols), dtype=bool)
    visited[seed] = True
    pixel_queue = deque([seed])

    while pixel_queue:
        current = pixel_queue.popleft()
        interior.append(current)

        for neighbour in current.neighbours(connectivity, rows, cols):
            if visited[neighbour]:
                continue
            visited[neighbour] = True
            if image[neighbour] == missing_value:
                pixel_queue.append(neighbour)
            else:
                boundary.append(neighbour)

    logger.debug("Traced hole from %s : %d interior, %d boundary pixels",
                 seed, len(interior), len(boundary))
    return Hole(interior, boundary, connectivity=connectivity, shape=(rows, cols))


def detect_hole(image, connectivity=DEFAULT_CONNECTIVITY, missing_value=MISSING_VALUE) -> Hole:
    """
    Find the first missing pixel and trace the hole around it.
    """
    missing_pixel = find_missing_pixel(image, missing_value=missing_value)
    return calculate_hole(image, missing_pixel, connectivity=connectivity,
                          missing_value=missing_value)
