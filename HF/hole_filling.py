import logging
import math
from enum import Enum
from typing import NamedTuple, Tuple
import numpy as np
from tqdm import tqdm
from HF.config import MISSING_VALUE
from HF.exceptions import DegenerateWeightException, InvalidArgumentException
from HF.pixel import Connectivity, Pixel

logger = logging.getLogger(__name__)


class DegeneratePolicy(Enum):
    """
    What to do with a pixel whose weights sum to zero.

    RAISE    : raise DegenerateWeightException (the caller's image is never touched)
    SKIP     : leave the pixel missing and report it in FillResult.unfilled
    BOUNDARY : neighbour filling only, interpolate that pixel from the whole boundary
    """
    RAISE = 'raise'
    SKIP = 'skip'
    BOUNDARY = 'boundary'

    @classmethod
    def from_value(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidArgumentException(
                f"on_degenerate should be one of {[policy.value for policy in cls]}, got {value!r}"
            ) from None


class FillResult(NamedTuple):
    image: np.ndarray
    filled: Tuple[Pixel, ...]
    unfilled: Tuple[Pixel, ...]


def _working_copy(image, hole):
    image = np.array(image, dtype=np.float64, copy=True)
    if image.ndim != 2:
        raise InvalidArgumentException(f"Expected a (H, W) image, got shape {image.shape}")
    if hole.shape is not None and tuple(image.shape) != tuple(hole.shape):
        raise InvalidArgumentException(
            f"Hole was traced on an image of shape {hole.shape}, got {image.shape}"
        )
    return image


def _weighted_average(pixel, contributors, values, weight):
    """
    sum(w(pixel, c) * value(c)) / sum(w(pixel, c)), or None if degenerate
    """
    numerator = 0.0
    denominator = 0.0
    for contributor, value in zip(contributors, values):
        w = weight(pixel, contributor)
        numerator += w * value
        denominator += w
    if denominator == 0:
        return None
    value = numerator / denominator
    if not math.isfinite(value):
        return None
    return value


def _boundary_values(image, hole, weight, interior):
    """
    Boundary-wide interpolated values for the given interior pixels, None where degenerate.
    """
    boundary = hole.boundary
    if len(boundary) == 0:
        return [None] * len(interior)
    boundary_values = np.array([image[pixel] for pixel in boundary], dtype=np.float64)

    if hasattr(weight, 'pairwise'):
        weights = weight.pairwise(interior, boundary)  # (N, M)
        denominator = weights.sum(axis=1)
        numerator = weights @ boundary_values
        with np.errstate(divide='ignore', invalid='ignore'):
            values = numerator / denominator
        return [float(value) if (d != 0 and np.isfinite(value)) else None
                for value, d in zip(values, denominator)]

    return [_weighted_average(pixel, boundary, boundary_values, weight) for pixel in interior]


def fill_hole_boundary(image, hole, weight, missing_value=MISSING_VALUE,
                       on_degenerate=DegeneratePolicy.RAISE, progress=False) -> FillResult:
    """
    Fill every hole pixel with the weighted average of the whole hole boundary.

    Each value depends only on the original image, so the order of the
    hole pixels doesn't matter.

    Parameters:
        image (np.ndarray): image (H, W), left untouched
        hole (Hole): hole traced on image
        weight (WeightFunction): weight(u, v) -> positive float
        missing_value (float): value marking a missing pixel
        on_degenerate (DegeneratePolicy | str): RAISE or SKIP
        progress (bool): show a progress bar

    Returns:
        FillResult: filled copy of the image, filled pixels, pixels left missing
    """
    policy = DegeneratePolicy.from_value(on_degenerate)
    if policy is DegeneratePolicy.BOUNDARY:
        raise InvalidArgumentException("BOUNDARY fallback only applies to neighbour filling")
    filled_image = _working_copy(image, hole)
    interior = hole.interior

    values = _boundary_values(filled_image, hole, weight, interior)

    filled = []
    unfilled = []
    for pixel, value in tqdm(zip(interior, values), total=len(interior),
                             desc="Hole Filling...", disable=not progress):
        if value is None:
            if policy is DegeneratePolicy.RAISE:
                raise DegenerateWeightException(pixel)
            logger.warning("Degenerate weights at %s, pixel left missing", pixel)
            unfilled.append(pixel)
            continue
        filled_image[pixel] = value
        filled.append(pixel)

    return FillResult(filled_image, tuple(filled), tuple(unfilled))


def fill_hole_neighbours(image, hole, weight, connectivity=None, missing_value=MISSING_VALUE,
                         on_degenerate=DegeneratePolicy.RAISE, progress=False) -> FillResult:
    """
    Fill the hole pixels one by one in BFS discovery order, each from its known direct neighbours.

    A filled pixel counts as known for the pixels processed after it,
    so the processing order is part of the result. Single pass.

    Parameters:
        image (np.ndarray): image (H, W), left untouched
        hole (Hole): hole traced on image
        weight (WeightFunction): weight(u, v) -> positive float
        connectivity (Connectivity | int, optional): defaults to the hole's connectivity
        missing_value (float): value marking a missing pixel
        on_degenerate (DegeneratePolicy | str): RAISE, SKIP or BOUNDARY
        progress (bool): show a progress bar

    Returns:
        FillResult: filled copy of the image, filled pixels, pixels left missing
    """
    policy = DegeneratePolicy.from_value(on_degenerate)
    connectivity = hole.connectivity if connectivity is None else Connectivity.from_value(connectivity)
    original = _working_copy(image, hole)
    filled_image = original.copy()
    rows, cols = filled_image.shape

    filled = []
    unfilled = []
    for pixel in tqdm(hole.interior, desc="Hole Filling...", disable=not progress):
        known = [neighbour for neighbour in pixel.neighbours(connectivity, rows, cols)
                 if filled_image[neighbour] != missing_value]
        values = [filled_image[neighbour] for neighbour in known]
        value = _weighted_average(pixel, known, values, weight) if known else None

        if value is None and policy is DegeneratePolicy.BOUNDARY:
            value = _boundary_values(original, hole, weight, [pixel])[0]
        if value is None:
            if policy is DegeneratePolicy.SKIP:
                logger.warning("No known neighbour at %s, pixel left missing", pixel)
                unfilled.append(pixel)
                continue
            raise DegenerateWeightException(pixel)

        filled_image[pixel] = value
        filled.append(pixel)

    return FillResult(filled_image, tuple(filled), tuple(unfilled))


def fill_hole(image, hole, weight, method='boundary', **kwargs) -> FillResult:
    """
    Fill the hole with the given method : 'boundary' or 'neighbours'.
    """
    if method == 'boundary':
        return fill_hole_boundary(image, hole, weight, **kwargs)
    elif method == 'neighbours':
        return fill_hole_neighbours(image, hole, weight, **kwargs)
    raise InvalidArgumentException(f"Unknown hole filling method {method!r}")
