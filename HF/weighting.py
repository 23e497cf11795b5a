import math
from typing import Callable
import numpy as np
from HF.config import DEFAULT_EPSILON, DEFAULT_Z
from HF.exceptions import InvalidArgumentException
from HF.pixel import Pixel

# weight(u, v) -> positive float
WeightFunction = Callable[[Pixel, Pixel], float]


def euclidean_distance(u, v) -> float:
    return math.hypot(u[0] - v[0], u[1] - v[1])


class DefaultWeight:
    """
    Default weighting function : w(u, v) = 1 / (||u - v||^z + epsilon)

    Args:
        z (float): falloff exponent
        epsilon (float): small positive value keeping the denominator away from zero
    """

    def __init__(self, z=DEFAULT_Z, epsilon=DEFAULT_EPSILON):
        z = float(z)
        epsilon = float(epsilon)
        if not math.isfinite(z):
            raise InvalidArgumentException(f"z should be a finite float, got {z}")
        if not (epsilon > 0 and math.isfinite(epsilon)):
            raise InvalidArgumentException(f"epsilon should be a positive float, got {epsilon}")
        self.z = z
        self.epsilon = epsilon

    def __call__(self, u, v) -> float:
        if tuple(u) == tuple(v):
            raise InvalidArgumentException(f"Can't weight pixel {Pixel(*u)} against itself")
        # saturates to inf (weight 0) on overflow
        with np.errstate(over='ignore'):
            distance = np.float64(euclidean_distance(u, v)) ** self.z
        return float(1.0 / (distance + self.epsilon))

    def pairwise(self, us, vs) -> np.ndarray:
        """
        Weights between every pixel of us and every pixel of vs.

        Args:
            us (array-like): (N, 2) pixel coordinates
            vs (array-like): (M, 2) pixel coordinates, disjoint from us

        Returns:
            np.ndarray: (N, M) weights
        """
        us = np.asarray(us, dtype=np.float64).reshape(-1, 2)
        vs = np.asarray(vs, dtype=np.float64).reshape(-1, 2)
        diff = us[:, None, :] - vs[None, :, :]  # (N, M, 2)
        distance = np.hypot(diff[..., 0], diff[..., 1])
        if np.any(distance == 0):
            raise InvalidArgumentException("Can't weight a pixel against itself")
        with np.errstate(over='ignore'):
            return 1.0 / (distance ** self.z + self.epsilon)

    def __repr__(self):
        return f"DefaultWeight(z={self.z}, epsilon={self.epsilon})"


def make_default_weight(z=DEFAULT_Z, epsilon=DEFAULT_EPSILON) -> DefaultWeight:
    return DefaultWeight(z=z, epsilon=epsilon)
