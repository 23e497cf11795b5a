import torch
import torch.nn as nn
from HF.config import DEFAULT_EPSILON, DEFAULT_Z
from HF.exceptions import DegenerateWeightException, InvalidArgumentException
from HF.hole import Hole
from HF.pixel import Pixel


class BoundaryHoleFiller(nn.Module):
    def __init__(self, hole: Hole, z=DEFAULT_Z, epsilon=DEFAULT_EPSILON):
        """
        Boundary-wide hole filling with the default weighting, all hole pixels at once.

        Args:
            hole (Hole): hole to fill
            z (float): falloff exponent
            epsilon (float): small positive value keeping the denominator away from zero
        """
        super().__init__()
        if not epsilon > 0:
            raise InvalidArgumentException(f"epsilon should be a positive float, got {epsilon}")
        self.hole = hole
        self.z = float(z)
        self.epsilon = float(epsilon)

        interior = torch.tensor(hole.interior, dtype=torch.long).reshape(-1, 2)
        boundary = torch.tensor(hole.boundary, dtype=torch.long).reshape(-1, 2)
        self.register_buffer('interior', interior)  # (N, 2)
        self.register_buffer('boundary', boundary)  # (M, 2)

        # Precompute weights (N, M), float64 to match the numpy filler
        diff = (interior[:, None, :] - boundary[None, :, :]).double()  # (N, M, 2)
        distance = diff.pow(2).sum(dim=-1).sqrt()
        self.register_buffer('weights', 1.0 / (distance ** self.z + self.epsilon))

    def forward(self, image):
        """
        Args:
            image (torch.Tensor): (H, W) image with missing pixels

        Returns:
            torch.Tensor: filled copy of the image (H, W), float64
        """
        assert image.dim() == 2, "Input must be of shape (H, W)"

        filled = image.clone().double()
        if self.interior.size(0) == 0:
            return filled

        boundary_values = filled[self.boundary[:, 0], self.boundary[:, 1]]  # (M,)
        numerator = self.weights @ boundary_values  # (N,)
        denominator = self.weights.sum(dim=1)       # (N,)

        degenerate = (denominator == 0) | ~torch.isfinite(numerator / denominator)
        if degenerate.any():
            idx = int(torch.nonzero(degenerate)[0])
            raise DegenerateWeightException(Pixel(*self.hole.interior[idx]))

        filled[self.interior[:, 0], self.interior[:, 1]] = numerator / denominator
        return filled
