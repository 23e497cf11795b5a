import os
import logging
import numpy as np
import torch
from HF.config import (
    MISSING_VALUE, DEFAULT_EPSILON, DEFAULT_Z, DEFAULT_CONNECTIVITY,
    DEFAULT_METHOD, DEFAULT_ON_DEGENERATE, DEFAULT_SAVE_DIR, DEFAULT_HOLE_SIZE,
)
from HF.hole_detection import find_missing_pixel, calculate_hole
from HF.exceptions import InvalidArgumentException
from HF.hole_filling import fill_hole, DegeneratePolicy, FillResult
from HF.hole_generation import HoleGenerator
from HF.torch_filler import BoundaryHoleFiller
from HF.weighting import make_default_weight
from HF.utils import *


def setup_logger(save_dir, filename='log.txt'):
    logging.basicConfig(
        filename=os.path.join(save_dir, filename),
        filemode='w',
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        force=True,
    )
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    logging.getLogger('').addHandler(console)


def make_holed_image(image, hole='none', hole_size=DEFAULT_HOLE_SIZE, seed=None,
                     missing_value=MISSING_VALUE):
    """
    Carve a synthetic hole in the middle of a copy of the image : 'none', 'square' or 'random'.
    """
    if hole == 'none':
        return image
    H, W = image.shape
    generator = HoleGenerator(missing_value=missing_value, seed=seed)
    if hole == 'square':
        size = max(1, min(hole_size, H - 2, W - 2))
        return generator.square_hole(image, (H - size) // 2, (W - size) // 2, size)
    elif hole == 'random':
        return generator.random_hole(image, min(hole_size * hole_size, H * W), start=(H // 2, W // 2))
    raise ValueError(f"Unknown synthetic hole {hole!r}")


def check_options(method, on_degenerate, device):
    """
    Reject method / policy / device combinations that can't be honoured, before any work starts.
    """
    policy = DegeneratePolicy.from_value(on_degenerate)
    if method == 'boundary' and policy is DegeneratePolicy.BOUNDARY:
        raise InvalidArgumentException("on_degenerate='boundary' only applies to the neighbours method")
    if device != 'numpy':
        if method != 'boundary':
            raise InvalidArgumentException(f"device={device!r} only runs the boundary method")
        if policy is not DegeneratePolicy.RAISE:
            raise InvalidArgumentException(f"device={device!r} only supports on_degenerate='raise'")


def fill_with_torch(image, hole, z, epsilon, device):
    filler = BoundaryHoleFiller(hole, z=z, epsilon=epsilon).to(device)
    with torch.no_grad():
        filled = filler(torch.from_numpy(np.asarray(image, dtype=np.float64)).to(device))
    return FillResult(filled.cpu().numpy(), hole.interior, ())


def inference(
    image_path='./data/image.png',
    save_dir=DEFAULT_SAVE_DIR,
    epsilon=DEFAULT_EPSILON,
    z=DEFAULT_Z,
    connectivity=DEFAULT_CONNECTIVITY,
    method=DEFAULT_METHOD,
    on_degenerate=DEFAULT_ON_DEGENERATE,
    mask_path=None,
    hole='none',
    hole_size=DEFAULT_HOLE_SIZE,
    seed=None,
    device='numpy',
):
    """
    Load an image, find its hole, fill it and save the results.

    Args:
        image_path (str): grayscale image, missing pixels come from mask_path or hole
        save_dir (str): output directory
        epsilon (float): weighting epsilon
        z (float): weighting exponent
        connectivity (int): 4 or 8
        method (str): 'boundary' or 'neighbours'
        on_degenerate (str): 'raise', 'skip' or 'boundary'
        mask_path (str, optional): mask image, non-zero pixels are missing
        hole (str): synthetic hole to carve, 'none', 'square' or 'random'
        hole_size (int): synthetic hole size
        seed (int, optional): random seed for the synthetic hole
        device (str): 'numpy' for the numpy filler, or 'auto', 'cpu', 'cuda' for the torch filler

    Returns:
        FillResult: filled image and filled/unfilled pixels
    """
    check_options(method, on_degenerate, device)

    # save_dir setting
    os.makedirs(save_dir, exist_ok=True)

    # logger setting
    setup_logger(save_dir)
    logging.info(f"[Hyperparameters] epsilon={epsilon}, z={z}, connectivity={connectivity}, "
                 f"method={method}, on_degenerate={on_degenerate}, hole={hole}, hole_size={hole_size}")

    # load
    image = load_grayscale_image(image_path)  # (H, W)
    if mask_path is not None:
        image = apply_mask(image, load_mask(mask_path))
    image = make_holed_image(image, hole=hole, hole_size=hole_size, seed=seed)
    logging.info(f"[Image] {image_path} with shape {image.shape}")
    save_grayscale_image(image, os.path.join(save_dir, "image_holed.png"))

    # hole detection
    missing_pixel = find_missing_pixel(image)
    hole_found = calculate_hole(image, missing_pixel, connectivity=connectivity)
    logging.info(f"[Hole] first missing pixel {missing_pixel}, "
                 f"{len(hole_found.interior)} hole pixels, {len(hole_found.boundary)} boundary pixels")
    save_hole_image(image, hole_found, os.path.join(save_dir, "hole.png"))

    # hole filling
    if device != 'numpy':
        if device == 'auto':
            device = 'cuda' if torch.cuda.is_available() else 'cpu'
        logging.info(f"[Device] {device}")
        result = fill_with_torch(image, hole_found, z=z, epsilon=epsilon, device=torch.device(device))
    else:
        weight = make_default_weight(z=z, epsilon=epsilon)
        result = fill_hole(image, hole_found, weight, method=method,
                           on_degenerate=on_degenerate, progress=True)
    logging.info(f"[Filling] {len(result.filled)} pixels filled, {len(result.unfilled)} left missing")

    # save results
    save_grayscale_image(result.image, os.path.join(save_dir, "image_filled.png"))
    np.save(os.path.join(save_dir, "image_filled.npy"), result.image)
    logging.info(f"[END] Results saved into {save_dir}")

    return result
