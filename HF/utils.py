import os
import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.patches import Patch
from PIL import Image
from HF.config import MISSING_VALUE


"""
load
"""
def load_grayscale_image(image_path):
    """
    Load an image as grayscale, normalized to [0, 1].

    Args:
        image_path (str): path to the image

    Returns:
        np.ndarray: image (H, W), float32
    """
    if not os.path.exists(image_path):
        raise FileNotFoundError(f"Image {image_path} does not exist.")
    image = Image.open(image_path).convert('L')
    return np.array(image, dtype=np.float32) / 255.0

def load_mask(mask_path):
    """
    Load a hole mask : non-zero pixels mark the missing pixels.

    Returns:
        np.ndarray: mask (H, W), bool
    """
    if not os.path.exists(mask_path):
        raise FileNotFoundError(f"Mask {mask_path} does not exist.")
    mask = Image.open(mask_path).convert('L')
    return np.array(mask) > 0

def apply_mask(image, mask, missing_value=MISSING_VALUE):
    """
    Mark the masked pixels of a copy of image as missing.
    """
    mask = np.asarray(mask, dtype=bool)
    if image.shape != mask.shape:
        raise ValueError(f"Mismatch between image {image.shape} and mask {mask.shape}")
    holed = np.array(image, dtype=np.float32, copy=True)
    holed[mask] = missing_value
    return holed

"""
save
"""
def save_grayscale_image(image, save_path, missing_value=MISSING_VALUE):
    """
    Save a [0, 1] image as an 8-bit grayscale PNG. Missing pixels are saved black.

    Args:
        image (np.ndarray): image (H, W)
        save_path (str): path to save the image (.png or .jpg)
    """
    image = np.array(image, dtype=np.float64, copy=True)
    image[image == missing_value] = 0.0
    image = np.clip(image, 0, 1)
    Image.fromarray((image * 255).round().astype(np.uint8)).save(save_path)

def save_hole_image(image, hole, save_path, missing_value=MISSING_VALUE):
    """
    Save the image with the hole interior in red and its boundary in sky blue.

    Args:
        image (np.ndarray): image (H, W)
        hole (Hole): hole traced on image
        save_path (str): path to save the image (.png or .jpg)
    """
    gray = np.array(image, dtype=np.float64, copy=True)
    gray[gray == missing_value] = 0.0
    gray = np.clip(gray, 0, 1)
    H, W = gray.shape

    hole_rgb = np.repeat(gray[:, :, None], 3, axis=2)
    for x, y in hole.interior:
        hole_rgb[x, y] = [1.0, 0.0, 0.0]  # red
    for x, y in hole.boundary:
        hole_rgb[x, y] = [135/255, 206/255, 235/255]  # sky blue

    dpi = 100
    fig, ax = plt.subplots(figsize=(max(W / dpi, 1), max(H / dpi, 1)), dpi=dpi)
    ax.imshow(hole_rgb, interpolation='nearest')
    ax.axis('off')
    legend_elements = [
        Patch(facecolor=(1.0, 0, 0), label=f'Hole ({len(hole.interior)})', edgecolor='gray'),
        Patch(facecolor=(135/255, 206/255, 235/255), label=f'Boundary ({len(hole.boundary)})', edgecolor='gray'),
    ]
    ax.legend(handles=legend_elements, loc='center left', bbox_to_anchor=(1.02, 0.5), frameon=True, fontsize=9)
    plt.tight_layout()
    plt.savefig(save_path)
    plt.close(fig)
