import os
import random
import numpy as np
import matplotlib.pyplot as plt
from tqdm import tqdm
from HF.config import MISSING_VALUE, DEFAULT_HOLE_SIZE
from HF.pixel import Connectivity, Pixel
from HF.utils import load_grayscale_image, save_grayscale_image


def generate_holes(
    ### config
    IMAGE_PATH = './data/image.png',
    DEST_DIR = './data/holes/',
    HOLE_COUNT = 10,
    HOLE_SIZE = DEFAULT_HOLE_SIZE,
    SQUARE = False,
    SEED = None,
):
    """
    Hole Generation : make several holed variations of a single image
    """
    ### file exist validation check
    if not os.path.exists(IMAGE_PATH):
        raise FileNotFoundError(f"Image {IMAGE_PATH} does not exist.")

    ### mkdir & load
    os.makedirs(DEST_DIR, exist_ok=True)
    image = load_grayscale_image(IMAGE_PATH)  # (H,W)

    generator = HoleGenerator(seed=SEED)
    H, W = image.shape
    for idx in tqdm(range(1, HOLE_COUNT+1), desc="Hole Generation..."):
        if SQUARE:
            size = min(HOLE_SIZE, H - 2, W - 2)
            top = generator.rng.randint(1, H - size - 1)
            left = generator.rng.randint(1, W - size - 1)
            holed = generator.square_hole(image, top, left, size)
        else:
            holed = generator.random_hole(image, HOLE_SIZE * HOLE_SIZE)
        generator.save_sample(dest_dir=DEST_DIR, idx=idx, image=image, holed=holed)
    print(f"| Hole Generation -- HOLE_SIZE : {HOLE_SIZE}, SQUARE : {SQUARE}, IMAGE_SIZE : {image.shape}")


class HoleGenerator:
    def __init__(self, missing_value=MISSING_VALUE, seed=None):
        self.missing_value = missing_value
        self.rng = random.Random(seed)

    def square_hole(self, image, top, left, size):
        """
        Mark a size x size square of a copy of the image as missing.

        Args:
            image (np.ndarray): image (H, W)
            top (int): row of the top-left corner
            left (int): column of the top-left corner
            size (int): side of the square

        Returns:
            np.ndarray: holed copy of the image (H, W)
        """
        H, W = image.shape
        if size <= 0:
            raise ValueError(f"Hole size should be positive, got {size}")
        if top < 0 or left < 0 or top + size > H or left + size > W:
            raise ValueError(f"Square hole ({top}, {left}, {size}) is outside of the image {image.shape}")
        holed = np.array(image, dtype=np.float32, copy=True)
        holed[top:top + size, left:left + size] = self.missing_value
        return holed

    def random_hole(self, image, size, start=None):
        """
        Mark a random connected blob of a copy of the image as missing.
        The blob grows from start, one random 4-neighbour of the blob at a time.

        Args:
            image (np.ndarray): image (H, W)
            size (int): number of missing pixels
            start (Pixel, optional): first missing pixel, random if not given

        Returns:
            np.ndarray: holed copy of the image (H, W)
        """
        H, W = image.shape
        if not 0 < size <= H * W:
            raise ValueError(f"Hole size should be in [1, {H * W}], got {size}")
        if start is None:
            start = Pixel(self.rng.randrange(H), self.rng.randrange(W))
        start = Pixel(*start)

        holed = np.array(image, dtype=np.float32, copy=True)
        blob = {start}
        frontier = [start]
        while len(blob) < size:
            current = self.rng.choice(frontier)
            candidates = [n for n in current.neighbours(Connectivity.FOUR, H, W) if n not in blob]
            if not candidates:
                frontier.remove(current)
                continue
            pixel = self.rng.choice(candidates)
            blob.add(pixel)
            frontier.append(pixel)

        for pixel in blob:
            holed[pixel] = self.missing_value
        return holed

    def save_sample(self, dest_dir, idx, image, holed):
        """
        Save a holed sample to dest_dir/000idx/

        Args:
            dest_dir (str): root directory
            idx (int): sample index
            image (np.ndarray): original image (H, W)
            holed (np.ndarray): holed image (H, W)
        """
        sample_dir = os.path.join(dest_dir, f"{idx:04d}")
        os.makedirs(sample_dir, exist_ok=True)

        np.save(os.path.join(sample_dir, "image.npy"), image)
        np.save(os.path.join(sample_dir, "holed.npy"), holed)

        save_grayscale_image(image, os.path.join(sample_dir, "image.png"), missing_value=self.missing_value)
        mask = (holed == self.missing_value).astype(np.float32)
        plt.imsave(os.path.join(sample_dir, "mask.png"), mask, cmap='gray', vmin=0, vmax=1)
