import sys
from HF.cli import main
from HF.hole_generation import generate_holes


"""
Hole generation
"""

# generate_holes(
#     IMAGE_PATH='./data/image.png',
#     DEST_DIR='./data/holes/',
#     HOLE_COUNT=10,
#     HOLE_SIZE=16,
#     SQUARE=True,
# )


"""
Hole filling

python main.py <image_path> <epsilon> <z> <connectivity> [--mask MASK] [--method {boundary,neighbours}]
e.g. python main.py ./data/image.png 0.01 2 8 --hole square --hole-size 24
"""

if __name__ == '__main__':
    sys.exit(main())
