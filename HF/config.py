"""
Hole filling defaults shared by the pipeline and the command line.
"""

# missing samples (valid samples are normalized to [0, 1])
MISSING_VALUE = -1.0

# weighting
DEFAULT_EPSILON = 1e-2
DEFAULT_Z = 2.0

# hole detection
DEFAULT_CONNECTIVITY = 8
VALID_CONNECTIVITY = (4, 8)

# hole filling
DEFAULT_METHOD = 'boundary'
VALID_METHODS = ('boundary', 'neighbours')
DEFAULT_ON_DEGENERATE = 'raise'

# synthetic holes
DEFAULT_HOLE_SIZE = 16

# output
DEFAULT_SAVE_DIR = './output/hole_filling/'
