import numpy as np

FIXED_WIDTH_DTYPE = np.int64
FIXED_WIDTH_MAX = int(np.iinfo(FIXED_WIDTH_DTYPE).max)
# Largest table bulk generation will allocate.
MAX_TABLE_ROWS = int(np.iinfo(np.int32).max)
INDEX_DTYPE = np.intp
