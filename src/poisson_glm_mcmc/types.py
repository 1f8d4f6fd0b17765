from typing import List, Sequence, Tuple

import numpy as np

Floats = Sequence[float] | List[float] | np.ndarray
Interval = Tuple[float, float]
