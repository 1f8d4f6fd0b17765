from ._math import exp
from ._validation import check_inputs

__all__ = ["exp", "check_inputs"]
