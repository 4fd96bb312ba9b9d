"""interval_enclosure - 定向舍入区间算术"""

from .errors import (
    IntervalError,
    InvalidRangeError,
    RoundingError,
    UnknownModeError,
    DivisionByZeroError,
)
from .rounding import (
    RoundingMode,
    RoundingController,
    FenvRoundingController,
    SimulatedRoundingController,
    platform_codes,
    create_controller,
    get_controller,
    set_controller,
    use_controller,
)
from .config import IntervalConfig, get_config, configure, reset_config
from .interval_math import Interval, Ordering
from .elementary import sin

__version__ = "0.1.0"

__all__ = [
    "IntervalError",
    "InvalidRangeError",
    "RoundingError",
    "UnknownModeError",
    "DivisionByZeroError",
    "RoundingMode",
    "RoundingController",
    "FenvRoundingController",
    "SimulatedRoundingController",
    "platform_codes",
    "create_controller",
    "get_controller",
    "set_controller",
    "use_controller",
    "IntervalConfig",
    "get_config",
    "configure",
    "reset_config",
    "Interval",
    "Ordering",
    "sin",
]
