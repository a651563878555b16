"""
Shared compute infrastructure for PyStatGen.

Submodules:
    device: Torch device detection and selection
    timing: Section timers
    tolerances: Singularity threshold and tolerance tiers
"""

from pystatgen.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pystatgen.core.compute.timing import Timer
from pystatgen.core.compute.tolerances import MATRIX_SINGULAR_RCOND

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # Timing
    "Timer",
    # Thresholds
    "MATRIX_SINGULAR_RCOND",
]
