"""
Compute device detection for the torch matrix backend.

The torch backend runs its kernels on whatever device the configuration
names. This module turns that name into a concrete DeviceInfo, checking
availability up front so a bad configuration fails at backend construction
rather than in the middle of a multiply.
"""

from dataclasses import dataclass
from typing import Literal
import platform
import warnings


@dataclass(frozen=True)
class DeviceInfo:
    """
    Information about a compute device.

    Attributes:
        device_type: Type of device ('cpu', 'cuda', 'mps')
        device_index: Device index (None for CPU)
        name: Human-readable device name
        supports_fp64: Whether float64 kernels can run on the device
    """
    device_type: Literal['cpu', 'cuda', 'mps']
    device_index: int | None
    name: str
    supports_fp64: bool

    def __str__(self) -> str:
        if self.device_type == 'cpu':
            return f"CPU ({self.name})"
        return f"{self.device_type.upper()}:{self.device_index} ({self.name})"

    @property
    def is_gpu(self) -> bool:
        """True if this is a GPU device."""
        return self.device_type in ('cuda', 'mps')

    @property
    def torch_device(self) -> str:
        """Device string accepted by torch.device()."""
        if self.device_type == 'cuda':
            return f"cuda:{self.device_index}"
        return self.device_type


def detect_gpu() -> DeviceInfo | None:
    """
    Detect available GPU, if any.

    Priority: CUDA > MPS (Apple Silicon). Imports torch lazily.

    Returns:
        DeviceInfo for the best available GPU, or None.
    """
    try:
        import torch
    except ImportError:
        return None

    if torch.cuda.is_available():
        idx = torch.cuda.current_device()
        props = torch.cuda.get_device_properties(idx)
        return DeviceInfo(
            device_type='cuda',
            device_index=idx,
            name=props.name,
            supports_fp64=True,
        )

    if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
        return DeviceInfo(
            device_type='mps',
            device_index=0,
            name='Apple Silicon GPU',
            supports_fp64=False,
        )

    return None


def get_cpu_info() -> DeviceInfo:
    """DeviceInfo for the host CPU."""
    processor = platform.processor()
    if not processor:
        processor = platform.machine() or "Unknown CPU"

    return DeviceInfo(
        device_type='cpu',
        device_index=None,
        name=processor,
        supports_fp64=True,
    )


def select_device(prefer: str = 'cpu') -> DeviceInfo:
    """
    Resolve a configured device name.

    Args:
        prefer: 'cpu', 'cuda', 'cuda:N', 'mps', or 'auto'
            - 'auto' uses a GPU when one is available, else CPU
            - an unavailable GPU falls back to CPU with a warning

    Returns:
        DeviceInfo for the selected device

    Raises:
        ValueError: If the device name is not recognized
    """
    if prefer == 'cpu':
        return get_cpu_info()

    if prefer == 'auto':
        gpu = detect_gpu()
        return gpu if gpu is not None else get_cpu_info()

    if prefer == 'mps' or prefer.startswith('cuda'):
        gpu = detect_gpu()
        wanted = 'mps' if prefer == 'mps' else 'cuda'
        if gpu is None or gpu.device_type != wanted:
            warnings.warn(
                f"Torch device {prefer!r} not available, using CPU"
            )
            return get_cpu_info()
        if wanted == 'cuda' and ':' in prefer:
            index = int(prefer.split(':', 1)[1])
            return DeviceInfo(
                device_type='cuda',
                device_index=index,
                name=gpu.name,
                supports_fp64=True,
            )
        return gpu

    raise ValueError(
        f"Unknown torch device: {prefer!r}. Use 'cpu', 'cuda', 'mps' or 'auto'."
    )
