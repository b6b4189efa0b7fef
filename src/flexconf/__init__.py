"""flexconf - client-side logic for an audio driver configuration utility.

- devices: turn raw driver device strings into sorted, labeled lists
- config: driver configuration model and change detection
- utils.color: accent color brightness/contrast adjustment
"""
from .config.compare import configs_equal, diff_configs
from .devices.labeler import DeviceEntry, Direction, label_devices
from .utils.color import adjust_brightness

__version__ = "0.1.0"

__all__ = [
    "configs_equal",
    "diff_configs",
    "DeviceEntry",
    "Direction",
    "label_devices",
    "adjust_brightness",
    "__version__",
]
