"""Audio device lists: labeling raw driver strings and fetching them."""
from .labeler import (
    Direction,
    DeviceEntry,
    DeviceLists,
    NONE_ENTRY,
    extract_entry,
    find_last_group,
    label_devices,
    label_device_lists,
    sort_entries,
)
from .enumeration import (
    DeviceEnumerator,
    RawDeviceLists,
    RetryPolicy,
    fetch_raw_devices,
    fetch_raw_devices_sync,
    load_devices,
    load_devices_sync,
)

__all__ = [
    "Direction",
    "DeviceEntry",
    "DeviceLists",
    "NONE_ENTRY",
    "extract_entry",
    "find_last_group",
    "label_devices",
    "label_device_lists",
    "sort_entries",
    "DeviceEnumerator",
    "RawDeviceLists",
    "RetryPolicy",
    "fetch_raw_devices",
    "fetch_raw_devices_sync",
    "load_devices",
    "load_devices_sync",
]
