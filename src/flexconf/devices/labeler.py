"""Device labeling: raw driver device strings to sorted, indexed entries.

Drivers report devices as single strings whose shape depends on the host
API that produced them:

    MME:        "Microphone (Realtek High Defini"      (truncated to 31 chars)
    Bluetooth:  "Headset (@System32\\drivers\\bthhfenum.sys,#2;%1 Hands-Free%0\\r\\n;(WH-1000XM4))"
    WASAPI:     "Speakers (Realtek(R) Audio)"
    Loopback:   "Speakers (Realtek(R) Audio) [Loopback]"

Each string becomes a DeviceEntry with a short display label and the
hardware token, then the list is sorted for display and indexed.
"""
import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from typing import Iterable

from pyuca import Collator

from ..utils.logging_config import timed_section_sync

logger = logging.getLogger(__name__)

MME_BACKEND = "MME"
BLUETOOTH_MARKER = "bthhfenum.sys"
BLUETOOTH_DEVICE = "Bluetooth"
LOOPBACK_PREFIX = "[Loopback]"

# Friendly name sits in the first ";(...)" group of a hands-free profile string
BLUETOOTH_NAME_RE = re.compile(r";\((.*?)\)")


class Direction(str, Enum):
    """Which side of the driver a device list belongs to."""
    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class DeviceEntry:
    """One selectable row of a device list."""
    name: str     # raw driver string, used as the identity key
    label: str    # what the user sees
    device: str   # hardware/category token, may be empty
    value: int = -1


NONE_ENTRY = DeviceEntry(name="", label="None", device="", value=-1)


@dataclass(frozen=True)
class DeviceLists:
    """Labeled input and output lists for one backend."""
    backend: str
    inputs: list[DeviceEntry]
    outputs: list[DeviceEntry]

    def for_direction(self, direction: Direction) -> list[DeviceEntry]:
        return self.inputs if direction == Direction.INPUT else self.outputs


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loading the collation table is slow; share one instance
    return Collator()


def _verbatim(name: str) -> DeviceEntry:
    return DeviceEntry(name=name, label=name, device="")


def _split_mme(name: str) -> DeviceEntry | None:
    """'Microphone (Realtek High Defini' -> label 'Microphone', device 'Realtek High Defini'."""
    parts = name.split("(")
    if len(parts) < 2:
        return None
    label = parts[0].strip()
    device = parts[1].replace(")", "").strip()
    return DeviceEntry(name=name, label=label, device=device)


def _split_bluetooth(name: str) -> DeviceEntry | None:
    match = BLUETOOTH_NAME_RE.search(name)
    if not match:
        return None
    return DeviceEntry(name=name, label=match.group(1).strip(), device=BLUETOOTH_DEVICE)


def _trailing_annotation(text: str) -> tuple[str, str | None]:
    """Strip a trailing '[...]' annotation, returning (rest, annotation)."""
    stripped = text.rstrip()
    if not stripped.endswith("]"):
        return stripped, None
    start = stripped.rfind("[")
    if start == -1:
        return stripped, None
    return stripped[:start].rstrip(), stripped[start + 1:-1].strip()


def find_last_group(text: str) -> tuple[int, int] | None:
    """
    Locate the parenthesized group that closes ``text``.

    Scans from the right keeping a depth counter, so a group such as
    "(Realtek(R) Audio)" is returned whole rather than stopping at "(R)".

    Returns:
        (open_index, close_index) or None if ``text`` does not end with a
        balanced group
    """
    if not text.endswith(")"):
        return None

    depth = 0
    for index in range(len(text) - 1, -1, -1):
        ch = text[index]
        if ch == ")":
            depth += 1
        elif ch == "(":
            depth -= 1
            if depth == 0:
                return index, len(text) - 1
    return None


def _split_general(name: str) -> DeviceEntry | None:
    rest, annotation = _trailing_annotation(name)

    group = find_last_group(rest)
    if group is None:
        return None
    open_index, close_index = group

    base = rest[:open_index].strip()
    device = rest[open_index + 1:close_index].strip()

    label = f"[{annotation}] {base}" if annotation else base
    return DeviceEntry(name=name, label=label, device=device)


def extract_entry(name: str, backend: str) -> DeviceEntry:
    """
    Derive label and device token from one raw device string.

    Rules, first match wins:
    1. MME backend: split at the first "("
    2. Bluetooth hands-free driver string: friendly name from ";(...)"
    3. Otherwise: the group closing the string is the device, the text
       before it the label, and a trailing "[...]" becomes a label prefix

    Anything that matches none of these is shown verbatim.
    """
    entry = None
    if backend == MME_BACKEND:
        entry = _split_mme(name)
    elif BLUETOOTH_MARKER in name:
        entry = _split_bluetooth(name)
    else:
        entry = _split_general(name)

    if entry is None:
        logger.debug(f"No pattern matched device string, showing as-is: {name!r}")
        return _verbatim(name)
    return entry


def sort_key(entry: DeviceEntry) -> tuple:
    """Non-loopback devices first, then by collated label."""
    return (entry.label.startswith(LOOPBACK_PREFIX), _collator().sort_key(entry.label))


def sort_entries(entries: Iterable[DeviceEntry]) -> list[DeviceEntry]:
    """Sort entries for display and assign ``value`` by position."""
    ordered = sorted(entries, key=sort_key)
    return [replace(entry, value=index) for index, entry in enumerate(ordered)]


def label_devices(
    raw_devices: Iterable[str],
    backend: str,
    direction: Direction = Direction.INPUT,
) -> list[DeviceEntry]:
    """
    Turn raw device strings into a display list.

    Args:
        raw_devices: Device strings as reported by the driver
        backend: Backend the strings came from (e.g. "MME", "Windows WASAPI")
        direction: Input or output; the rules are the same for both

    Returns:
        The "None" row followed by one entry per raw string, sorted, with
        ``value`` 0..N-1
    """
    entries = [extract_entry(name, backend) for name in raw_devices]
    with timed_section_sync("sort_devices", subject=backend, count=len(entries)):
        result = [NONE_ENTRY] + sort_entries(entries)
    logger.debug(f"Labeled {len(entries)} {Direction(direction).value} device(s) for {backend}")
    return result


def label_device_lists(
    input_raw: Iterable[str],
    output_raw: Iterable[str],
    backend: str,
) -> DeviceLists:
    """Label the input and output lists of one enumeration."""
    return DeviceLists(
        backend=backend,
        inputs=label_devices(input_raw, backend, Direction.INPUT),
        outputs=label_devices(output_raw, backend, Direction.OUTPUT),
    )
