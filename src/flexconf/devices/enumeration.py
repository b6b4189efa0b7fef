"""Boundary around the host-supplied device enumeration.

The host provides ``enumerate_devices(backend) -> (input_names, output_names)``,
either as a plain function or a coroutine function. Whatever it raises turns
into two empty lists so the UI shows "no devices" instead of an error. The
enumerator is called once unless the retry policy allows more attempts.
"""
import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from ..utils.connection import RetryPolicy, retry_with_policy
from ..utils.logging_config import timed
from .labeler import DeviceLists, label_device_lists

logger = logging.getLogger(__name__)

RawDevices = tuple[Sequence[str], Sequence[str]]
DeviceEnumerator = Callable[[str], Union[RawDevices, Awaitable[RawDevices]]]

# The host API reports failures with whatever it has
ENUMERATION_ERRORS = (Exception,)


@dataclass(frozen=True)
class RawDeviceLists:
    """Unlabeled device names from one enumeration."""
    inputs: list[str] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)
    failed: bool = False


def _coerce(result: Any) -> RawDeviceLists:
    inputs, outputs = result
    return RawDeviceLists(inputs=[str(n) for n in inputs], outputs=[str(n) for n in outputs])


def _failure(backend: str, error: Exception) -> RawDeviceLists:
    logger.warning(f"Error getting devices for backend {backend!r}: {error}")
    return RawDeviceLists(failed=True)


@timed("enumerate")
async def fetch_raw_devices(
    enumerate_devices: DeviceEnumerator,
    backend: str,
    policy: Optional[RetryPolicy] = None,
) -> RawDeviceLists:
    """
    Ask the host for the raw device names of ``backend``.

    Args:
        enumerate_devices: Host enumeration callable (sync or async)
        backend: Backend name passed through to the enumerator
        policy: Retry policy, defaults to RetryPolicy()

    Returns:
        RawDeviceLists; both lists empty and ``failed`` set when the
        enumerator could not produce a result
    """
    policy = policy or RetryPolicy()

    @retry_with_policy(policy, ENUMERATION_ERRORS)
    async def _call() -> Any:
        if inspect.iscoroutinefunction(enumerate_devices):
            return await enumerate_devices(backend)
        # Plain enumerators block; keep them off the event loop
        result = await asyncio.to_thread(enumerate_devices, backend)
        if inspect.isawaitable(result):
            result = await result
        return result

    try:
        return _coerce(await _call())
    except Exception as e:
        return _failure(backend, e)


@timed("enumerate_sync")
def fetch_raw_devices_sync(
    enumerate_devices: Callable[[str], RawDevices],
    backend: str,
    policy: Optional[RetryPolicy] = None,
) -> RawDeviceLists:
    """Blocking variant of fetch_raw_devices for synchronous enumerators."""
    policy = policy or RetryPolicy()

    @retry_with_policy(policy, ENUMERATION_ERRORS)
    def _call() -> Any:
        return enumerate_devices(backend)

    try:
        return _coerce(_call())
    except Exception as e:
        return _failure(backend, e)


async def load_devices(
    enumerate_devices: DeviceEnumerator,
    backend: str,
    policy: Optional[RetryPolicy] = None,
) -> DeviceLists:
    """Enumerate ``backend`` and label both lists.

    Labeling happens after the enumeration completes, with no further awaits.
    """
    raw = await fetch_raw_devices(enumerate_devices, backend, policy)
    return label_device_lists(raw.inputs, raw.outputs, backend)


def load_devices_sync(
    enumerate_devices: Callable[[str], RawDevices],
    backend: str,
    policy: Optional[RetryPolicy] = None,
) -> DeviceLists:
    raw = fetch_raw_devices_sync(enumerate_devices, backend, policy)
    return label_device_lists(raw.inputs, raw.outputs, backend)
