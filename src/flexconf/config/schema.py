"""Driver configuration model.

Mirrors the driver's TOML file:

    backend = "Windows WASAPI"
    bufferSizeSamples = 480

    [input]
    device = "Microphone (Realtek(R) Audio)"
    suggestedLatencySeconds = 0.01
    wasapiExclusiveMode = true

    [output]
    device = "Speakers (Realtek(R) Audio)"
    channels = 2

Every field is optional; an absent section is ``None``.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

DEFAULT_BACKEND = "Windows WASAPI"

# attribute name -> key used in the driver file
IO_KEYS = {
    "device": "device",
    "suggested_latency_seconds": "suggestedLatencySeconds",
    "wasapi_exclusive_mode": "wasapiExclusiveMode",
    "wasapi_auto_convert": "wasapiAutoConvert",
    "channels": "channels",
}
CONFIG_KEYS = {
    "backend": "backend",
    "buffer_size_samples": "bufferSizeSamples",
    "input": "input",
    "output": "output",
}

# Latency is written with one decimal place
LATENCY_DECIMALS = 1


@dataclass
class IOSettings:
    """Settings of one stream direction."""
    device: Optional[str] = None
    suggested_latency_seconds: Optional[float] = None
    wasapi_exclusive_mode: Optional[bool] = None
    wasapi_auto_convert: Optional[bool] = None
    channels: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in IO_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["IOSettings"]:
        if data is None:
            return None
        return cls(**{attr: data.get(key) for attr, key in IO_KEYS.items()})


@dataclass
class FlexConfig:
    """Complete driver configuration."""
    backend: Optional[str] = None
    buffer_size_samples: Optional[int] = None
    input: Optional[IOSettings] = field(default_factory=IOSettings)
    output: Optional[IOSettings] = field(default_factory=IOSettings)

    def to_dict(self) -> dict[str, Any]:
        """Dict keyed like the driver file; absent sections map to None."""
        return {
            "backend": self.backend,
            "bufferSizeSamples": self.buffer_size_samples,
            "input": self.input.to_dict() if self.input is not None else None,
            "output": self.output.to_dict() if self.output is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlexConfig":
        """Build from a driver-file dict. Unknown keys are ignored."""
        return cls(
            backend=data.get("backend"),
            buffer_size_samples=data.get("bufferSizeSamples"),
            input=IOSettings.from_dict(data.get("input")),
            output=IOSettings.from_dict(data.get("output")),
        )

    @classmethod
    def default(cls) -> "FlexConfig":
        """Configuration written when the driver file does not exist yet."""
        return cls(
            backend=DEFAULT_BACKEND,
            input=IOSettings(device=""),
            output=IOSettings(device=""),
        )


def _round_latency(settings: Optional[IOSettings]) -> Optional[IOSettings]:
    if settings is None or settings.suggested_latency_seconds is None:
        return settings
    return replace(
        settings,
        suggested_latency_seconds=round(settings.suggested_latency_seconds, LATENCY_DECIMALS),
    )


def normalize_config(config: FlexConfig) -> FlexConfig:
    """Copy of ``config`` with latencies rounded the way they are saved."""
    return replace(
        config,
        input=_round_latency(config.input),
        output=_round_latency(config.output),
    )
