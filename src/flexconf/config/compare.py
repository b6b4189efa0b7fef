"""Compare an edited configuration against the saved one.

``configs_equal`` answers "is there anything to save?". ``diff_configs``
says what changed, for logging and the command line.
"""
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from .schema import FlexConfig

ConfigLike = Union[FlexConfig, Mapping[str, Any]]

SCALAR_KEYS = ("backend", "bufferSizeSamples")
SECTION_KEYS = ("input", "output")

_MISSING = object()


def _as_dict(config: ConfigLike) -> Mapping[str, Any]:
    if isinstance(config, FlexConfig):
        return config.to_dict()
    return config


def _scalar_equal(a: Any, b: Any) -> bool:
    # True == 1 in Python; a flag and a number are never the same setting
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


def deep_equal(a: Any, b: Any) -> bool:
    """
    Structural equality of nested records.

    Two mappings are equal when they have the same keys and every value is
    deep-equal. Anything else is compared by value.
    """
    if isinstance(a, Mapping) or isinstance(b, Mapping):
        if not (isinstance(a, Mapping) and isinstance(b, Mapping)):
            return False
        if set(a.keys()) != set(b.keys()):
            return False
        return all(deep_equal(a[key], b[key]) for key in a)

    return _scalar_equal(a, b)


def configs_equal(current: Optional[ConfigLike], original: Optional[ConfigLike]) -> bool:
    """
    Whether the edited config matches the saved one.

    A config that was never loaded (``original`` is None) always counts as
    changed, as does a missing ``current``.
    """
    if original is None or current is None:
        return False

    cur = _as_dict(current)
    orig = _as_dict(original)

    for key in SCALAR_KEYS:
        if not _scalar_equal(cur.get(key), orig.get(key)):
            return False

    for key in SECTION_KEYS:
        if not deep_equal(cur.get(key), orig.get(key)):
            return False

    return True


@dataclass
class ConfigDiff:
    """Differences between an edited and a saved configuration."""
    changes: list[dict] = field(default_factory=list)

    def add_change(self, path: str, original: Any, current: Any) -> None:
        self.changes.append({
            "path": path,  # "backend", "input.channels", ...
            "original": original,
            "current": current,
        })

    def has_changes(self) -> bool:
        return len(self.changes) > 0

    @property
    def paths(self) -> list[str]:
        return [change["path"] for change in self.changes]

    def to_text(self) -> str:
        if not self.changes:
            return "No changes detected"

        lines = ["Configuration changes:"]
        for change in self.changes:
            original = change["original"]
            current = change["current"]
            if original is _MISSING:
                lines.append(f"  + {change['path']}: {current!r}")
            elif current is _MISSING:
                lines.append(f"  - {change['path']}: {original!r}")
            else:
                lines.append(f"  ~ {change['path']}: {original!r} -> {current!r}")
        return "\n".join(lines)


def _diff_values(diff: ConfigDiff, path: str, current: Any, original: Any) -> None:
    if isinstance(current, Mapping) and isinstance(original, Mapping):
        for key in original:
            if key not in current:
                diff.add_change(f"{path}.{key}", original[key], _MISSING)
        for key in current:
            sub_path = f"{path}.{key}"
            if key not in original:
                diff.add_change(sub_path, _MISSING, current[key])
            else:
                _diff_values(diff, sub_path, current[key], original[key])
        return

    if not deep_equal(current, original):
        diff.add_change(path, original, current)


def diff_configs(current: Optional[ConfigLike], original: Optional[ConfigLike]) -> ConfigDiff:
    """List every field that differs between ``current`` and ``original``.

    A missing side is treated as an empty config, so every set field of the
    other side is reported.
    """
    cur = _as_dict(current) if current is not None else {}
    orig = _as_dict(original) if original is not None else {}

    diff = ConfigDiff()
    for key in SCALAR_KEYS + SECTION_KEYS:
        _diff_values(diff, key, cur.get(key), orig.get(key))
    return diff
