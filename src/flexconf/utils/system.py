"""Helpers that interpret values reported by the host system."""

# First Windows 10 build number that is marketed as Windows 11 (Mica backdrop)
WINDOWS_11_FIRST_BUILD = 22000


def is_windows_11(major: int, minor: int, build: int) -> bool:
    """Whether a (major, minor, build) triple is Windows 11 or later."""
    return major > 10 or (major == 10 and build >= WINDOWS_11_FIRST_BUILD)


def _version_parts(version: str) -> list[int]:
    parts = []
    for piece in version.strip().lstrip("vV").split("."):
        digits = ""
        for ch in piece:
            if not ch.isdigit():
                break
            digits += ch
        parts.append(int(digits) if digits else 0)
    return parts


def compare_versions(version1: str, version2: str) -> int:
    """
    Compare two dotted version strings.

    Missing components count as 0 and non-numeric suffixes are ignored,
    so "1.2" == "1.2.0" and "1.3.0-beta" == "1.3.0".

    Returns:
        1 if version1 is newer, -1 if version2 is newer, 0 if equal
    """
    v1 = _version_parts(version1)
    v2 = _version_parts(version2)

    for i in range(max(len(v1), len(v2))):
        a = v1[i] if i < len(v1) else 0
        b = v2[i] if i < len(v2) else 0
        if a > b:
            return 1
        if a < b:
            return -1

    return 0
