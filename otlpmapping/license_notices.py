"""Discovery of copyright notices for vendored dependencies."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Pattern

import yaml

__all__ = [
    "COPYRIGHT_LOCATIONS",
    "AUTHOR_LOCATIONS",
    "CopyrightOverride",
    "load_overrides",
    "map_lines",
    "get_copyright_notice",
    "get_authors",
    "find_copyright_notices",
]

COPYRIGHT_LOCATIONS = (
    "LICENSE",
    "license.md",
    "LICENSE.md",
    "LICENSE.txt",
    "License.txt",
    "COPYING",
    "NOTICE",
    "README",
    "README.md",
    "README.mdown",
    "README.markdown",
    "COPYRIGHT",
    "COPYRIGHT.txt",
)

AUTHOR_LOCATIONS = (
    "AUTHORS",
    "AUTHORS.md",
    "CONTRIBUTORS",
)

# Whitespace as understood by the notice patterns (no vertical tab).
_WS = r"[\t\n\f\r ]"

_COPYRIGHT_HEADER = re.compile(
    rf"(?i)copyright{_WS}+(?:©|\(c\){_WS}+)?(?:(?:[0-9 ,-]|present)+{_WS}+)?(?:by{_WS}+)?(.*)"
)

_COPYRIGHT_IGNORE = (
    re.compile(r"(?i)copyright(:? and license)?$"),
    re.compile(r"(?i)copyright (:?holder|owner|notice|license|statement)"),
    re.compile(r"Copyright & License -"),
    re.compile(r"(?i)copyright .yyyy. .name of copyright owner."),
)


def _bad_pattern(pattern: str) -> ValueError:
    return ValueError(f"syntax error in pattern: {pattern!r}")


def _class_char(pattern: str, i: int) -> tuple:
    if i >= len(pattern) or pattern[i] in "-]":
        raise _bad_pattern(pattern)
    if pattern[i] == "\\":
        i += 1
        if i >= len(pattern):
            raise _bad_pattern(pattern)
    return pattern[i], i + 1


def _compile_glob(pattern: str) -> Pattern[str]:
    """Compile a shell file name pattern; '*' and '?' do not match '/'."""
    out: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        char = pattern[i]
        if char == "*":
            out.append("[^/]*")
            i += 1
        elif char == "?":
            out.append("[^/]")
            i += 1
        elif char == "\\":
            if i + 1 >= n:
                raise _bad_pattern(pattern)
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif char == "[":
            i += 1
            negated = i < n and pattern[i] == "^"
            if negated:
                i += 1
            items: List[str] = []
            while True:
                if i >= n:
                    raise _bad_pattern(pattern)
                if pattern[i] == "]" and items:
                    i += 1
                    break
                lo, i = _class_char(pattern, i)
                if i < n and pattern[i] == "-":
                    hi, i = _class_char(pattern, i + 1)
                    if hi < lo:
                        raise _bad_pattern(pattern)
                    items.append(f"{re.escape(lo)}-{re.escape(hi)}")
                else:
                    items.append(re.escape(lo))
            out.append("[" + ("^" if negated else "") + "".join(items) + "]")
        else:
            out.append(re.escape(char))
            i += 1
    return re.compile("".join(out), re.DOTALL)


@dataclass
class CopyrightOverride:
    """Copyright notices fixed by hand for dependencies matching a pattern."""

    dependencies: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._compiled = [
            (_compile_glob(pattern), notice)
            for pattern, notice in self.dependencies.items()
        ]

    def copyright_notice(self, dependency: str) -> Optional[List[str]]:
        """The overriding notice for a dependency, or None if none applies."""
        for regex, notice in self._compiled:
            if regex.fullmatch(dependency):
                return [notice]
        return None


def load_overrides(path: str) -> CopyrightOverride:
    """Load overrides from a YAML mapping of dependency patterns to notices."""
    with open(path, encoding="utf-8") as handle:
        text = handle.read()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise ValueError(f"failed to unmarshal {path!r}: {err}") from err
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"failed to unmarshal {path!r}: expected a mapping")
    dependencies: Dict[str, str] = {}
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            raise ValueError(
                f"failed to unmarshal {path!r}: value for {key!r} is not a string"
            )
        dependencies[str(key)] = "" if value is None else str(value)
    return CopyrightOverride(dependencies)


def map_lines(full_path: str, fn: Callable[[str], Optional[str]]) -> List[str]:
    """Map the lines of a file, dropping lines for which fn returns None.

    A missing file yields an empty list.
    """
    try:
        with open(full_path, encoding="utf-8", errors="replace") as handle:
            content = handle.read()
    except FileNotFoundError:
        return []
    notices: List[str] = []
    for line in content.splitlines():
        mapped = fn(line)
        if mapped is not None:
            notices.append(mapped)
    return notices


def get_copyright_notice(line: str) -> Optional[str]:
    """The copyright notice on a line of a LICENSE-like file, or None."""
    match = _COPYRIGHT_HEADER.search(line)
    if match is None:
        return None
    notice = match.group(0)
    if any(regex.search(notice) for regex in _COPYRIGHT_IGNORE):
        return None
    return notice.strip().removesuffix(".")


def get_authors(line: str) -> Optional[str]:
    """The author on a line of an AUTHORS-like file, or None."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    return line


def find_copyright_notices(
    origin: str,
    overrides: Optional[CopyrightOverride] = None,
    vendor_dir: str = "vendor",
) -> List[str]:
    """Copyright notices of a dependency given by its full path.

    Notices of parent paths come first; an override replaces the search.
    """
    if overrides is not None:
        notice = overrides.copyright_notice(origin)
        if notice is not None:
            return notice

    headers: List[str] = []
    if "/" in origin:
        headers.extend(
            find_copyright_notices(origin[: origin.rindex("/")], overrides, vendor_dir)
        )

    pkg_dir = os.path.join(vendor_dir, origin)
    for filename in COPYRIGHT_LOCATIONS:
        headers.extend(map_lines(os.path.join(pkg_dir, filename), get_copyright_notice))
    for filename in AUTHOR_LOCATIONS:
        headers.extend(map_lines(os.path.join(pkg_dir, filename), get_authors))
    return headers