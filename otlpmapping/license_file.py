"""Generation of the third-party license CSV for the repository's modules."""

from __future__ import annotations

import argparse
import csv
import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from otlpmapping.license_notices import (
    CopyrightOverride,
    find_copyright_notices,
    load_overrides,
)

__all__ = [
    "LICENSES_CSV",
    "OVERRIDE_FILE_PATH",
    "MODULES",
    "Package",
    "parse_wwhrd_output",
    "find_dependencies_of",
    "write_licenses_csv",
    "main",
]

LICENSES_CSV = "LICENSE-3rdparty.csv"
OVERRIDE_FILE_PATH = ".copyright-overrides.yml"

MODULES = (
    "pkg/quantile",
    "pkg/otlp/attributes",
    "pkg/otlp/metrics",
    "pkg/internal/sketchtest",
    "pkg/inframetadata",
)

_HEADER = ("Component", "Origin", "License", "Copyright")
_FOUND_LICENSE = 'msg="Found License"'

_LOGGER = logging.getLogger(__name__)


@dataclass
class Package:
    """A third-party dependency of a module."""

    component: str = ""
    origin: str = ""
    license: str = ""
    copyright_notices: List[str] = field(default_factory=list)

    def record(self) -> List[str]:
        """The CSV row for this dependency."""
        return [
            self.component,
            self.origin,
            self.license,
            " | ".join(self.copyright_notices),
        ]


def parse_wwhrd_output(
    output: str,
    module: str,
    overrides: Optional[CopyrightOverride] = None,
    vendor_dir: str = "vendor",
) -> List[Package]:
    """Packages reported by 'wwhrd list', sorted by origin.

    Raises LookupError when a package has no copyright notice.
    """
    packages: List[Package] = []
    for line in output.splitlines():
        index = line.find(_FOUND_LICENSE)
        if index == -1:
            continue
        pkg = Package(component=module)
        for part in line[index + len(_FOUND_LICENSE):].split(" "):
            if part.startswith("license="):
                pkg.license = part[len("license="):]
            elif part.startswith("package="):
                pkg.origin = part[len("package="):]
        pkg.copyright_notices = find_copyright_notices(pkg.origin, overrides, vendor_dir)
        if not pkg.copyright_notices:
            raise LookupError(f'could not find copyright notice for "{pkg.origin}"')
        packages.append(pkg)
    packages.sort(key=lambda p: p.origin)
    return packages


def _run(args: Sequence[str], cwd: str) -> subprocess.CompletedProcess:
    command = " ".join(args[:2])
    try:
        return subprocess.run(
            list(args), cwd=cwd, capture_output=True, text=True, check=True
        )
    except (OSError, subprocess.CalledProcessError) as err:
        raise RuntimeError(f"failed to run '{command}': {err}") from err


def find_dependencies_of(
    module: str, overrides: Optional[CopyrightOverride] = None
) -> List[Package]:
    """Dependencies of a module given by its folder path.

    Vendors the module's dependencies, lists their licenses with wwhrd and
    removes the vendored copy afterwards.
    """
    if not os.path.isdir(module):
        raise FileNotFoundError(f'failed to change directory to "{module}"')
    vendor_dir = os.path.join(module, "vendor")
    _run(["go", "mod", "vendor"], module)
    try:
        result = _run(["wwhrd", "list", "--no-color"], module)
        return parse_wwhrd_output(result.stderr or "", module, overrides, vendor_dir)
    finally:
        if os.path.exists(vendor_dir):
            shutil.rmtree(vendor_dir)


def write_licenses_csv(path: str, packages: Iterable[Package]) -> None:
    """Write the license CSV: a header row, then one row per package."""
    with open(path, "w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle, lineterminator="\n")
        writer.writerow(_HEADER)
        for package in packages:
            writer.writerow(package.record())


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Generate the third-party license CSV; return the exit status."""
    parser = argparse.ArgumentParser(
        description="Generate the third-party license file."
    )
    parser.add_argument("--output", default=LICENSES_CSV)
    parser.add_argument("--overrides", default=OVERRIDE_FILE_PATH)
    parser.add_argument("modules", nargs="*", default=list(MODULES))
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    try:
        overrides = load_overrides(args.overrides)
    except (OSError, ValueError) as err:
        _LOGGER.error("Failed to load overrides: %s", err)
        return 1

    packages: List[Package] = []
    try:
        for module in args.modules:
            packages.extend(find_dependencies_of(module, overrides))
    except (OSError, RuntimeError, LookupError, ValueError) as err:
        _LOGGER.error("%s", err)
        return 1

    try:
        write_licenses_csv(args.output, packages)
    except OSError as err:
        _LOGGER.error("Failed to write %r: %s", args.output, err)
        return 1
    return 0