"""
preflight.py
Precondition gates run before anything touches the system:
- required tools resolvable on PATH
- running on macOS, as root

The evaluate_* functions are pure; the check_*/require_* wrappers read the
live process state and raise MountError.
"""

from __future__ import annotations
import os, platform
from typing import Callable, Iterable, List
from .types import CheckResult, MountError
from .util import which_quiet

PROG = "tm-mnt"


def missing_tools(names: Iterable[str], which: Callable[[str], object] = which_quiet) -> List[str]:
    return [n for n in names if not which(n)]


def require_tools(names: Iterable[str], which: Callable[[str], object] = which_quiet) -> None:
    missing = missing_tools(names, which)
    if missing:
        tool = missing[0]
        raise MountError(
            f"'{tool}' is required to execute '{PROG}'.  "
            f"Please check that '{tool}' is in your path."
        )


def evaluate_platform(system: str, euid: int) -> CheckResult:
    if system != "Darwin":
        return CheckResult(False, "This script requires you run on MacOS")
    if euid != 0:
        return CheckResult(False, "This script requires you run as root")
    return CheckResult(True)


def check_platform() -> None:
    result = evaluate_platform(platform.system(), os.geteuid())
    if not result.ok:
        raise MountError(result.reason)
