"""
util.py
Cross-cutting utilities:
- Process execution (list of args) with dry-run support
- PATH helper (used by preflight.py)
- Directory creation with readable errors
"""

from __future__ import annotations
import shlex, shutil, subprocess
from pathlib import Path


def format_cmd(cmd) -> str:
    return " ".join(shlex.quote(str(c)) for c in cmd)


def run(cmd, capture=False, quiet=False, dry=False):
    """
    Execute a command given as a list of args.
    - capture: return combined stdout/stderr as text
    - quiet: discard stderr of a non-captured command
    Returns (rc, output_str). A command that cannot be started yields rc 127.
    """
    cmd_list = [str(c) for c in cmd]
    if dry:
        print("[dry-run]", format_cmd(cmd_list))
        return 0, ""
    try:
        if capture:
            out = subprocess.check_output(cmd_list, stderr=subprocess.STDOUT)
            return 0, out.decode("utf-8", "replace")
        else:
            rc = subprocess.call(
                cmd_list, stderr=subprocess.DEVNULL if quiet else None
            )
            return rc, ""
    except subprocess.CalledProcessError as e:
        return e.returncode, e.output.decode("utf-8", "replace") if e.output else ""
    except FileNotFoundError:
        return 127, ""


def which_quiet(name: str) -> bool:
    """Check if command exists silently."""
    return bool(shutil.which(name))


def ensure_dir(p: Path, dry: bool = False):
    """Create directory (and parents) if missing, with better error reporting."""
    if p.is_dir():
        return
    if dry:
        print("[dry-run]", format_cmd(["mkdir", "-p", p]))
        return
    try:
        p.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        raise PermissionError(f"Cannot create directory {p} - insufficient permissions")
    except OSError as e:
        raise OSError(f"Cannot create directory {p}: {e}")
