"""
config.py
Load configuration from TOML (Python 3.11+ tomllib).
Search order:
  1) explicit --config path (must exist)
  2) /etc/tm-mnt.toml
  3) built-in defaults (every key is optional)
"""

from __future__ import annotations
import tomllib
from pathlib import Path
from typing import Any, Dict
from .types import Config

DEFAULT_CONFIG_PATH = "/etc/tm-mnt.toml"
PREFERENCES_PATH = "/Library/Preferences/com.apple.TimeMachine.plist"
REQUIRED_TOOLS = ["plutil", "tmutil", "mount_smbfs", "hdiutil", "mount_apfs", "mount"]
ATTACH_FLAGS = ["-debug", "-readonly", "-noautofsck", "-nobrowse"]


def _gv(d: Dict[str, Any], path: list[str], default=None):
    cur = d
    for k in path:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def _load_toml(path: Path) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def find_config(path_arg: str | None) -> Path | None:
    """Pick the config path based on CLI arg and availability; None means defaults."""
    if path_arg:
        p = Path(path_arg)
        if not p.exists():
            raise FileNotFoundError(f"Specified config file does not exist: {path_arg}")
        return p
    p = Path(DEFAULT_CONFIG_PATH)
    return p if p.exists() else None


def config_from_dict(cfg: Dict[str, Any]) -> Config:
    def gv(keys, default=None):
        return _gv(cfg, keys, default)

    volumes_root = Path(gv(["volumes", "root"], "/Volumes"))
    snapshot_root = gv(["volumes", "snapshot_root"])
    return Config(
        preferences_path=Path(gv(["preferences", "path"], PREFERENCES_PATH)),
        volumes_root=volumes_root,
        snapshot_root=Path(snapshot_root) if snapshot_root else volumes_root / ".timemachine",
        share_mount_options=gv(["share", "mount_options"], "ro,nobrowse"),
        poll_interval_sec=float(gv(["share", "poll_interval_sec"], 1.0)),
        poll_max_attempts=int(gv(["share", "poll_max_attempts"], 0)),
        attach_flags=list(gv(["image", "attach_flags"], ATTACH_FLAGS)),
        snapshot_mount_options=gv(["snapshots", "mount_options"], "ro,nobrowse"),
        snapshot_prefix=gv(["snapshots", "name_prefix"], "com.apple.TimeMachine."),
        required_tools=list(gv(["tools", "required"], REQUIRED_TOOLS)),
    )


def load_config(path: Path | None) -> Config:
    return config_from_dict(_load_toml(path) if path else {})
