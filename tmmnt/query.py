"""
query.py
Discovery side of the run: everything that only reads system state.
- SystemQuery wraps plutil/tmutil/mount so tests can substitute canned output
- Pure parsers turn that output into server URL, share name, device and UUID

Discovery commands are never dry-run; they do not change anything.
"""

from __future__ import annotations
import os
from pathlib import Path, PurePosixPath
from typing import List
from urllib.parse import unquote_to_bytes, urlsplit
from .util import run

NETWORK_URL_KEY = "NetworkURL"
IMAGE_NAME_KEY = "LocalizedDiskImageVolumeName"


def plist_value(text: str, key: str) -> str:
    """
    Value of the first `"key" => "value"` line of `plutil -p` output.
    `plutil -p` is used instead of a JSON conversion because the Time Machine
    plist carries date and data values that JSON cannot represent.
    """
    for line in text.splitlines():
        if key in line:
            fields = line.split('"')
            return fields[3] if len(fields) > 3 else ""
    return ""


def share_name_from_url(url: str) -> str:
    """
    Last path segment of the URL, still percent-encoded:
    smb://user@host:445/Some%20Share -> Some%20Share
    """
    path = urlsplit(url).path
    return PurePosixPath(path).name if path.strip("/") else ""


def decode_share_name(name: str) -> str:
    """Percent-escapes become raw bytes, then a filesystem name."""
    return os.fsdecode(unquote_to_bytes(name))


def image_mount_lines(table: str, image_name: str) -> List[str]:
    if not image_name:
        return []
    return [line for line in table.splitlines() if image_name in line]


def device_for_image(table: str, image_name: str) -> str:
    """First space-delimited field of the last mount line naming the image."""
    lines = image_mount_lines(table, image_name)
    if not lines:
        return ""
    return lines[-1].split(" ", 1)[0]


def uuid_from_backups(backups: List[str]) -> str:
    """
    Fourth "/" field of the first backup path, e.g.
    /Volumes/.timemachine/<UUID>/2023-01-01-000000.backup/2023-01-01-000000.backup
    """
    if not backups:
        return ""
    fields = backups[0].split("/")
    return fields[3] if len(fields) > 3 else ""


def snapshot_names(backups: List[str]) -> List[str]:
    names = [PurePosixPath(b).name for b in backups]
    return [n for n in names if n]


class SystemQuery:
    """Reads the Time Machine preferences, backup catalog and mount table."""

    def __init__(self, preferences_path: Path):
        self.preferences_path = preferences_path

    def _preferences(self) -> str:
        _, out = run(["plutil", "-p", self.preferences_path], capture=True)
        return out

    def server_url(self) -> str:
        return plist_value(self._preferences(), NETWORK_URL_KEY)

    def image_name(self) -> str:
        return plist_value(self._preferences(), IMAGE_NAME_KEY)

    def list_backups(self) -> List[str]:
        # tmutil writes diagnostics to the same stream; keep only paths
        _, out = run(["tmutil", "listbackups", "/"], capture=True)
        return [line.strip() for line in out.splitlines() if line.strip().startswith("/")]

    def mount_table(self) -> str:
        _, out = run(["mount"], capture=True)
        return out
