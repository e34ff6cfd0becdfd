"""
mounter.py
Read-only mount recipes for the three layers of a network Time Machine backup:
  SMB share (mount_smbfs) -> sparse bundle (hdiutil attach) -> APFS snapshots (mount_apfs)
plus the wait for the share directory to become visible.

Every recipe returns a StepResult instead of raising: a failed mount here is
advisory, the orchestrator decides what is fatal.
"""

from __future__ import annotations
import os, time
from pathlib import Path
from typing import Callable, Optional
from .types import Config, MountError, RetryPolicy, StepResult
from .util import run

SPARSEBUNDLE_SUFFIX = ".sparsebundle"


def mount_share(cfg: Config, server: str, share_dir: Path, dry: bool = False) -> StepResult:
    cmd = ["mount_smbfs", "-o", cfg.share_mount_options, server, str(share_dir)]
    rc, _ = run(cmd, quiet=True, dry=dry)
    # non-zero usually means the share is already mounted
    return StepResult("mount_share", server, rc == 0, detail=None if rc == 0 else f"rc={rc}")


def wait_for_dir(
    path: Path,
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    exists: Callable[[Path], bool] = os.path.isdir,
) -> int:
    """
    Poll until `path` is a directory; return the number of sleeps taken.
    With policy.max_attempts None this never gives up on its own.
    """
    attempts = 0
    while not exists(path):
        if policy.max_attempts is not None and attempts >= policy.max_attempts:
            raise MountError(f"Timed out waiting for {path} to appear")
        sleep(policy.interval_sec)
        attempts += 1
    return attempts


def find_sparsebundle(root: Path) -> Optional[Path]:
    """
    First directory below root named *.sparsebundle (any case), shallowest
    level first, names sorted. Bundles are never descended into.
    """
    for cur, dirnames, _ in os.walk(root):
        dirnames.sort()
        for d in dirnames:
            if d.lower().endswith(SPARSEBUNDLE_SUFFIX):
                return Path(cur) / d
    return None


def attach_image(cfg: Config, bundle: Optional[Path], dry: bool = False) -> StepResult:
    if bundle is None:
        return StepResult("attach_image", "", False, detail="no sparse bundle found")
    rc, _ = run(["hdiutil", "attach", *cfg.attach_flags, str(bundle)], dry=dry)
    return StepResult("attach_image", str(bundle), rc == 0, detail=None if rc == 0 else f"rc={rc}")


def snapshot_label(cfg: Config, snap: str) -> str:
    return f"{cfg.snapshot_prefix}{snap}"


def mount_snapshot(cfg: Config, device: str, snap: str, mp: Path, dry: bool = False) -> StepResult:
    label = snapshot_label(cfg, snap)
    cmd = ["mount_apfs", "-o", cfg.snapshot_mount_options, "-s", label, device, str(mp)]
    rc, _ = run(cmd, quiet=True, dry=dry)
    return StepResult("mount_snapshot", label, rc == 0, detail=None if rc == 0 else f"rc={rc}")
