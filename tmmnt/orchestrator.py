"""
orchestrator.py
Runs the end-to-end mount sequence, strictly one step after another:
  - platform/privilege check
  - discover server -> mount share -> wait until visible
  - locate and attach the sparse bundle -> verify via the mount table
  - enumerate backups -> derive UUID -> mount every snapshot read-only

Fatal preconditions record a fatal StepResult and raise MountError carrying
the partial report; mount failures that may just mean "already mounted" are
recorded as advisory StepResults and the run goes on.
In a dry run an unattached image is advisory too, so every recipe is printed.
"""

from __future__ import annotations
import time
from pathlib import Path
from typing import Callable, Optional
from .types import FATAL, Config, MountError, MountReport, StepResult
from .preflight import check_platform
from .query import (
    SystemQuery,
    share_name_from_url,
    decode_share_name,
    image_mount_lines,
    device_for_image,
    uuid_from_backups,
    snapshot_names,
)
from .mounter import (
    SPARSEBUNDLE_SUFFIX,
    mount_share,
    wait_for_dir,
    find_sparsebundle,
    attach_image,
    snapshot_label,
    mount_snapshot,
)
from .util import ensure_dir


DRY_RUN_DEVICE = "<image device>"


def _fail(report: MountReport, step: str, target: str, message: str):
    report.steps.append(StepResult(step, target, False, FATAL, message))
    raise MountError(message, report=report)


def _require(report: MountReport, value: str, what: str, target: str = "") -> str:
    if not value:
        _fail(report, f"determine_{what.replace(' ', '_')}", target, f"Could not determine {what}")
    return value


def discover_share(cfg: Config, query: SystemQuery, report: MountReport) -> tuple[str, Path]:
    """Server URL and the local directory its share is mounted on."""
    server = _require(report, query.server_url(), "server")
    mount_source = _require(report, share_name_from_url(server), "mount source", server)
    basename = _require(report, decode_share_name(mount_source), "directory name", server)
    return server, cfg.volumes_root / basename


def mount_timemachine(
    cfg: Config,
    query: Optional[SystemQuery] = None,
    dry: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> MountReport:
    check_platform()
    query = query or SystemQuery(cfg.preferences_path)
    report = MountReport()

    report.server, share_dir = discover_share(cfg, query, report)
    report.share_dir = share_dir
    ensure_dir(share_dir, dry=dry)

    print(f"Connecting to remote Time Machine: {report.server} ...")
    report.steps.append(mount_share(cfg, report.server, share_dir, dry=dry))
    if not dry:
        try:
            wait_for_dir(share_dir, cfg.retry_policy(), sleep=sleep)
        except MountError as e:
            _fail(report, "wait_share", str(share_dir), str(e))

    report.image_name = _require(report, query.image_name(), "image name")
    print(f"Mounting sparse bundle: {report.image_name} ...")
    bundle = find_sparsebundle(share_dir)
    if bundle is None and dry:
        # the share is not mounted in a dry run, show the recipe anyway
        bundle = share_dir / f"*{SPARSEBUNDLE_SUFFIX}"
    report.steps.append(attach_image(cfg, bundle, dry=dry))

    print("Discovering backup locations (this can take a few seconds)...")
    backups = query.list_backups()
    table = query.mount_table()

    if image_mount_lines(table, report.image_name):
        report.device = _require(
            report, device_for_image(table, report.image_name), "device", report.image_name
        )
    elif dry:
        report.device = DRY_RUN_DEVICE
        report.steps.append(
            StepResult("verify_image", report.image_name, False, detail="not attached (dry run)")
        )
    else:
        _fail(report, "verify_image", report.image_name, "Time machine disk image did not mount")
    report.uuid = _require(report, uuid_from_backups(backups), "uuid")

    uuid_dir = cfg.snapshot_root / report.uuid
    ensure_dir(uuid_dir, dry=dry)
    print("\nMounting snapshots...")
    for snap in snapshot_names(backups):
        mp = uuid_dir / snap
        ensure_dir(mp, dry=dry)
        print(f"Mounting snapshot {snapshot_label(cfg, snap)} from {report.device} at {mp}")
        report.steps.append(mount_snapshot(cfg, report.device, snap, mp, dry=dry))
        report.snapshots.append(snap)
    return report


def list_plan(cfg: Config, query: Optional[SystemQuery] = None) -> MountReport:
    """Discovery only: nothing is created or mounted."""
    check_platform()
    query = query or SystemQuery(cfg.preferences_path)
    report = MountReport()
    report.server, report.share_dir = discover_share(cfg, query, report)
    report.image_name = query.image_name()
    backups = query.list_backups()
    report.device = device_for_image(query.mount_table(), report.image_name)
    report.uuid = uuid_from_backups(backups)
    report.snapshots = snapshot_names(backups)
    return report


def print_plan(report: MountReport) -> None:
    """Human-readable summary for --list."""
    print(f"{'server':<10} {report.server}")
    print(f"{'share':<10} {report.share_dir}")
    print(f"{'image':<10} {report.image_name or '-'}")
    print(f"{'device':<10} {report.device or '- (image not attached)'}")
    print(f"{'uuid':<10} {report.uuid or '-'}")
    print(f"{'snapshots':<10} {len(report.snapshots)}")
    for snap in report.snapshots:
        print(f"  {snap}")
