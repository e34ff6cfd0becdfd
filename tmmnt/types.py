"""
types.py
Dataclasses used across modules: Config, RetryPolicy, CheckResult, StepResult, MountReport.
MountError is the single fatal error; the CLI turns it into "Error: ..." and exit 1.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

FATAL = "fatal"
ADVISORY = "advisory"


class MountError(Exception):
    """
    Fatal precondition failure; the run stops where it is, nothing is rolled back.
    `report` is the partial MountReport, ending with the fatal StepResult, when
    the failure happened inside the mount sequence.
    """

    def __init__(self, message: str, report: Optional["MountReport"] = None):
        super().__init__(message)
        self.report = report


@dataclass
class Config:
    # preferences
    preferences_path: Path
    # volumes
    volumes_root: Path
    snapshot_root: Path
    # share
    share_mount_options: str
    poll_interval_sec: float
    poll_max_attempts: int
    # image
    attach_flags: List[str]
    # snapshots
    snapshot_mount_options: str
    snapshot_prefix: str
    # tools
    required_tools: List[str]

    def retry_policy(self) -> "RetryPolicy":
        return RetryPolicy(
            interval_sec=self.poll_interval_sec,
            max_attempts=self.poll_max_attempts or None,
        )


@dataclass
class RetryPolicy:
    interval_sec: float = 1.0
    max_attempts: Optional[int] = None  # None: poll forever


@dataclass
class CheckResult:
    ok: bool
    reason: Optional[str] = None


@dataclass
class StepResult:
    step: str
    target: str
    ok: bool
    severity: str = ADVISORY
    detail: Optional[str] = None


@dataclass
class MountReport:
    server: str = ""
    share_dir: Optional[Path] = None
    image_name: str = ""
    device: str = ""
    uuid: str = ""
    snapshots: List[str] = field(default_factory=list)
    steps: List[StepResult] = field(default_factory=list)

    @property
    def advisories(self) -> List[StepResult]:
        """Advisory steps that did not succeed."""
        return [s for s in self.steps if s.severity == ADVISORY and not s.ok]
