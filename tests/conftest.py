"""
Pytest configuration and shared fixtures.
"""
import pytest
from pathlib import Path
from tmmnt.config import config_from_dict
from tmmnt.types import Config


MOUNT_TABLE = """\
/dev/disk1s1s1 on / (apfs, sealed, local, read-only, journaled)
devfs on /dev (devfs, local, nobrowse)
//tm@nas.local/Some%20Share on /Volumes/Some Share (smbfs, nodev, nosuid, read-only, nobrowse, mounted by root)
/dev/disk4s1 on /Volumes/Backups of MacBook (apfs, local, nodev, nosuid, read-only, journaled, nobrowse)
"""

BACKUPS = [
    "/Volumes/.timemachine/UUID1/2023-01-01-000000.backup",
    "/Volumes/.timemachine/UUID1/2023-01-02-000000.backup",
]


class FakeQuery:
    """Canned SystemQuery."""

    def __init__(self, server="smb://tm@nas.local/Some%20Share", image="Backups of MacBook",
                 backups=None, table=MOUNT_TABLE):
        self.server = server
        self.image = image
        self.backups = list(BACKUPS if backups is None else backups)
        self.table = table

    def server_url(self):
        return self.server

    def image_name(self):
        return self.image

    def list_backups(self):
        return list(self.backups)

    def mount_table(self):
        return self.table


@pytest.fixture
def fake_query():
    return FakeQuery


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary configuration file for testing."""
    path = tmp_path / "tm-mnt.toml"
    path.write_text(f"""
[preferences]
path = "{tmp_path}/com.apple.TimeMachine.plist"

[volumes]
root = "{tmp_path}/Volumes"

[share]
poll_interval_sec = 0.5
poll_max_attempts = 3

[snapshots]
mount_options = "ro,nobrowse,noowners"
""")
    return path


@pytest.fixture
def sample_config(tmp_path) -> Config:
    """Configuration rooted in tmp_path, polling bounded so a broken test cannot hang."""
    cfg = config_from_dict({"volumes": {"root": str(tmp_path / "Volumes")}})
    cfg.poll_max_attempts = 3
    return cfg


@pytest.fixture
def on_macos(monkeypatch):
    """Pretend the platform/privilege gate passed."""
    monkeypatch.setattr("tmmnt.orchestrator.check_platform", lambda: None)


@pytest.fixture
def commands(monkeypatch):
    """
    Record mutating commands instead of running them.
    Set `commands.fail` to a set of command names (or snapshot labels) that should return rc 1.
    """
    class Recorder(list):
        fail = set()

    rec = Recorder()

    def fake_run(cmd, capture=False, quiet=False, dry=False):
        cmd = [str(c) for c in cmd]
        rec.append(cmd)
        if any(c in rec.fail for c in cmd):
            return 1, ""
        return 0, ""

    monkeypatch.setattr("tmmnt.mounter.run", fake_run)
    return rec
