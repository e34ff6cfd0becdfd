"""
Tests for configuration loading.
"""
import pytest
from pathlib import Path

from tmmnt import config as config_mod
from tmmnt.config import find_config, load_config


def test_load_config_file(temp_config_file, tmp_path):
    """Test configuration loading from a file."""
    config = load_config(temp_config_file)

    assert config.preferences_path == tmp_path / "com.apple.TimeMachine.plist"
    assert config.volumes_root == tmp_path / "Volumes"
    assert config.snapshot_root == tmp_path / "Volumes" / ".timemachine"
    assert config.poll_interval_sec == 0.5
    assert config.poll_max_attempts == 3
    assert config.snapshot_mount_options == "ro,nobrowse,noowners"
    assert config.retry_policy().max_attempts == 3


def test_config_defaults():
    """Test that configuration uses proper defaults."""
    config = load_config(None)

    assert config.preferences_path == Path("/Library/Preferences/com.apple.TimeMachine.plist")
    assert config.volumes_root == Path("/Volumes")
    assert config.snapshot_root == Path("/Volumes/.timemachine")
    assert config.share_mount_options == "ro,nobrowse"
    assert config.attach_flags == ["-debug", "-readonly", "-noautofsck", "-nobrowse"]
    assert config.snapshot_prefix == "com.apple.TimeMachine."
    assert config.required_tools == ["plutil", "tmutil", "mount_smbfs", "hdiutil", "mount_apfs", "mount"]
    # 0 means wait forever
    assert config.poll_max_attempts == 0
    assert config.retry_policy().max_attempts is None


def test_find_config_explicit_missing(tmp_path):
    """Explicit missing path raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        find_config(str(tmp_path / "nope.toml"))


def test_find_config_falls_back_to_defaults(monkeypatch, tmp_path):
    """Absent /etc file means built-in defaults."""
    monkeypatch.setattr(config_mod, "DEFAULT_CONFIG_PATH", str(tmp_path / "absent.toml"))
    assert find_config(None) is None
    (tmp_path / "absent.toml").write_text("")
    assert find_config(None) == tmp_path / "absent.toml"
