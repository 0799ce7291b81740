import os

import pytest

from detect import DetectionError, detect_flakes, detect_home_manager, get_username

NO_SUCH_USER = "nixhist-test-nobody"


def test_username_from_environment(monkeypatch):
    monkeypatch.setenv("USER", "alice")
    assert get_username() == "alice"

    monkeypatch.delenv("USER")
    monkeypatch.setenv("LOGNAME", "bob")
    assert get_username() == "bob"


def test_missing_username_is_fatal(monkeypatch):
    monkeypatch.delenv("USER", raising=False)
    monkeypatch.delenv("LOGNAME", raising=False)
    with pytest.raises(DetectionError):
        get_username()


def test_standalone_home_manager(tmp_path):
    profiles = tmp_path / ".local/state/home-manager/profiles"
    profiles.mkdir(parents=True)
    os.symlink("/nix/store/x-home-manager-generation", profiles / "home-manager-4-link")

    info = detect_home_manager(NO_SUCH_USER, home=tmp_path)

    assert info.is_standalone
    assert info.profile_path == profiles / "home-manager"


def test_no_home_manager(tmp_path):
    assert detect_home_manager(NO_SUCH_USER, home=tmp_path) is None


def test_profiles_dir_without_links_is_ignored(tmp_path):
    (tmp_path / ".local/state/home-manager/profiles").mkdir(parents=True)
    assert detect_home_manager(NO_SUCH_USER, home=tmp_path) is None


def test_detect_flakes_in_home(tmp_path):
    (tmp_path / "nixos").mkdir()
    (tmp_path / "nixos" / "flake.nix").write_text("{}")
    assert detect_flakes(home=tmp_path)
