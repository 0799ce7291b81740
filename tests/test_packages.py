import json
import os

import pytest

import packages
from packages import (
    get_packages,
    parse_manifest,
    parse_path_info_json,
    parse_store_path,
    should_skip_package,
)

HASH = "abc123defghijklmnop1234567890123"


def store(name):
    return f"/nix/store/{HASH}-{name}"


@pytest.mark.parametrize(
    "path, expected",
    [
        (store("firefox-122.0"), ("firefox", "122.0")),
        (store("linux-6.6.52"), ("linux", "6.6.52")),
        (store("xorg-server-21.1.11"), ("xorg-server", "21.1.11")),
        (store("openssl-3.0.13-bin"), ("openssl", "3.0.13-bin")),
        (store("etc"), ("etc", "")),
    ],
)
def test_parse_store_path(path, expected):
    assert parse_store_path(path) == expected


def test_parse_store_path_needs_hash():
    assert parse_store_path("/nix/store/short-name") is None


def test_should_skip_package():
    assert should_skip_package("bootstrap-tools")
    assert should_skip_package("setup-hook")
    assert should_skip_package("curl-dev")
    assert should_skip_package("nixos-system-laptop")
    assert not should_skip_package("firefox")
    assert not should_skip_package("neovim")


def test_parse_path_info_object_form():
    text = json.dumps(
        {
            store("zsh-5.9"): {"narSize": 100},
            store("Bash-5.2"): {"narSize": 200},
            store("curl-8.6.0-dev"): {"narSize": 5},
            store("git-2.43.0"): {"narSize": 300},
        }
    )
    pkgs = parse_path_info_json(text)
    assert [(p.name, p.version, p.size) for p in pkgs] == [
        ("Bash", "5.2", 200),
        ("git", "2.43.0", 300),
        ("zsh", "5.9", 100),
    ]


def test_parse_path_info_list_form_keeps_larger_duplicate():
    text = json.dumps(
        [
            {"path": store("glibc-2.39-52"), "narSize": 10},
            {"path": "/nix/store/" + "z" * 32 + "-glibc-2.39-52", "narSize": 900},
            {"path": store("hello-2.12"), "narSize": 50},
        ]
    )
    pkgs = {p.name: p for p in parse_path_info_json(text)}
    assert pkgs["glibc"].size == 900
    assert pkgs["hello"].version == "2.12"


def test_parse_path_info_rejects_bad_json():
    with pytest.raises(ValueError):
        parse_path_info_json("not json")


def test_parse_manifest():
    content = '\n'.join(
        [
            '{',
            '  name = "ripgrep-14.1.0";',
            '  name = "bootstrap-tools";',
            '  name = "fd-9.0.0";',
            '}',
        ]
    )
    assert [(p.name, p.version) for p in parse_manifest(content)] == [
        ("fd", "9.0.0"),
        ("ripgrep", "14.1.0"),
    ]


def test_get_packages_falls_back_to_bin_links(tmp_path, monkeypatch):
    def failing(args, timeout=60):
        raise FileNotFoundError("nix")

    monkeypatch.setattr(packages, "run_nix", failing)

    bin_dir = tmp_path / "gen" / "sw" / "bin"
    bin_dir.mkdir(parents=True)
    os.symlink(store("git-2.43.0") + "/bin/git", bin_dir / "git")
    os.symlink(store("git-2.43.0") + "/bin/git-shell", bin_dir / "git-shell")
    os.symlink(store("vim-9.1") + "/bin/vim", bin_dir / "vim")

    pkgs = get_packages(tmp_path / "gen")

    assert [(p.name, p.version) for p in pkgs] == [("git", "2.43.0"), ("vim", "9.1")]


def test_get_packages_never_raises(tmp_path, monkeypatch):
    monkeypatch.setattr(packages, "run_nix", lambda args, timeout=60: "{broken")
    assert get_packages(tmp_path / "missing") == []


def test_get_packages_survives_undecodable_manifest(tmp_path, monkeypatch):
    def failing(args, timeout=60):
        raise FileNotFoundError("nix")

    monkeypatch.setattr(packages, "run_nix", failing)

    sw = tmp_path / "sw"
    sw.mkdir()
    (sw / "manifest.nix").write_bytes(b'name = "caf\xe9-1.0";')

    assert get_packages(tmp_path) == []
