import os
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from constants import PER_USER_PROFILES, SYSTEM_PROFILE


class DetectionError(Exception):
    pass


@dataclass
class HomeManagerInfo:
    profile_path: Path
    is_standalone: bool


@dataclass
class SystemInfo:
    hostname: str
    username: str
    uses_flakes: bool
    system_profile: Path
    home_manager: Optional[HomeManagerInfo] = None


def detect_system():
    username = get_username()
    return SystemInfo(
        hostname=get_hostname(),
        username=username,
        uses_flakes=detect_flakes(),
        system_profile=Path(SYSTEM_PROFILE),
        home_manager=detect_home_manager(username),
    )


def get_hostname():
    try:
        hostname = Path("/etc/hostname").read_text().strip()
        if hostname:
            return hostname
    except OSError:
        pass
    return socket.gethostname() or "unknown"


def get_username():
    username = os.environ.get("USER") or os.environ.get("LOGNAME")
    if not username:
        raise DetectionError(
            "Could not determine username from USER or LOGNAME environment variable"
        )
    return username


def detect_flakes(home=None):
    home = Path(home or os.path.expanduser("~"))
    candidates = [
        Path("/etc/nixos/flake.nix"),
        home / ".config/nixos/flake.nix",
        home / "nixos/flake.nix",
        home / ".nixos/flake.nix",
    ]
    return any(p.exists() for p in candidates)


def has_generation_links(path):
    try:
        return any(
            name.startswith("home-manager-") and name.endswith("-link")
            for name in os.listdir(path)
        )
    except OSError:
        return False


def detect_home_manager(username, home=None):
    """Locate a Home-Manager profile, standalone or NixOS module.

    Returns None when Home-Manager is not installed; the profile path is the
    profile symlink itself so its parent holds the generation links.
    """
    home = Path(home or os.path.expanduser("~"))

    # Standalone (flake users)
    standalone = home / ".local/state/home-manager/profiles"
    if standalone.exists() and has_generation_links(standalone):
        return HomeManagerInfo(standalone / "home-manager", is_standalone=True)

    # NixOS module
    module_path = Path(PER_USER_PROFILES) / username / "home-manager"
    if module_path.exists() or module_path.is_symlink():
        return HomeManagerInfo(module_path, is_standalone=False)

    # Older standalone location
    alt_state = home / ".local/state/nix/profiles/home-manager"
    if (home / ".nix-profile").exists() and (alt_state.exists() or alt_state.is_symlink()):
        return HomeManagerInfo(alt_state, is_standalone=True)

    return None
