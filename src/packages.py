import json
import os
import re
import subprocess
import sys
from pathlib import Path

from models import Package
from utils import run_nix

SKIP_PREFIXES = (
    "bootstrap-", "hook-", "wrap-", "setup-", "stdenv-", "builder-",
    "source-", "raw-", "manifest", "env-manifest", "nix-support",
)
SKIP_SUFFIXES = ("-info", "-man", "-doc", "-dev", "-debug", ".drv")
SKIP_NAMES = ("source", "builder", "hook", "wrapper", "nixos-system-")


def parse_store_path(store_path):
    # Format: /nix/store/<hash>-<name>-<version>
    # or /nix/store/<hash>-<name>
    basename = os.path.basename(str(store_path).rstrip("/"))
    # Remove hash (32 chars) + dash
    if len(basename) > 33 and basename[32] == "-":
        rest = basename[33:]
    else:
        return None

    # Version starts at the first dash followed by a digit
    match = re.search(r"-(\d)", rest)
    if match:
        return rest[: match.start()], rest[match.start() + 1 :]
    return rest, ""


def should_skip_package(name):
    """Build-time and internal outputs that are not user-facing packages."""
    if name.startswith(SKIP_PREFIXES) or name.endswith(SKIP_SUFFIXES):
        return True
    return any(name == skip or name.startswith(skip) for skip in SKIP_NAMES)


def sort_packages(packages):
    return sorted(packages, key=lambda p: p.name.lower())


# --- Logic: nix path-info ---

def get_packages(gen_path):
    """All packages in a generation's closure, sorted by name.

    Never raises: every source that fails falls through to the next and the
    last resort is an empty list.
    """
    try:
        packages = get_packages_from_path_info(gen_path)
        if packages:
            return packages
    except (OSError, subprocess.SubprocessError, ValueError) as e:
        print(f"Error reading closure of {gen_path}: {e}", file=sys.stderr)

    try:
        return get_packages_from_sw(gen_path)
    except (OSError, ValueError) as e:
        print(f"Error scanning {gen_path}: {e}", file=sys.stderr)
        return []


def get_packages_from_path_info(gen_path):
    output = run_nix(["nix", "path-info", "-r", "-s", "--json", str(gen_path)])
    return parse_path_info_json(output)


def parse_path_info_json(text):
    """Parse ``nix path-info --json`` output.

    Newer nix prints an object keyed by store path, older releases a list of
    objects carrying a ``path`` field. When a name shows up more than once
    the entry with the larger narSize wins.
    """
    data = json.loads(text)
    if isinstance(data, dict):
        entries = [(path, info or {}) for path, info in data.items()]
    elif isinstance(data, list):
        entries = [(info.get("path", ""), info) for info in data if isinstance(info, dict)]
    else:
        raise ValueError("Unexpected nix path-info output")

    by_name = {}
    for path, info in entries:
        parsed = parse_store_path(path)
        if not parsed:
            continue
        name, version = parsed
        # Split outputs keep their suffix after the version: curl-8.6.0-dev
        if should_skip_package(name) or version.endswith(SKIP_SUFFIXES):
            continue

        size = info.get("narSize") or 0
        existing = by_name.get(name)
        if existing is None or existing.size < size:
            by_name[name] = Package(name=name, version=version, size=size)

    return sort_packages(by_name.values())


# --- Logic: Fallbacks ---

def get_packages_from_sw(gen_path):
    sw_path = Path(gen_path) / "sw"
    if not sw_path.exists():
        return []

    manifest = sw_path / "manifest.nix"
    if manifest.exists():
        return parse_manifest(manifest.read_text(encoding="utf-8"))

    bin_path = sw_path / "bin"
    if bin_path.exists():
        return packages_from_bin_links(bin_path)

    return []


def parse_manifest(content):
    packages = []
    for line in content.splitlines():
        line = line.strip()
        if not line.startswith('name = "'):
            continue
        full_name = line[len('name = "'):].rstrip(";").rstrip('"')
        if should_skip_package(full_name):
            continue
        # Reuse store path parsing with a placeholder hash
        parsed = parse_store_path(f"/nix/store/{'x' * 32}-{full_name}")
        if parsed:
            packages.append(Package(name=parsed[0], version=parsed[1]))
    return sort_packages(packages)


def packages_from_bin_links(bin_path):
    by_name = {}
    for entry in os.scandir(bin_path):
        try:
            target = os.readlink(entry.path)
        except OSError:
            continue
        # /nix/store/<hash>-<name>-<version>/bin/<program>
        store_root = "/".join(target.split("/")[:4])
        parsed = parse_store_path(store_root)
        if parsed and parsed[0] not in by_name:
            by_name[parsed[0]] = Package(name=parsed[0], version=parsed[1])
    return sort_packages(by_name.values())
