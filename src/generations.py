import datetime
import os
import re
import subprocess
from pathlib import Path

from constants import BOOT_ENTRIES_DIR, GRUB_CONFIG
from models import Generation, ProfileType
from utils import run_nix


class GenerationError(Exception):
    pass


# --- Logic: Listing ---

def list_generations(source):
    """Return the generations of a profile, newest id first.

    Raises GenerationError when nix-env cannot list the profile or the
    profile symlink cannot be resolved.
    """
    profile_path = source.profile_path
    try:
        output = run_nix(["nix-env", "--list-generations", "--profile", str(profile_path)])
    except (OSError, subprocess.SubprocessError) as e:
        raise GenerationError(f"nix-env --list-generations failed: {e}") from e

    raw_generations = parse_generation_list(output)
    current_id = get_current_generation_id(profile_path)

    boot_entries = set()
    if source.profile_type is ProfileType.SYSTEM:
        boot_entries = get_boot_entries()

    generations = []
    for gen_id, timestamp in raw_generations:
        gen_path = source.generation_path(gen_id)
        if not os.path.lexists(gen_path):
            continue
        generations.append(
            parse_generation(
                gen_id,
                timestamp,
                gen_path,
                is_current=gen_id == current_id,
                in_bootloader=gen_id in boot_entries,
                profile_type=source.profile_type,
            )
        )

    generations.sort(key=lambda g: g.id, reverse=True)
    return generations


def parse_generation_list(output):
    """Parse ``nix-env --list-generations`` output.

    Example:
       1   2024-01-15 08:44:32
       2   2024-01-18 11:03:15   (current)
    """
    result = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 3:
            continue
        try:
            gen_id = int(parts[0])
            timestamp = datetime.datetime.strptime(
                f"{parts[1]} {parts[2]}", "%Y-%m-%d %H:%M:%S"
            )
        except ValueError as e:
            raise GenerationError(f"Invalid generation line: {line.strip()!r}") from e
        result.append((gen_id, timestamp))
    return result


def extract_generation_id(path):
    """``system-142-link`` -> 142, ``home-manager-89-link`` -> 89."""
    match = re.search(r"-(\d+)-link$", os.path.basename(str(path)))
    if not match:
        raise GenerationError(f"Could not extract generation ID from: {path}")
    return int(match.group(1))


def get_current_generation_id(profile_path):
    try:
        target = os.readlink(profile_path)
    except OSError as e:
        raise GenerationError(f"Failed to read profile symlink {profile_path}: {e}") from e
    return extract_generation_id(target)


# --- Logic: Metadata ---

def parse_generation(gen_id, timestamp, gen_path, is_current, in_bootloader, profile_type):
    try:
        store_path = os.readlink(gen_path)
    except OSError:
        store_path = ""

    return Generation(
        id=gen_id,
        date=timestamp,
        is_current=is_current,
        nixos_version=get_version(gen_path, profile_type),
        kernel_version=get_kernel_version(gen_path) if profile_type is ProfileType.SYSTEM else None,
        package_count=get_package_count(gen_path),
        closure_size=get_closure_size(gen_path),
        store_path=store_path,
        in_bootloader=in_bootloader,
    )


def get_version(gen_path, profile_type):
    name = "nixos-version" if profile_type is ProfileType.SYSTEM else "hm-version"
    version_file = Path(gen_path) / name
    try:
        return version_file.read_text().strip()
    except OSError:
        pass

    # /nix/store/<hash>-nixos-system-<host>-24.11.20240101.abcdef
    try:
        target = os.readlink(gen_path)
    except OSError:
        return None
    return version_from_store_path(target)


def version_from_store_path(store_path):
    marker = "-nixos-system-"
    idx = store_path.find(marker)
    if idx < 0:
        return None
    rest = store_path[idx + len(marker):].split("-")
    return rest[1] if len(rest) > 1 else None


def get_kernel_version(gen_path):
    kernel = Path(gen_path) / "kernel"
    if kernel.exists():
        try:
            return kernel_version_from_path(os.readlink(kernel))
        except OSError:
            return None

    modules_dir = Path(gen_path) / "kernel-modules/lib/modules"
    try:
        entries = sorted(os.listdir(modules_dir))
    except OSError:
        return None
    return entries[0] if entries else None


def kernel_version_from_path(kernel_path):
    # /nix/store/<hash>-linux-6.6.52/bzImage
    for part in kernel_path.split("/"):
        match = re.search(r"-linux-(\d[^-/]*)", part)
        if match:
            return match.group(1)
        if part.startswith("linux-") and len(part) > 6:
            return part[6:].split("-")[0]
    return None


def get_package_count(gen_path):
    sw_bin = Path(gen_path) / "sw/bin"
    try:
        return len(os.listdir(sw_bin))
    except OSError:
        pass

    manifest = Path(gen_path) / "home-files/.nix-profile/manifest.nix"
    try:
        return manifest.read_text().count("name = ")
    except OSError:
        return 0


def get_closure_size(gen_path):
    try:
        output = run_nix(["nix", "path-info", "-S", str(gen_path)])
    except (OSError, subprocess.SubprocessError):
        return 0

    # /nix/store/xxx-... 1234567890
    for line in output.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[1].isdigit():
            return int(parts[1])
    return 0


def get_boot_entries(entries_dir=BOOT_ENTRIES_DIR, grub_config=GRUB_CONFIG):
    """Generation ids present in the bootloader (systemd-boot, then GRUB)."""
    entries = set()
    try:
        for name in os.listdir(entries_dir):
            match = re.fullmatch(r"nixos-generation-(\d+)(?:-specialisation-.*)?\.conf", name)
            if match:
                entries.add(int(match.group(1)))
    except OSError:
        pass

    if entries:
        return entries

    try:
        content = Path(grub_config).read_text()
    except OSError:
        return entries

    for line in content.splitlines():
        if "NixOS" in line and "Generation" in line:
            match = re.search(r"Generation (\d+)", line)
            if match:
                entries.add(int(match.group(1)))
    return entries
