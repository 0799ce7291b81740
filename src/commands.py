import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from models import ProfileType
from utils import command_exists


class CommandError(Exception):
    pass


@dataclass
class CommandResult:
    success: bool
    message: str
    command: str = ""


# --- Logic: Command preview ---

def build_restore_command(profile_path, generation_id, profile_type):
    profile_path = Path(profile_path)
    if profile_type is ProfileType.SYSTEM:
        gen_path = profile_path.parent / f"system-{generation_id}-link"
        return f"sudo {gen_path}/bin/switch-to-configuration switch"

    home = os.environ.get("HOME", "")
    activate_link = (
        f"{home}/.local/state/home-manager/profiles/home-manager-{generation_id}-link"
    )
    if os.path.exists(activate_link):
        return f"{activate_link}/activate"
    # Home-Manager as a NixOS module
    return f"nix-env --switch-generation {generation_id} --profile {profile_path}"


def build_delete_command(profile_path, generation_ids, profile_type):
    ids = " ".join(str(i) for i in generation_ids)
    if profile_type is ProfileType.SYSTEM:
        return f"sudo nix-env --delete-generations {ids} --profile {profile_path}"

    if command_exists("home-manager"):
        return f"home-manager remove-generations {ids}"
    return f"nix-env --delete-generations {ids} --profile {profile_path}"


# --- Logic: Execution ---

def restore_generation(profile_path, generation_id, profile_type, dry_run, command=None):
    command = command or build_restore_command(profile_path, generation_id, profile_type)

    if dry_run:
        return CommandResult(
            success=True,
            message=f"Dry run: Would execute restore to generation {generation_id}",
            command=command,
        )

    return execute_command(command, f"restore generation {generation_id}")


def delete_generations(profile_path, generation_ids, profile_type, dry_run, command=None):
    if not generation_ids:
        return CommandResult(
            success=False,
            message="No generations specified for deletion",
        )

    command = command or build_delete_command(profile_path, generation_ids, profile_type)

    if dry_run:
        return CommandResult(
            success=True,
            message=f"Dry run: Would delete {len(generation_ids)} generation(s)",
            command=command,
        )

    return execute_command(command, f"delete {len(generation_ids)} generation(s)")


def execute_command(command, description):
    """Run a previewed command verbatim and describe the outcome.

    stdin is inherited so sudo can prompt for a password. Raises
    CommandError when the command is empty and OSError when it cannot be
    started; a non-zero exit is reported as an unsuccessful result.
    """
    args = shlex.split(command)
    if not args:
        raise CommandError("Empty command")

    result = subprocess.run(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )

    if result.returncode == 0:
        return CommandResult(
            success=True,
            message=f"Successfully {description}",
            command=command,
        )

    if result.stderr.strip():
        error_msg = result.stderr.strip()
    elif result.stdout.strip():
        error_msg = result.stdout.strip()
    else:
        error_msg = f"Command failed with exit code: {result.returncode}"

    return CommandResult(
        success=False,
        message=f"Failed to {description}: {error_msg}",
        command=command,
    )
