import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from commands import CommandError
from constants import UNDO_SECONDS
from generations import GenerationError
from models import ProfileType
from popups import ConfirmPopup, LoadingPopup, UndoPopup


class ActionKind(Enum):
    RESTORE = "restore"
    DELETE = "delete"


@dataclass(frozen=True)
class PendingAction:
    """A destructive action fixed at the moment confirmation was requested."""

    kind: ActionKind
    profile: ProfileType
    generation_ids: Tuple[int, ...]
    command: str
    profile_path: Path


@dataclass(frozen=True)
class UndoAction:
    profile: ProfileType
    generation_ids: Tuple[int, ...]


@dataclass
class PendingUndo:
    action: UndoAction
    started_at: float

    def seconds_remaining(self, now):
        elapsed = int(now - self.started_at)
        return max(0, UNDO_SECONDS - elapsed)


class ActionWorkflow:
    """Confirm, execute and undo-window handling for restore and delete.

    Only the ids, profile and command stored in ``pending`` are ever
    executed; the live cursor is not consulted once the confirmation is up.
    """

    def __init__(self, registry, backend, presentation, clock, dry_run=False):
        self.registry = registry
        self.backend = backend
        self.presentation = presentation
        self.clock = clock
        self.dry_run = dry_run
        self.redraw = None
        self.pending: Optional[PendingAction] = None
        self.undo: Optional[PendingUndo] = None

    # --- Eligibility ---
    def deletable_ids(self, profile, ids):
        result = []
        for gen_id in sorted(ids):
            gen = self.registry.find(profile, gen_id)
            if gen is None or gen.is_current or gen.is_pinned:
                continue
            result.append(gen_id)
        return tuple(result)

    # --- Requests ---
    def request_restore(self, profile, generation):
        if generation is None:
            return
        if generation.is_current:
            self.presentation.show_flash("Cannot restore current generation", is_error=True)
            return

        source = self.registry.source_for(profile)
        command = self.backend.build_restore_command(source.profile_path, generation.id, profile)
        self.pending = PendingAction(
            kind=ActionKind.RESTORE,
            profile=profile,
            generation_ids=(generation.id,),
            command=command,
            profile_path=source.profile_path,
        )
        self.presentation.popup = ConfirmPopup(
            title="Confirm Restore",
            message=(
                f"Restore {profile.label} generation #{generation.id}?\n\n"
                f"Date: {generation.formatted_date()}\n"
                f"Version: {generation.nixos_version or 'Unknown'}"
            ),
            command=command,
        )

    def request_delete(self, profile, generation, selected=()):
        if selected:
            ids = self.deletable_ids(profile, selected)
            if not ids:
                self.presentation.show_flash(
                    "Nothing to delete (current and pinned generations are kept)",
                    is_error=True,
                )
                return
        else:
            if generation is None:
                return
            if generation.is_current:
                self.presentation.show_flash("Cannot delete current generation", is_error=True)
                return
            if generation.is_pinned:
                self.presentation.show_flash(
                    "Cannot delete pinned generation (unpin first)", is_error=True
                )
                return
            ids = (generation.id,)

        source = self.registry.source_for(profile)
        command = self.backend.build_delete_command(source.profile_path, list(ids), profile)
        self.pending = PendingAction(
            kind=ActionKind.DELETE,
            profile=profile,
            generation_ids=ids,
            command=command,
            profile_path=source.profile_path,
        )
        id_list = ", ".join(str(i) for i in ids)
        self.presentation.popup = ConfirmPopup(
            title="Confirm Delete",
            message=(
                f"Delete {len(ids)} {profile.label} generation(s)?\n\n"
                f"IDs: {id_list}\n\n"
                "This cannot be undone!"
            ),
            command=command,
        )

    # --- Confirmation ---
    def cancel(self):
        self.pending = None
        self.presentation.close()

    def confirm(self):
        """Execute the pending action. Returns True when the command succeeded."""
        action = self.pending
        self.pending = None
        if action is None:
            self.presentation.close()
            return False

        self.presentation.popup = LoadingPopup("Executing...")
        if self.redraw:
            self.redraw()

        try:
            result = self.execute(action)
        except (OSError, CommandError, subprocess.SubprocessError) as e:
            self.presentation.show_error("Error", str(e))
            return False

        if not result.success:
            self.presentation.show_error("Command Failed", result.message)
            return False

        self.presentation.close()
        self.presentation.show_flash(result.message)

        if self.dry_run:
            return True

        if action.kind is ActionKind.DELETE:
            self.undo = PendingUndo(
                action=UndoAction(action.profile, action.generation_ids),
                started_at=self.clock(),
            )

        try:
            self.registry.refresh()
        except (GenerationError, OSError) as e:
            self.presentation.show_error("Refresh Failed", str(e))
            return True

        if action.kind is ActionKind.DELETE:
            self.presentation.popup = UndoPopup(
                message=f"Deleted {len(action.generation_ids)} generation(s)",
                seconds_remaining=UNDO_SECONDS,
            )
        return True

    def execute(self, action):
        if action.kind is ActionKind.RESTORE:
            return self.backend.restore_generation(
                action.profile_path,
                action.generation_ids[0],
                action.profile,
                self.dry_run,
                command=action.command,
            )
        return self.backend.delete_generations(
            action.profile_path,
            list(action.generation_ids),
            action.profile,
            self.dry_run,
            command=action.command,
        )

    # --- Undo window ---
    def undo_last(self):
        # Deleted generations cannot be brought back
        self.undo = None
        self.presentation.close()
        self.presentation.show_flash("Cannot undo delete - generation is gone", is_error=True)

    def dismiss_undo(self):
        self.undo = None
        self.presentation.close()

    def tick(self):
        """Recompute the undo countdown. Returns True when it changed."""
        if self.undo is None:
            return False

        remaining = self.undo.seconds_remaining(self.clock())
        popup = self.presentation.popup
        if remaining == 0:
            self.undo = None
            if isinstance(popup, UndoPopup):
                self.presentation.close()
            self.presentation.show_flash("Action confirmed")
            return True

        if isinstance(popup, UndoPopup) and popup.seconds_remaining != remaining:
            popup.seconds_remaining = remaining
            return True
        return False
