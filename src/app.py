import time
from enum import Enum

from backend import NixBackend
from constants import SETTINGS_ITEMS, SIDE_BY_SIDE_MIN_WIDTH
from diff import calculate_diff
from models import ProfileType, Tab
from navigation import (
    DiffState,
    ManageState,
    OverviewState,
    PackagesState,
    SettingsState,
)
from popups import ConfirmPopup, ErrorPopup, LoadingPopup, Presentation, UndoPopup
from registry import GenerationRegistry
from workflow import ActionWorkflow

TAB_KEYS = ("1", "2", "3", "4", "5")


class AppState(Enum):
    NORMAL = "normal"
    FILTER_INPUT = "filter_input"
    # Reserved, no handler produces it
    DROPDOWN_OPEN = "dropdown_open"
    CONFIRM_ACTION = "confirm_action"
    SHOW_ERROR = "show_error"
    UNDO_COUNTDOWN = "undo_countdown"
    LOADING = "loading"


class App:
    """Dashboard controller: owns every piece of state and routes keys.

    Keys arrive as normalised strings (``"j"``, ``"G"``, ``"Enter"``,
    ``"Esc"``, ``"Tab"``, ``"Backspace"``, ``"Up"``, ``"Down"``, ``" "``).
    """

    def __init__(self, system_info, settings, backend=None, dry_run=False, clock=time.monotonic):
        self.system_info = system_info
        self.settings = settings
        self.backend = backend or NixBackend()
        self.dry_run = dry_run
        self.clock = clock
        self.should_quit = False
        self.active_tab = Tab.OVERVIEW

        self.registry = GenerationRegistry.load(system_info, self.backend, settings)

        self.overview = OverviewState()
        self.packages = PackagesState()
        self.diff = DiffState()
        self.manage = ManageState()
        self.settings_tab = SettingsState()

        self.presentation = Presentation(clock)
        self.workflow = ActionWorkflow(
            self.registry, self.backend, self.presentation, clock, dry_run=dry_run
        )

    # --- Derived state ---
    @property
    def popup(self):
        return self.presentation.popup

    @property
    def flash(self):
        return self.presentation.flash

    @property
    def redraw(self):
        return self.workflow.redraw

    @redraw.setter
    def redraw(self, callback):
        self.workflow.redraw = callback

    def state(self):
        popup = self.presentation.popup
        if isinstance(popup, ConfirmPopup):
            return AppState.CONFIRM_ACTION
        if isinstance(popup, ErrorPopup):
            return AppState.SHOW_ERROR
        if isinstance(popup, UndoPopup):
            return AppState.UNDO_COUNTDOWN
        if isinstance(popup, LoadingPopup):
            return AppState.LOADING
        if self.active_tab is Tab.PACKAGES and self.packages.filter_active:
            return AppState.FILTER_INPUT
        return AppState.NORMAL

    def use_side_by_side(self, width):
        if not self.registry.has_home_manager:
            return False
        if self.settings.layout == "side-by-side":
            return True
        if self.settings.layout == "tabs-only":
            return False
        return width >= SIDE_BY_SIDE_MIN_WIDTH

    def selected_generation(self, profile, cursor):
        gens = self.registry.generations_for(profile)
        if not gens:
            return None
        return gens[min(cursor.pos, len(gens) - 1)]

    # --- Loop hooks ---
    def quit(self):
        self.should_quit = True

    def tick(self):
        """Expire the flash and advance the undo countdown.

        Returns True when something visible changed.
        """
        changed = self.presentation.clear_expired_flash()
        if self.workflow.tick():
            changed = True
        return changed

    def handle_key(self, key):
        self.presentation.clear_expired_flash()

        state = self.state()
        if state is AppState.CONFIRM_ACTION:
            self.handle_confirm_key(key)
        elif state is AppState.SHOW_ERROR:
            self.handle_error_key(key)
        elif state is AppState.UNDO_COUNTDOWN:
            self.handle_undo_key(key)
        elif state is AppState.LOADING:
            return
        else:
            self.handle_normal_key(key)

    # --- Overlay handlers ---
    def handle_confirm_key(self, key):
        if key in ("y", "Y"):
            if self.workflow.confirm():
                self.manage.selected.clear()
            self.reconcile()
        elif key in ("n", "N", "Esc"):
            self.workflow.cancel()

    def handle_error_key(self, key):
        if key in ("o", "Enter", "Esc"):
            self.presentation.close()

    def handle_undo_key(self, key):
        if key in ("u", "U"):
            self.workflow.undo_last()
        elif key == "Esc":
            self.workflow.dismiss_undo()

    # --- Normal handling ---
    def handle_normal_key(self, key):
        if self.active_tab is Tab.PACKAGES and self.packages.editing:
            self.handle_packages_key(key)
            return

        if key == "q":
            self.quit()
            return
        if key in TAB_KEYS:
            self.active_tab = Tab.from_index(int(key) - 1)
            return

        handlers = {
            Tab.OVERVIEW: self.handle_overview_key,
            Tab.PACKAGES: self.handle_packages_key,
            Tab.DIFF: self.handle_diff_key,
            Tab.MANAGE: self.handle_manage_key,
            Tab.SETTINGS: self.handle_settings_key,
        }
        handlers[self.active_tab](key)

    def handle_overview_key(self, key):
        ov = self.overview
        if key == "Tab":
            if self.registry.has_home_manager:
                ov.focus = ov.focus.other()
        elif key == "Enter":
            gen = self.selected_generation(ov.focus, ov.cursor)
            if gen is not None:
                self.load_packages(gen.id, ov.focus)
                self.active_tab = Tab.PACKAGES
        else:
            ov.cursor.move(key, len(self.registry.generations_for(ov.focus)))

    def handle_packages_key(self, key):
        pk = self.packages
        if pk.editing:
            if key == "Esc":
                pk.stop_editing(clear=True)
            elif key == "Enter":
                pk.stop_editing()
            elif key == "Backspace":
                pk.set_filter(pk.filter[:-1])
            elif key in ("Up", "Down"):
                pk.cursor.move(key, pk.visible_count)
            elif len(key) == 1:
                pk.set_filter(pk.filter + key)
            return

        if key == "/":
            pk.start_editing()
        elif key == "Backspace":
            if pk.filter:
                pk.editing = True
                pk.set_filter(pk.filter[:-1])
        elif key == "Esc":
            if pk.filter:
                pk.set_filter("")
            else:
                self.active_tab = Tab.OVERVIEW
        else:
            pk.cursor.move(key, pk.visible_count)

    def handle_diff_key(self, key):
        df = self.diff
        gens = self.registry.generations_for(ProfileType.SYSTEM)
        if key == "Tab":
            df.toggle_focus()
        elif key == "Enter":
            gen = self.selected_generation(ProfileType.SYSTEM, df.cursor)
            if gen is not None:
                df.select(gen.id)
                if df.both_selected:
                    self.compute_diff()
        elif key in ("c", "C"):
            df.clear()
        else:
            df.cursor.move(key, len(gens))

    def handle_manage_key(self, key):
        mg = self.manage
        gens = self.registry.generations_for(mg.profile)
        gen = self.selected_generation(mg.profile, mg.cursor)

        if key == "Tab":
            if self.registry.has_home_manager:
                mg.switch_profile()
        elif key == " ":
            self.toggle_selected(gen)
        elif key in ("a", "A"):
            mg.selected.update(g.id for g in gens if not g.is_current and not g.is_pinned)
        elif key in ("c", "C"):
            mg.selected.clear()
        elif key in ("p", "P"):
            if gen is not None:
                self.toggle_pin(gen.id)
        elif key in ("r", "R"):
            self.workflow.request_restore(mg.profile, gen)
        elif key in ("d", "D"):
            self.workflow.request_delete(mg.profile, gen, mg.selected)
        else:
            mg.cursor.move(key, len(gens))

    def handle_settings_key(self, key):
        st = self.settings_tab
        if key == "Enter":
            self.settings.activate_item(st.cursor.pos)
            self.save_settings("Settings saved")
        else:
            st.cursor.move(key, len(SETTINGS_ITEMS))

    # --- Actions ---
    def load_packages(self, generation_id, profile):
        source = self.registry.source_for(profile)
        packages = self.backend.get_packages(source.generation_path(generation_id))
        self.packages.load(packages, generation_id, profile)

    def compute_diff(self):
        df = self.diff
        source = self.registry.source_for(ProfileType.SYSTEM)
        old = self.backend.get_packages(source.generation_path(df.from_id))
        new = self.backend.get_packages(source.generation_path(df.to_id))
        df.diff = calculate_diff(old, new)

    def toggle_selected(self, gen):
        if gen is None:
            return
        if gen.is_current:
            self.presentation.show_flash("Cannot select current generation", is_error=True)
        elif gen.is_pinned:
            self.presentation.show_flash("Cannot select pinned generation", is_error=True)
        elif gen.id in self.manage.selected:
            self.manage.selected.discard(gen.id)
        else:
            self.manage.selected.add(gen.id)

    def toggle_pin(self, generation_id):
        profile = self.manage.profile
        pinned = self.settings.toggle_pin(profile, generation_id)
        self.registry.set_pinned(profile, generation_id, pinned)
        if pinned:
            self.manage.selected.discard(generation_id)
        verb = "Pinned" if pinned else "Unpinned"
        self.save_settings(f"{verb} generation #{generation_id}")

    def save_settings(self, success_message):
        try:
            self.settings.save_settings()
        except OSError as e:
            self.presentation.show_error("Save Failed", str(e))
            return
        self.presentation.show_flash(success_message)

    def reconcile(self):
        """Bring every cursor and selection back in line with the registry."""
        registry = self.registry
        for profile, cursor in self.overview.cursors.items():
            cursor.clamp(len(registry.generations_for(profile)))

        system_count = len(registry.generations_for(ProfileType.SYSTEM))
        for cursor in self.diff.cursors:
            cursor.clamp(system_count)
        system_ids = registry.ids(ProfileType.SYSTEM)
        if (self.diff.from_id is not None and self.diff.from_id not in system_ids) or (
            self.diff.to_id is not None and self.diff.to_id not in system_ids
        ):
            self.diff.clear()

        self.manage.cursor.clamp(len(registry.generations_for(self.manage.profile)))
        self.manage.selected &= registry.ids(self.manage.profile)

        self.packages.cursor.clamp(self.packages.visible_count)
