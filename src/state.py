import json
import os
import sys
from pathlib import Path

from constants import (
    CONFIG_FILE,
    DISPLAY_DEFAULTS,
    LAYOUT_MODES,
    SETTINGS_ITEMS,
    THEME_NAMES,
)
from models import ProfileType


# --- Settings Management ---
class Settings:
    def __init__(self, config_file=CONFIG_FILE):
        self.config_file = config_file
        self.theme = "gruvbox"
        self.layout = "auto"

        # Display options
        self.show_nixos_version = DISPLAY_DEFAULTS["show_nixos_version"]
        self.show_kernel_version = DISPLAY_DEFAULTS["show_kernel_version"]
        self.show_package_count = DISPLAY_DEFAULTS["show_package_count"]
        self.show_size = DISPLAY_DEFAULTS["show_size"]
        self.show_store_path = DISPLAY_DEFAULTS["show_store_path"]
        self.show_boot_entry = DISPLAY_DEFAULTS["show_boot_entry"]

        # Pinned generations (protected from deletion)
        self.pinned = {
            ProfileType.SYSTEM: set(),
            ProfileType.HOME_MANAGER: set(),
        }

    def load_settings(self):
        """Read the settings file, writing a default one when it is missing.

        Unreadable or malformed files are reported and leave the defaults in
        place; absent keys keep their default values.
        """
        if not os.path.exists(self.config_file):
            try:
                self.save_settings()
            except OSError as e:
                print(f"Error saving settings: {e}", file=sys.stderr)
            return

        try:
            with open(self.config_file, "r") as f:
                data = json.load(f)
            self.apply_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            print(f"Error loading settings: {e}", file=sys.stderr)

    def apply_dict(self, data):
        # Parse everything first so a bad value leaves settings untouched
        theme = data.get("theme", self.theme)
        layout = data.get("layout", self.layout)

        display_data = data.get("display", {})
        display = {
            key: bool(display_data.get(key, default))
            for key, default in DISPLAY_DEFAULTS.items()
        }

        pinned_data = data.get("pinned", {})
        pinned = {
            ProfileType.SYSTEM: {int(i) for i in pinned_data.get("system", [])},
            ProfileType.HOME_MANAGER: {int(i) for i in pinned_data.get("home_manager", [])},
        }

        if theme in THEME_NAMES:
            self.theme = theme
        if layout in LAYOUT_MODES:
            self.layout = layout
        for key, value in display.items():
            setattr(self, key, value)
        self.pinned = pinned

    def to_dict(self):
        return {
            "theme": self.theme,
            "layout": self.layout,
            "display": {key: getattr(self, key) for key in DISPLAY_DEFAULTS},
            "pinned": {
                "system": sorted(self.pinned[ProfileType.SYSTEM]),
                "home_manager": sorted(self.pinned[ProfileType.HOME_MANAGER]),
            },
        }

    def save_settings(self):
        # Errors propagate: a failed save is shown to the user
        Path(self.config_file).parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self.to_dict(), f, indent=4)

    # --- Pin Logic ---
    def is_pinned(self, profile, generation_id):
        return generation_id in self.pinned[profile]

    def toggle_pin(self, profile, generation_id):
        pins = self.pinned[profile]
        if generation_id in pins:
            pins.discard(generation_id)
            return False
        pins.add(generation_id)
        return True

    # --- Settings tab ---
    def cycle_theme(self):
        idx = THEME_NAMES.index(self.theme)
        self.theme = THEME_NAMES[(idx + 1) % len(THEME_NAMES)]

    def cycle_layout(self):
        idx = LAYOUT_MODES.index(self.layout)
        self.layout = LAYOUT_MODES[(idx + 1) % len(LAYOUT_MODES)]

    def activate_item(self, index):
        """Cycle or toggle the Settings tab item at ``index``."""
        key = SETTINGS_ITEMS[index][1]
        if key == "theme":
            self.cycle_theme()
        elif key == "layout":
            self.cycle_layout()
        else:
            setattr(self, key, not getattr(self, key))
