import os

# --- Constants ---
APP_NAME = "nixhist"
APP_VERSION = "0.1.0"
CONFIG_DIR = os.path.expanduser("~/.config/nixhist")
CONFIG_FILE = os.path.join(CONFIG_DIR, "settings.json")

SYSTEM_PROFILE = "/nix/var/nix/profiles/system"
PER_USER_PROFILES = "/nix/var/nix/profiles/per-user"
BOOT_ENTRIES_DIR = "/boot/loader/entries"
GRUB_CONFIG = "/boot/grub/grub.cfg"

# --- Timing (seconds) ---
FLASH_SECONDS = 3
UNDO_SECONDS = 10
POLL_INTERVAL = 0.1

# --- Diff classification ---
KERNEL_PREFIX = "linux-"
SECURITY_PACKAGES = [
    "openssl", "openssh", "gnupg", "gpg", "sudo", "polkit",
    "pam", "shadow", "nss", "ca-certificates", "curl", "wget",
]

# --- Settings ---
THEME_NAMES = ["gruvbox", "nord", "transparent"]
THEME_LABELS = {"gruvbox": "Gruvbox", "nord": "Nord", "transparent": "Transparent"}

LAYOUT_MODES = ["auto", "side-by-side", "tabs-only"]
LAYOUT_LABELS = {
    "auto": "Auto (responsive)",
    "side-by-side": "Side-by-side",
    "tabs-only": "Tabs only",
}

# Window width (px) from which "auto" shows both profiles next to each other
SIDE_BY_SIDE_MIN_WIDTH = 1000

DISPLAY_DEFAULTS = {
    "show_nixos_version": True,
    "show_kernel_version": True,
    "show_package_count": True,
    "show_size": True,
    "show_store_path": False,
    "show_boot_entry": True,
}

# (label, settings key) in Settings tab order
SETTINGS_ITEMS = [
    ("Theme", "theme"),
    ("Layout", "layout"),
    ("Show NixOS Version", "show_nixos_version"),
    ("Show Kernel Version", "show_kernel_version"),
    ("Show Package Count", "show_package_count"),
    ("Show Size", "show_size"),
    ("Show Boot Entry", "show_boot_entry"),
]

# --- Palettes ---
# None means "use the page default" (transparent theme)
THEMES = {
    "gruvbox": {
        "bg": "#282828", "fg": "#ebdbb2", "fg_dim": "#928374",
        "accent": "#fe8019", "accent_dim": "#d65d0e",
        "success": "#b8bb26", "warning": "#fabd2f", "error": "#fb4934",
        "border": "#504945", "border_focused": "#a89984",
        "selection_bg": "#504945", "selection_fg": "#ebdbb2",
        "diff_added": "#b8bb26", "diff_removed": "#fb4934", "diff_updated": "#83a598",
        "current": "#b8bb26", "pinned": "#fabd2f", "boot": "#83a598",
    },
    "nord": {
        "bg": "#2e3440", "fg": "#eceff4", "fg_dim": "#4c566a",
        "accent": "#88c0d0", "accent_dim": "#5e81ac",
        "success": "#a3be8c", "warning": "#ebcb8b", "error": "#bf616a",
        "border": "#3b4252", "border_focused": "#88c0d0",
        "selection_bg": "#4c566a", "selection_fg": "#eceff4",
        "diff_added": "#a3be8c", "diff_removed": "#bf616a", "diff_updated": "#81a1c1",
        "current": "#a3be8c", "pinned": "#ebcb8b", "boot": "#88c0d0",
    },
    "transparent": {
        "bg": None, "fg": "onSurface", "fg_dim": "onSurfaceVariant",
        "accent": "cyan", "accent_dim": "blue",
        "success": "green", "warning": "yellow", "error": "red",
        "border": "outline", "border_focused": "cyan",
        "selection_bg": "surfaceVariant", "selection_fg": "onSurface",
        "diff_added": "green", "diff_removed": "red", "diff_updated": "blue",
        "current": "green", "pinned": "yellow", "boot": "cyan",
    },
}

STATUS_HINTS = {
    "overview": "[j/k] Navigate  [Tab] Switch Panel  [Enter] View Packages  [q] Quit",
    "packages": "[j/k] Navigate  [/] Filter  [Esc] Back  [q] Quit",
    "diff": "[Tab] Switch Selector  [j/k] Move  [Enter] Select  [C] Clear  [q] Quit",
    "manage": "[Space] Select  [R] Restore  [D] Delete  [P] Pin  [q] Quit",
    "settings": "[j/k] Navigate  [Enter] Change  [q] Quit",
}
