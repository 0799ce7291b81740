import argparse
import queue
import sys

import flet as ft

from app import App, AppState
from constants import APP_NAME, APP_VERSION, POLL_INTERVAL
from detect import DetectionError, detect_system
from generations import GenerationError
from keys import normalize_event
from state import Settings
from views import Dashboard

# Loop signals that are not keys
CLOSE = object()
RESIZE = object()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Browse, compare, restore and delete NixOS generations.",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="show the commands restore and delete would run without running them",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"{APP_NAME} {APP_VERSION}"
    )
    return parser.parse_args(argv)


def build_app(dry_run=False):
    print("Detecting system configuration...", file=sys.stderr)
    system_info = detect_system()

    settings = Settings()
    settings.load_settings()

    print("Loading generations...", file=sys.stderr)
    return App(system_info, settings, dry_run=dry_run)


# --- Main Application ---


def run_dashboard(page: ft.Page, app):
    page.title = f"{APP_NAME} {APP_VERSION}"
    page.theme_mode = ft.ThemeMode.DARK
    page.padding = 0

    keys = queue.Queue()
    dashboard = Dashboard(app)

    def draw():
        page.controls.clear()
        page.controls.append(dashboard.build(page.width or 0))
        page.update()

    def on_keyboard(e: ft.KeyboardEvent):
        # The loop is blocked inside the command while loading
        if app.state() is AppState.LOADING:
            return
        key = normalize_event(e)
        if key is not None:
            keys.put(key)

    page.on_keyboard_event = on_keyboard
    page.on_resized = lambda e: keys.put(RESIZE)
    page.on_disconnect = lambda e: keys.put(CLOSE)
    app.redraw = draw

    dirty = True
    while not app.should_quit:
        if dirty:
            draw()
            dirty = False

        if app.tick():
            dirty = True

        try:
            key = keys.get(timeout=POLL_INTERVAL)
        except queue.Empty:
            continue

        if key is CLOSE:
            return
        if key is not RESIZE:
            app.handle_key(key)
        dirty = True

    page.window.close()


def run(argv=None):
    """Parse the command line and run the dashboard. Returns the exit code."""
    try:
        args = parse_args(argv)
    except SystemExit as e:
        # --help, --version and usage errors
        return e.code or 0

    try:
        app = build_app(dry_run=args.dry_run)
    except (DetectionError, GenerationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    ft.app(target=lambda page: run_dashboard(page, app))
    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
