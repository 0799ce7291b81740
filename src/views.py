import flet as ft

from constants import (
    APP_NAME,
    LAYOUT_LABELS,
    SETTINGS_ITEMS,
    STATUS_HINTS,
    THEME_LABELS,
    THEMES,
)
from controls import (
    DialogCard,
    FlashToast,
    GenerationRow,
    GlassContainer,
    LoadingCard,
    UndoToast,
)
from models import ProfileType, Tab
from navigation import DiffState
from popups import ConfirmPopup, ErrorPopup, LoadingPopup, UndoPopup


def visible_window(items, pos, size=40):
    """Slice of ``items`` around ``pos`` so the cursor stays on screen."""
    if len(items) <= size:
        return 0, items
    start = max(0, min(pos - size // 2, len(items) - size))
    return start, items[start : start + size]


class Dashboard:
    """Builds the whole page from the controller state on every frame."""

    def __init__(self, app):
        self.app = app

    @property
    def palette(self):
        return THEMES[self.app.settings.theme]

    def build(self, width):
        palette = self.palette
        body = ft.Column(
            [
                self.header(),
                self.tab_bar(),
                ft.Container(content=self.tab_view(width), expand=True),
                self.status_bar(),
            ],
            spacing=8,
            expand=True,
        )

        layers = [ft.Container(content=body, padding=12, expand=True, bgcolor=palette["bg"])]
        overlay = self.overlay()
        if overlay is not None:
            layers.append(
                ft.Container(
                    content=overlay,
                    alignment=ft.alignment.center,
                    bgcolor=ft.Colors.with_opacity(0.4, ft.Colors.BLACK),
                    expand=True,
                )
            )
        flash = self.flash()
        if flash is not None:
            layers.append(
                ft.Container(content=flash, alignment=ft.alignment.bottom_center, bottom=50, left=0, right=0)
            )
        return ft.Stack(layers, expand=True)

    # --- Chrome ---
    def header(self):
        app, palette = self.app, self.palette
        info = app.system_info
        parts = [
            ft.Text(APP_NAME, size=20, weight=ft.FontWeight.BOLD, color=palette["accent"]),
            ft.Text(f"{info.username}@{info.hostname}", color=palette["fg"]),
            ft.Text("flakes" if info.uses_flakes else "channels", color=palette["fg_dim"]),
        ]
        if app.registry.has_home_manager:
            parts.append(ft.Text("Home-Manager", color=palette["fg_dim"]))
        if app.dry_run:
            parts.append(ft.Text("DRY RUN", weight=ft.FontWeight.BOLD, color=palette["warning"]))
        return ft.Row(parts, spacing=15, vertical_alignment=ft.CrossAxisAlignment.CENTER)

    def tab_bar(self):
        palette = self.palette
        tabs = []
        for tab in Tab:
            active = tab is self.app.active_tab
            tabs.append(
                ft.Container(
                    content=ft.Text(
                        f"{tab.index + 1} {tab.label}",
                        weight=ft.FontWeight.BOLD if active else ft.FontWeight.NORMAL,
                        color=(palette["bg"] or ft.Colors.BLACK) if active else palette["fg"],
                    ),
                    bgcolor=palette["accent"] if active else None,
                    border=ft.border.all(1, palette["accent"] if active else palette["border"]),
                    border_radius=15,
                    padding=ft.padding.symmetric(horizontal=14, vertical=6),
                )
            )
        return ft.Row(tabs, spacing=8)

    def status_bar(self):
        app, palette = self.app, self.palette
        hint = STATUS_HINTS[app.active_tab.name.lower()]
        if app.active_tab is Tab.PACKAGES and app.packages.editing:
            hint = "[Type] Filter  [Enter] Done  [Esc] Clear  [Up/Down] Navigate"
        return ft.Container(
            content=ft.Text(hint, size=12, color=palette["fg_dim"]),
            border=ft.border.only(top=ft.BorderSide(1, palette["border"])),
            padding=ft.padding.only(top=6),
        )

    def panel(self, title, content, focused=False, expand=True):
        palette = self.palette
        return GlassContainer(
            content=ft.Column(
                [
                    ft.Text(
                        title,
                        weight=ft.FontWeight.BOLD,
                        color=palette["accent"] if focused else palette["fg"],
                    ),
                    ft.Container(content=content, expand=True),
                ],
                spacing=6,
                expand=True,
            ),
            palette=palette,
            opacity=0.04,
            focused=focused,
            padding=10,
            expand=expand,
        )

    def generation_list(self, profile, cursor, highlight=True, checked=None, markers=None):
        app, palette = self.app, self.palette
        gens = app.registry.generations_for(profile)
        if not gens:
            return ft.Text("No generations", color=palette["fg_dim"])
        start, window = visible_window(gens, cursor.pos)
        rows = []
        for offset, gen in enumerate(window):
            rows.append(
                GenerationRow(
                    gen,
                    app.settings,
                    palette,
                    highlighted=highlight and start + offset == cursor.pos,
                    checked=None if checked is None else gen.id in checked,
                    marker=(markers or {}).get(gen.id),
                )
            )
        return ft.Column(rows, spacing=2, scroll=ft.ScrollMode.AUTO)

    # --- Tabs ---
    def tab_view(self, width):
        views = {
            Tab.OVERVIEW: self.overview_view,
            Tab.PACKAGES: self.packages_view,
            Tab.DIFF: self.diff_view,
            Tab.MANAGE: self.manage_view,
            Tab.SETTINGS: self.settings_view,
        }
        return views[self.app.active_tab](width)

    def overview_view(self, width):
        app = self.app
        ov = app.overview

        def profile_panel(profile):
            count = len(app.registry.generations_for(profile))
            return self.panel(
                f"{profile.label} Generations ({count})",
                self.generation_list(profile, ov.cursors[profile], highlight=ov.focus is profile),
                focused=ov.focus is profile,
            )

        if app.use_side_by_side(width):
            return ft.Row(
                [profile_panel(ProfileType.SYSTEM), profile_panel(ProfileType.HOME_MANAGER)],
                spacing=10,
                expand=True,
                vertical_alignment=ft.CrossAxisAlignment.STRETCH,
            )
        return ft.Column([profile_panel(ov.focus)], expand=True)

    def packages_view(self, width):
        app, palette = self.app, self.palette
        pk = app.packages
        if pk.generation_id is None:
            return self.panel(
                "Packages",
                ft.Text("Select a generation in Overview and press Enter", color=palette["fg_dim"]),
            )

        visible = pk.visible()
        filter_line = f"/{pk.filter}" + ("_" if pk.editing else "")
        header = ft.Row(
            [
                ft.Text(
                    f"{len(visible)} of {len(pk.packages)} packages",
                    color=palette["fg_dim"],
                ),
                ft.Text(filter_line, color=palette["accent"]) if pk.filter_active else ft.Container(),
            ],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )

        start, window = visible_window(visible, pk.cursor.pos)
        rows = []
        for offset, pkg in enumerate(window):
            selected = start + offset == pk.cursor.pos
            rows.append(
                ft.Container(
                    content=ft.Row(
                        [
                            ft.Text(pkg.name, color=palette["selection_fg"] if selected else palette["fg"], expand=True),
                            ft.Text(pkg.version, color=palette["fg_dim"], width=160),
                            ft.Text(pkg.formatted_size() if pkg.size else "", color=palette["fg_dim"], width=80),
                        ]
                    ),
                    bgcolor=palette["selection_bg"] if selected else None,
                    padding=ft.padding.symmetric(horizontal=10, vertical=4),
                    border_radius=6,
                )
            )
        if not rows:
            rows.append(ft.Text("No packages match", color=palette["fg_dim"]))

        return self.panel(
            f"{pk.profile.label} generation #{pk.generation_id}",
            ft.Column([header, ft.Column(rows, spacing=1, scroll=ft.ScrollMode.AUTO, expand=True)], expand=True),
            focused=True,
        )

    def diff_view(self, width):
        app, palette = self.app, self.palette
        df = app.diff

        def selector(which, title, chosen):
            focused = df.focus == which
            label = f"{title}: #{chosen}" if chosen is not None else f"{title}: -"
            markers = {chosen: "*"} if chosen is not None else None
            return self.panel(
                label,
                self.generation_list(ProfileType.SYSTEM, df.cursors[which], highlight=focused, markers=markers),
                focused=focused,
            )

        selectors = ft.Row(
            [selector(DiffState.FROM, "From", df.from_id), selector(DiffState.TO, "To", df.to_id)],
            spacing=10,
            expand=True,
            vertical_alignment=ft.CrossAxisAlignment.STRETCH,
        )
        return ft.Column([selectors, self.diff_result()], spacing=10, expand=True)

    def diff_result(self):
        palette = self.palette
        df = self.app.diff
        if df.diff is None:
            return self.panel(
                "Diff",
                ft.Text("Pick a From and a To generation with Enter", color=palette["fg_dim"]),
                expand=1,
            )

        diff = df.diff
        lines = []
        for pkg in diff.added:
            lines.append(ft.Text(f"+ {pkg.name} {pkg.version}", color=palette["diff_added"]))
        for pkg in diff.removed:
            lines.append(ft.Text(f"- {pkg.name} {pkg.version}", color=palette["diff_removed"]))
        for upd in diff.updated:
            tags = ""
            if upd.is_kernel:
                tags += " [kernel]"
            if upd.is_security:
                tags += " [security]"
            lines.append(
                ft.Text(
                    f"~ {upd.name} {upd.old_version} -> {upd.new_version}{tags}",
                    color=palette["warning"] if tags else palette["diff_updated"],
                )
            )
        if diff.is_empty():
            lines.append(ft.Text("No package differences", color=palette["fg_dim"]))

        return self.panel(
            f"#{df.from_id} -> #{df.to_id}   {diff.summary()}",
            ft.Column(lines, spacing=1, scroll=ft.ScrollMode.AUTO),
            focused=True,
            expand=1,
        )

    def manage_view(self, width):
        app, palette = self.app, self.palette
        mg = app.manage
        title = f"Manage {mg.profile.label} Generations"
        if mg.selected:
            title += f"  ({len(mg.selected)} selected)"
        if app.registry.has_home_manager:
            title += "   [Tab] switch profile"
        return self.panel(
            title,
            self.generation_list(mg.profile, mg.cursor, checked=mg.selected),
            focused=True,
        )

    def settings_view(self, width):
        app, palette = self.app, self.palette
        settings = app.settings
        rows = []
        for idx, (label, key) in enumerate(SETTINGS_ITEMS):
            if key == "theme":
                value = THEME_LABELS[settings.theme]
            elif key == "layout":
                value = LAYOUT_LABELS[settings.layout]
            else:
                value = "On" if getattr(settings, key) else "Off"
            selected = idx == app.settings_tab.cursor.pos
            rows.append(
                ft.Container(
                    content=ft.Row(
                        [
                            ft.Text(label, color=palette["selection_fg"] if selected else palette["fg"], expand=True),
                            ft.Text(value, color=palette["accent"], weight=ft.FontWeight.BOLD),
                        ]
                    ),
                    bgcolor=palette["selection_bg"] if selected else None,
                    padding=ft.padding.symmetric(horizontal=10, vertical=8),
                    border_radius=6,
                )
            )
        rows.append(
            ft.Text(f"Settings file: {settings.config_file}", size=12, color=palette["fg_dim"])
        )
        return self.panel("Settings", ft.Column(rows, spacing=4), focused=True)

    # --- Overlays ---
    def overlay(self):
        popup, palette = self.app.popup, self.palette
        if isinstance(popup, ConfirmPopup):
            return DialogCard(
                popup.title, popup.message, palette, "[y] Yes  [n/Esc] No",
                accent=palette["warning"], command=popup.command,
            )
        if isinstance(popup, ErrorPopup):
            return DialogCard(popup.title, popup.message, palette, "[o/Enter/Esc] OK", accent=palette["error"])
        if isinstance(popup, UndoPopup):
            return UndoToast(popup.message, popup.seconds_remaining, palette)
        if isinstance(popup, LoadingPopup):
            return LoadingCard(popup.message, palette)
        return None

    def flash(self):
        flash = self.app.flash
        if flash is None:
            return None
        return FlashToast(flash.message, flash.is_error, self.palette)
