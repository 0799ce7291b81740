import flet as ft

from constants import UNDO_SECONDS

# --- Custom Controls ---


class GlassContainer(ft.Container):
    def __init__(
        self, content, palette, opacity=0.1, blur_sigma=15, border_radius=12, focused=False, **kwargs
    ):
        bg_color = kwargs.pop("bgcolor", None)
        if bg_color is None:
            bg_color = ft.Colors.with_opacity(opacity, palette["fg"])
        if "border" not in kwargs:
            border_col = palette["border_focused"] if focused else palette["border"]
            kwargs["border"] = ft.border.all(2 if focused else 1, border_col)
        super().__init__(
            content=content,
            bgcolor=bg_color,
            blur=ft.Blur(blur_sigma, blur_sigma, ft.BlurTileMode.MIRROR),
            border_radius=border_radius,
            shadow=ft.BoxShadow(
                spread_radius=1,
                blur_radius=15,
                color=ft.Colors.with_opacity(0.1, ft.Colors.BLACK),
            ),
            **kwargs,
        )


class Badge(ft.Container):
    def __init__(self, text, color):
        super().__init__(
            content=ft.Text(text, size=11, weight=ft.FontWeight.BOLD, color=color),
            padding=ft.padding.symmetric(horizontal=6, vertical=1),
            border_radius=8,
            border=ft.border.all(1, color),
        )


class GenerationRow(ft.Container):
    """One generation line: id, date, badges and the enabled detail columns."""

    def __init__(self, gen, settings, palette, highlighted=False, checked=None, marker=None):
        fg = palette["selection_fg"] if highlighted else palette["fg"]

        cells = []
        if checked is not None:
            cells.append(
                ft.Icon(
                    ft.Icons.CHECK_BOX if checked else ft.Icons.CHECK_BOX_OUTLINE_BLANK,
                    size=16,
                    color=palette["accent"] if checked else palette["fg_dim"],
                )
            )
        if marker:
            cells.append(ft.Text(marker, size=12, weight=ft.FontWeight.BOLD, color=palette["accent"]))

        cells.append(ft.Text(f"#{gen.id}", weight=ft.FontWeight.BOLD, color=fg, width=60))
        cells.append(ft.Text(gen.formatted_date(), color=fg, width=110))

        if settings.show_nixos_version:
            cells.append(ft.Text(gen.nixos_version or "-", color=palette["fg_dim"], width=150, no_wrap=True))
        if settings.show_kernel_version and gen.kernel_version:
            cells.append(ft.Text(gen.kernel_version, color=palette["fg_dim"], width=80))
        if settings.show_package_count:
            cells.append(ft.Text(f"{gen.package_count} pkgs", color=palette["fg_dim"], width=80))
        if settings.show_size:
            cells.append(ft.Text(gen.formatted_size(), color=palette["fg_dim"], width=80))

        if gen.is_current:
            cells.append(Badge("current", palette["current"]))
        if gen.is_pinned:
            cells.append(Badge("pinned", palette["pinned"]))
        if settings.show_boot_entry and gen.in_bootloader:
            cells.append(Badge("boot", palette["boot"]))

        rows = [ft.Row(cells, spacing=10, vertical_alignment=ft.CrossAxisAlignment.CENTER)]
        if settings.show_store_path and gen.store_path:
            rows.append(ft.Text(gen.store_path, size=11, color=palette["fg_dim"], no_wrap=True))

        super().__init__(
            content=ft.Column(rows, spacing=2, tight=True),
            bgcolor=palette["selection_bg"] if highlighted else None,
            padding=ft.padding.symmetric(horizontal=10, vertical=6),
            border_radius=6,
        )


class DialogCard(GlassContainer):
    """Blocking popup card: a title, a message and the accepted keys."""

    def __init__(self, title, message, palette, hint, accent=None, command=None):
        accent = accent or palette["accent"]
        body = [
            ft.Text(title, size=20, weight=ft.FontWeight.BOLD, color=accent),
            ft.Divider(height=10, color=palette["border"]),
            ft.Text(message, color=palette["fg"], selectable=True),
        ]
        if command:
            body.append(
                ft.Container(
                    content=ft.Text(command, font_family="monospace", size=12, color=palette["fg"], selectable=True),
                    bgcolor=ft.Colors.with_opacity(0.2, ft.Colors.BLACK),
                    padding=10,
                    border_radius=8,
                )
            )
        body.append(ft.Divider(height=10, color=palette["border"]))
        body.append(ft.Row([ft.Text(hint, color=palette["fg_dim"], size=12)], alignment=ft.MainAxisAlignment.END))

        super().__init__(
            content=ft.Column(body, spacing=10, tight=True),
            palette=palette,
            bgcolor=palette["bg"] or ft.Colors.with_opacity(0.9, "#1a202c"),
            border=ft.border.all(1, accent),
            width=520,
            padding=20,
            border_radius=15,
        )


class UndoToast(ft.Container):
    """Countdown toast for the undo window, redrawn from the controller state."""

    def __init__(self, message, seconds_remaining, palette, duration_seconds=UNDO_SECONDS):
        counter_text = ft.Text(
            str(seconds_remaining),
            size=12,
            weight=ft.FontWeight.BOLD,
            color=ft.Colors.WHITE,
        )
        progress_ring = ft.ProgressRing(
            value=seconds_remaining / duration_seconds,
            stroke_width=3,
            color=ft.Colors.WHITE,
            width=24,
            height=24,
        )

        content = ft.Row(
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
            vertical_alignment=ft.CrossAxisAlignment.CENTER,
            controls=[
                ft.Row(
                    spacing=15,
                    controls=[
                        ft.Stack(
                            [
                                progress_ring,
                                ft.Container(
                                    content=counter_text,
                                    alignment=ft.alignment.center,
                                    width=24,
                                    height=24,
                                ),
                            ]
                        ),
                        ft.Text(message, color=ft.Colors.WHITE, weight=ft.FontWeight.W_500),
                    ],
                ),
                ft.Row(
                    [
                        ft.Icon(ft.Icons.UNDO, size=16, color=ft.Colors.BLUE_200),
                        ft.Text("[u] Undo  [Esc] Accept", weight=ft.FontWeight.BOLD, color=ft.Colors.BLUE_200),
                    ],
                    spacing=5,
                ),
            ],
        )
        super().__init__(
            content=content,
            bgcolor=ft.Colors.with_opacity(0.4, "#742a2a"),
            blur=ft.Blur(15, 15, ft.BlurTileMode.MIRROR),
            padding=ft.padding.symmetric(horizontal=20, vertical=12),
            border=ft.border.all(1, palette["warning"]),
            border_radius=30,
            shadow=ft.BoxShadow(
                blur_radius=15,
                color=ft.Colors.with_opacity(0.5, ft.Colors.BLACK),
                offset=ft.Offset(0, 5),
            ),
            width=480,
        )


class LoadingCard(GlassContainer):
    def __init__(self, message, palette):
        super().__init__(
            content=ft.Row(
                [
                    ft.ProgressRing(width=20, height=20, stroke_width=3, color=palette["accent"]),
                    ft.Text(message, color=palette["fg"], weight=ft.FontWeight.W_500),
                ],
                spacing=15,
                tight=True,
            ),
            palette=palette,
            bgcolor=palette["bg"] or ft.Colors.with_opacity(0.9, "#1a202c"),
            padding=ft.padding.symmetric(horizontal=24, vertical=16),
            border_radius=15,
        )


class FlashToast(GlassContainer):
    def __init__(self, message, is_error, palette):
        color = palette["error"] if is_error else palette["success"]
        super().__init__(
            content=ft.Row(
                [
                    ft.Icon(ft.Icons.ERROR_OUTLINE if is_error else ft.Icons.CHECK_CIRCLE_OUTLINE, color=color, size=18),
                    ft.Text(message, color=color, weight=ft.FontWeight.BOLD),
                ],
                spacing=8,
                tight=True,
            ),
            palette=palette,
            bgcolor=ft.Colors.with_opacity(0.15, "#2D3748"),
            border=ft.border.all(1, color),
            padding=ft.padding.symmetric(horizontal=16, vertical=10),
            border_radius=25,
        )
