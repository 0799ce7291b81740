from models import ProfileType


class Cursor:
    """Index into a list, always within ``[0, count - 1]`` (0 when empty)."""

    def __init__(self, pos=0):
        self.pos = pos

    def down(self, count):
        self.pos = max(0, min(self.pos + 1, count - 1))

    def up(self):
        self.pos = max(0, self.pos - 1)

    def top(self):
        self.pos = 0

    def bottom(self, count):
        self.pos = max(0, count - 1)

    def clamp(self, count):
        self.pos = max(0, min(self.pos, count - 1))

    def move(self, key, count):
        """Apply a motion key. Returns False when ``key`` is not a motion."""
        if key in ("j", "Down"):
            self.down(count)
        elif key in ("k", "Up"):
            self.up()
        elif key == "g":
            self.top()
        elif key == "G":
            self.bottom(count)
        else:
            return False
        return True


class OverviewState:
    def __init__(self):
        self.focus = ProfileType.SYSTEM
        self.cursors = {
            ProfileType.SYSTEM: Cursor(),
            ProfileType.HOME_MANAGER: Cursor(),
        }

    @property
    def cursor(self):
        return self.cursors[self.focus]


class PackagesState:
    def __init__(self):
        self.packages = []
        self.generation_id = None
        self.profile = ProfileType.SYSTEM
        self.cursor = Cursor()
        self.filter = ""
        self.editing = False

    def load(self, packages, generation_id, profile):
        self.packages = list(packages)
        self.generation_id = generation_id
        self.profile = profile
        self.filter = ""
        self.editing = False
        self.cursor.top()

    def visible(self):
        if not self.filter:
            return self.packages
        needle = self.filter.lower()
        return [p for p in self.packages if needle in p.name.lower()]

    @property
    def visible_count(self):
        return len(self.visible())

    def set_filter(self, text):
        self.filter = text
        self.cursor.top()

    def start_editing(self):
        self.editing = True
        self.set_filter("")

    def stop_editing(self, clear=False):
        self.editing = False
        if clear:
            self.set_filter("")

    @property
    def filter_active(self):
        return self.editing or bool(self.filter)


class DiffState:
    FROM = 0
    TO = 1

    def __init__(self):
        self.focus = DiffState.FROM
        self.cursors = [Cursor(), Cursor()]
        self.from_id = None
        self.to_id = None
        self.diff = None

    @property
    def cursor(self):
        return self.cursors[self.focus]

    def toggle_focus(self):
        self.focus = DiffState.TO if self.focus == DiffState.FROM else DiffState.FROM

    def select(self, generation_id):
        if self.focus == DiffState.FROM:
            self.from_id = generation_id
        else:
            self.to_id = generation_id

    @property
    def both_selected(self):
        return self.from_id is not None and self.to_id is not None

    def clear(self):
        self.from_id = None
        self.to_id = None
        self.diff = None


class ManageState:
    def __init__(self):
        self.profile = ProfileType.SYSTEM
        self.cursor = Cursor()
        self.selected = set()

    def switch_profile(self):
        self.profile = self.profile.other()
        self.cursor.top()
        self.selected.clear()


class SettingsState:
    def __init__(self):
        self.cursor = Cursor()
