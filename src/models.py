import datetime
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from utils import format_bytes


class ProfileType(Enum):
    SYSTEM = "system"
    HOME_MANAGER = "home-manager"

    @property
    def label(self):
        return "System" if self is ProfileType.SYSTEM else "Home-Manager"

    def other(self):
        if self is ProfileType.SYSTEM:
            return ProfileType.HOME_MANAGER
        return ProfileType.SYSTEM


class Tab(Enum):
    OVERVIEW = 0
    PACKAGES = 1
    DIFF = 2
    MANAGE = 3
    SETTINGS = 4

    @property
    def index(self):
        return self.value

    @property
    def label(self):
        return self.name.capitalize()

    @classmethod
    def from_index(cls, idx):
        for tab in cls:
            if tab.value == idx:
                return tab
        return cls.OVERVIEW


@dataclass
class Generation:
    id: int
    date: datetime.datetime
    is_current: bool = False
    nixos_version: Optional[str] = None
    kernel_version: Optional[str] = None
    package_count: int = 0
    closure_size: int = 0
    store_path: str = ""
    is_pinned: bool = False
    in_bootloader: bool = False

    def formatted_date(self):
        return self.date.strftime("%d.%m.%y %H:%M")

    def formatted_size(self):
        return format_bytes(self.closure_size)


@dataclass(frozen=True)
class Package:
    name: str
    version: str
    size: int = 0

    def formatted_size(self):
        return format_bytes(self.size)


@dataclass(frozen=True)
class GenerationSource:
    profile_type: ProfileType
    profile_path: Path

    def generation_path(self, generation_id):
        # Links live next to the profile: system-142-link, home-manager-89-link
        parent = self.profile_path.parent
        return parent / f"{self.profile_type.value}-{generation_id}-link"
