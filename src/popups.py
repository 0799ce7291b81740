from dataclasses import dataclass
from typing import Optional, Union

from constants import FLASH_SECONDS


@dataclass
class ConfirmPopup:
    title: str
    message: str
    command: str


@dataclass
class ErrorPopup:
    title: str
    message: str


@dataclass
class UndoPopup:
    message: str
    seconds_remaining: int


@dataclass
class LoadingPopup:
    message: str


Popup = Union[ConfirmPopup, ErrorPopup, UndoPopup, LoadingPopup]


@dataclass
class Flash:
    message: str
    is_error: bool
    shown_at: float

    def expired(self, now):
        return now - self.shown_at >= FLASH_SECONDS


class Presentation:
    """The single active overlay plus the transient flash line."""

    def __init__(self, clock):
        self.clock = clock
        self.popup: Optional[Popup] = None
        self.flash: Optional[Flash] = None

    def show_error(self, title, message):
        self.popup = ErrorPopup(title=title, message=message)

    def show_flash(self, message, is_error=False):
        self.flash = Flash(message=message, is_error=is_error, shown_at=self.clock())

    def clear_expired_flash(self):
        if self.flash is not None and self.flash.expired(self.clock()):
            self.flash = None
            return True
        return False

    def close(self):
        self.popup = None
