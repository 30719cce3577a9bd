"""Turn raw key events into typing-session edits."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class EditKind(str, Enum):
    PRINTABLE = "printable"
    BACKSPACE = "backspace"
    ENTER = "enter"


@dataclass(frozen=True)
class Edit:
    kind: EditKind
    char: str = ""

    @classmethod
    def printable(cls, char: str) -> "Edit":
        if len(char) != 1:
            raise ValueError(f"expected a single character, got {char!r}")
        return cls(EditKind.PRINTABLE, char)

    @classmethod
    def backspace(cls) -> "Edit":
        return cls(EditKind.BACKSPACE)

    @classmethod
    def enter(cls) -> "Edit":
        return cls(EditKind.ENTER)

    def appended_char(self) -> Optional[str]:
        """Character this edit appends to the typed log, if any."""
        if self.kind == EditKind.PRINTABLE:
            return self.char
        if self.kind == EditKind.ENTER:
            # Enter stands in for space so a mobile "go" key still progresses.
            return " "
        return None


class RestartRequest:
    """Marker returned for the restart shortcut (Escape)."""

    def __repr__(self) -> str:
        return "RestartRequest()"


RESTART = RestartRequest()


@dataclass(frozen=True)
class KeyEvent:
    """A key press as reported by the host, named like DOM ``KeyboardEvent.key``."""

    key: str
    ctrl: bool = False
    meta: bool = False
    alt: bool = False

    @property
    def has_modifier(self) -> bool:
        return self.ctrl or self.meta or self.alt


def classify_key(event: KeyEvent) -> Optional[Union[Edit, RestartRequest]]:
    """Map a key event to an edit, a restart request, or None when it is not ours.

    Modifier chords are left to host shortcuts.
    """
    if event.has_modifier:
        return None
    key = event.key
    if key == "Escape":
        return RESTART
    if key == "Backspace":
        return Edit.backspace()
    if key == "Enter":
        return Edit.enter()
    if len(key) == 1 and key.isprintable():
        return Edit.printable(key)
    return None
