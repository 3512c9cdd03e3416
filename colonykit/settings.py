"""Game settings records and confirmation popup data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class SettingsQuality:
    """A named graphics quality level."""

    title: str = ""
    index: int = 0

    def __str__(self) -> str:
        return f"{{{self.title} {self.index}}}"


@dataclass
class SettingsResolution:
    """A screen resolution with its aspect ratio."""

    title: str = ""
    x: int = 0
    y: int = 0
    ratio_x: int = 0
    ratio_y: int = 0

    def item_name(self) -> str:
        """The resolution as shown in a selection list."""
        return f"{{{self.x}x{self.y} ({self.ratio_x}/{self.ratio_y})}}"

    def __str__(self) -> str:
        return f"{{ {self.title} : {self.item_name()}}}"


@dataclass
class SettingsAutosaveInterval:
    """A named autosave period in minutes."""

    title: str = ""
    minutes: int = 0

    def __str__(self) -> str:
        return f"{{{self.title}, {self.minutes} minutes}}"


def _bool_str(b: bool) -> str:
    return "true" if b else "false"


@dataclass
class GameSettings:
    """User settings; volumes range from 0 (silent) to 100 (full)."""

    volume_music: int = 0
    volume_game: int = 0
    volume_ui: int = 0
    quality: SettingsQuality = field(default_factory=SettingsQuality)
    resolution: SettingsResolution = field(default_factory=SettingsResolution)
    is_fullscreen: bool = False
    enable_vsync: bool = False
    interval: SettingsAutosaveInterval = field(default_factory=SettingsAutosaveInterval)

    def __str__(self) -> str:
        return (
            "{ "
            f"Music Volume: {self.volume_music}, "
            f"Game Volume: {self.volume_game}, "
            f"UI Volume: {self.volume_ui}, "
            f"Graphics Quality: {self.quality}, "
            f"Resolution: {self.resolution}, "
            f"Is Fullscreen: {_bool_str(self.is_fullscreen)}, "
            f"Enable VSync: {_bool_str(self.enable_vsync)}, "
            f"Autosave Intervals: {self.interval}, "
            "}"
        )


@dataclass
class SettingsDefaults:
    """The choices offered for each setting, and the default settings."""

    resolutions: list[SettingsResolution] = field(default_factory=list)
    qualities: list[SettingsQuality] = field(default_factory=list)
    intervals: list[SettingsAutosaveInterval] = field(default_factory=list)
    settings: GameSettings = field(default_factory=GameSettings)


@dataclass
class PopupConfirmationData:
    """Text and actions of a confirm-or-cancel popup."""

    title: str = ""
    description: str = ""
    cancel_str: str = "Cancel"
    ok_str: str = "Okay"
    confirm_action: Optional[Callable[[], None]] = None
    cancel_action: Optional[Callable[[], None]] = None
    init_action: Optional[Callable[[], None]] = None

    def on_confirmation(self) -> None:
        """Run when the popup is confirmed."""
        if self.confirm_action is not None:
            self.confirm_action()

    def on_cancel(self) -> None:
        """Run when the popup is cancelled."""
        if self.cancel_action is not None:
            self.cancel_action()

    def post_init(self) -> None:
        """Run once the popup has been built."""
        if self.init_action is not None:
            self.init_action()