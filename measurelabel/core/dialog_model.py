"""
Toolkit-independent model of the style dialog

Holds the field values, dispatches change events to dialog listeners and
records how the dialog was closed. The customtkinter StyleDialog builds its
widgets on top of this; tests drive it directly.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from measurelabel.analysis.measurement import TEXT_LOCATIONS
from measurelabel.core.style import StyleSettings

LINE_WIDTH = "Line width"
LINE_COLOR = "Line color"
FONT_SIZE = "Font size"
TEXT_COLOR = "Text color"
TEXT_LOCATION = "Text location"
LENGTH_DIGITS = "Significant figures"
SAVE_TO_OVERLAY = "Save to overlay?"


@dataclass(frozen=True)
class FieldSpec:
    label: str
    kind: str  # 'number', 'string', 'choice' or 'checkbox'
    choices: Tuple[str, ...] = ()


FIELDS: Sequence[FieldSpec] = (
    FieldSpec(LINE_WIDTH, 'number'),
    FieldSpec(LINE_COLOR, 'string'),
    FieldSpec(FONT_SIZE, 'number'),
    FieldSpec(TEXT_COLOR, 'string'),
    FieldSpec(TEXT_LOCATION, 'choice', TEXT_LOCATIONS),
    FieldSpec(LENGTH_DIGITS, 'number'),
    FieldSpec(SAVE_TO_OVERLAY, 'checkbox'),
)


@dataclass(frozen=True)
class DialogEvent:
    """A single field change"""
    field: str
    value: Any


DialogListener = Callable[['DialogModel', Optional[DialogEvent]], bool]


def _format_number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


class DialogModel:
    """Field values and listener dispatch for the style dialog"""

    def __init__(self, settings: StyleSettings, title: str = "ROI Properties Update"):
        self.logger = logging.getLogger(__name__)
        self.title = title
        self.values: Dict[str, Any] = {
            LINE_WIDTH: _format_number(settings.line_width),
            LINE_COLOR: settings.line_color,
            FONT_SIZE: _format_number(settings.font_size),
            TEXT_COLOR: settings.text_color,
            TEXT_LOCATION: settings.text_location,
            LENGTH_DIGITS: _format_number(settings.length_digits),
            SAVE_TO_OVERLAY: bool(settings.save_to_overlay),
        }
        self.listeners: List[DialogListener] = []
        self.valid = True
        self._oked = False
        self._canceled = False

    def add_dialog_listener(self, listener: DialogListener) -> None:
        self.listeners.append(listener)

    def notify_shown(self) -> None:
        """Only the first listener hears about the dialog opening, with no event"""
        if self.listeners:
            self.listeners[0](self, None)

    def set_field(self, label: str, value: Any) -> bool:
        """
        Store a new field value and notify every listener in order

        Args:
            label: Field label (one of the FIELDS labels)
            value: New raw value as entered

        Returns:
            True if all listeners accepted the change
        """
        if label not in self.values:
            raise KeyError(f"Unknown dialog field: {label}")
        self.values[label] = value
        event = DialogEvent(label, value)
        self.logger.debug(f"Dialog field changed: {label} = {value!r}")

        self.valid = True
        for listener in self.listeners:
            if not listener(self, event):
                self.valid = False
                break
        return self.valid

    def get_settings(self) -> StyleSettings:
        """Parse the current field values; raises ValueError on invalid input"""
        return StyleSettings(
            line_width=float(self.values[LINE_WIDTH]),
            line_color=str(self.values[LINE_COLOR]).strip(),
            text_color=str(self.values[TEXT_COLOR]).strip(),
            font_size=float(self.values[FONT_SIZE]),
            text_location=str(self.values[TEXT_LOCATION]),
            length_digits=int(float(self.values[LENGTH_DIGITS])),
            save_to_overlay=bool(self.values[SAVE_TO_OVERLAY]),
        ).validated()

    def show_dialog(self) -> None:
        """Headless show: announce the dialog; subclasses add widgets and block"""
        self.notify_shown()

    def ok(self) -> None:
        self._oked = True
        self._canceled = False

    def cancel(self) -> None:
        self._oked = False
        self._canceled = True

    def was_oked(self) -> bool:
        return self._oked

    def was_canceled(self) -> bool:
        return self._canceled
