"""Form engine: ordered field capture ending in a yes/no confirm gate.

Used for project create/edit, variable create/edit and plain confirmation
dialogs. There is no validation beyond the confirm gate; empty strings are
valid values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from venom.core.messages import KeyInput

CONFIRM_KEY = "confirm"

FieldKind = Literal["input", "confirm"]

_NEXT_KEYS = {"enter", "tab", "down"}
_PREV_KEYS = {"shift+tab", "up"}


class FormState(Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass
class Field:
    """A named field bound to a draft value."""

    key: str
    title: str
    kind: FieldKind = "input"
    value: Union[str, bool] = ""
    description: str = ""
    affirmative: str = "Yes"
    negative: str = "No"


def input_field(key: str, title: str, value: str = "") -> Field:
    """Free-text field pre-filled with ``value``."""
    return Field(key=key, title=title, kind="input", value=value)


def confirm_field(
    title: str = "Confirm Changes",
    description: str = "",
    default: bool = True,
    key: str = CONFIRM_KEY,
) -> Field:
    """Yes/No field; ``default`` is the preselected answer."""
    return Field(key=key, title=title, kind="confirm", value=default, description=description)


class Form:
    """Processes key events field by field until the confirm field is answered."""

    def __init__(self, fields: list[Field], title: str = "") -> None:
        self.title = title
        self.fields = fields
        self.focus = 0
        self.state = FormState.ACTIVE

    @property
    def focused(self) -> Field:
        return self.fields[self.focus]

    def is_complete(self) -> bool:
        return self.state is FormState.COMPLETED

    def _field(self, key: str) -> Field:
        for f in self.fields:
            if f.key == key:
                return f
        raise KeyError(key)

    def get_string(self, key: str) -> str:
        value = self._field(key).value
        return value if isinstance(value, str) else str(value)

    def get_bool(self, key: str) -> bool:
        return bool(self._field(key).value)

    def _complete(self) -> None:
        self.state = FormState.COMPLETED

    def _move(self, step: int) -> None:
        self.focus = max(0, min(len(self.fields) - 1, self.focus + step))

    def update(self, event: KeyInput) -> tuple["Form", bool]:
        """Apply one key event. Returns ``(form, is_complete)``.

        Escape completes the form declined. On the confirm field ``y``/``n``
        answer and submit at once, left/right toggle, enter submits.
        """
        if self.is_complete():
            return self, True
        if event.key == "escape":
            self._field(CONFIRM_KEY).value = False
            self._complete()
            return self, True

        field = self.focused
        if field.kind == "confirm":
            self._update_confirm(field, event)
        else:
            self._update_input(field, event)
        return self, self.is_complete()

    def _update_input(self, field: Field, event: KeyInput) -> None:
        text = str(field.value)
        if event.key in _NEXT_KEYS:
            self._move(1)
        elif event.key in _PREV_KEYS:
            self._move(-1)
        elif event.key == "backspace":
            field.value = text[:-1]
        elif event.key == "ctrl+u":
            field.value = ""
        elif event.is_printable:
            field.value = text + (event.character or "")

    def _update_confirm(self, field: Field, event: KeyInput) -> None:
        key = event.key
        if key in ("left", "h"):
            field.value = True
        elif key in ("right", "l"):
            field.value = False
        elif key in ("tab", "space"):
            field.value = not field.value
        elif key == "y":
            field.value = True
            self._complete()
        elif key == "n":
            field.value = False
            self._complete()
        elif key == "enter":
            self._complete()
        elif key in _PREV_KEYS:
            self._move(-1)


def new_form(fields: list[Field], title: str = "") -> Form:
    """Build a form; a confirm field is appended when the caller did not supply one."""
    if not any(f.key == CONFIRM_KEY for f in fields):
        fields = [*fields, confirm_field()]
    return Form(fields, title=title)


def confirm_form(message: str = "", description: str = "") -> Form:
    """Stand-alone yes/no dialog, defaulting to No."""
    return Form(
        [
            confirm_field(
                title=message or "Are you sure?",
                description=description or "This action cannot be undone.",
                default=False,
            )
        ]
    )
