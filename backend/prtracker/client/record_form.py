"""Add/edit form state for a single personal record.

The form only validates and normalizes input. It never talks to storage:
``submit`` hands the payload to a commit callback supplied by the caller
(normally ``RecordCollection``).

    idle --start_editing--> editing --submit--> submitting --ok--> idle
                              ^                     |
                              +-------failed--------+
"""

import re
from datetime import date
from enum import Enum
from typing import Callable, Optional, Union

from pydantic import ValidationError as SchemaValidationError

from prtracker.core.constants import COMMON_DISTANCES, CUSTOM_DISTANCE, MAX_MINUTES_SECONDS
from prtracker.core.errors import ValidationError
from prtracker.core.time_utils import format_for_display
from prtracker.schemas.record import RecordCreate, RecordRead, RecordUpdate


RecordPayload = Union[RecordCreate, RecordUpdate]

TIME_FIELDS = ("hours", "minutes", "seconds")
TEXT_FIELDS = ("location", "date")
DISTANCE_FIELDS = ("distance", "custom_distance")

_NON_DIGITS = re.compile(r"[^0-9]")


class FormState(str, Enum):
    idle = "idle"
    editing = "editing"
    submitting = "submitting"


def _blank_fields() -> dict[str, str]:
    return {"hours": "", "minutes": "", "seconds": "", "location": "", "date": ""}


class RecordForm:
    def __init__(self, record: RecordRead | None = None):
        self.record = record
        self.state = FormState.idle
        self.fields = _blank_fields()
        self.distance = ""
        self.custom_distance = ""
        self.is_custom_distance = False

    @property
    def is_new(self) -> bool:
        return self.record is None

    @property
    def record_id(self) -> Optional[str]:
        return self.record.id if self.record else None

    @property
    def effective_distance(self) -> str:
        if self.is_new:
            return self.custom_distance if self.is_custom_distance else self.distance
        return self.record.distance

    @property
    def display_time(self) -> str:
        return format_for_display(self.fields["hours"], self.fields["minutes"], self.fields["seconds"])

    @property
    def distance_options(self) -> list[str]:
        """Preset distances for the select, custom entry last."""
        return [*COMMON_DISTANCES, CUSTOM_DISTANCE]

    # -- lifecycle ----------------------------------------------------------

    def start_editing(self) -> None:
        """Open the form, pre-filled from the record when editing one."""
        if self.state is FormState.submitting:
            raise ValidationError("A save is already in progress")
        self._reset()
        if self.record is not None:
            self.fields = {
                "hours": str(self.record.hours),
                "minutes": str(self.record.minutes),
                "seconds": str(self.record.seconds),
                "location": self.record.race_location or "",
                "date": self.record.date_achieved.isoformat() if self.record.date_achieved else "",
            }
        self.state = FormState.editing

    def cancel(self) -> None:
        if self.state is FormState.editing:
            self._reset()
            self.state = FormState.idle

    def _reset(self) -> None:
        self.fields = _blank_fields()
        self.distance = ""
        self.custom_distance = ""
        self.is_custom_distance = False

    # -- input --------------------------------------------------------------

    def set_field(self, name: str, raw_value: str) -> bool:
        """Apply one user edit. Returns False when the value was rejected."""
        if self.state is not FormState.editing:
            raise ValidationError("Record is not being edited")

        value = raw_value or ""
        if name in TIME_FIELDS:
            digits = _NON_DIGITS.sub("", value)
            if name != "hours" and digits and int(digits) > MAX_MINUTES_SECONDS:
                return False
            self.fields[name] = digits
            return True

        if name in DISTANCE_FIELDS:
            if not self.is_new:
                raise ValidationError("Distance cannot be changed after a record is created")
            if name == "custom_distance":
                self.custom_distance = value
            elif value == CUSTOM_DISTANCE:
                self.is_custom_distance = True
                self.distance = ""
            else:
                self.is_custom_distance = False
                self.distance = value
            return True

        if name in TEXT_FIELDS:
            self.fields[name] = value
            return True

        raise ValidationError(f"Unknown field: {name}")

    def use_preset_distance(self) -> None:
        """Leave custom entry and go back to the preset list."""
        self.is_custom_distance = False

    # -- output -------------------------------------------------------------

    def _date_achieved(self) -> Optional[date]:
        text = self.fields["date"].strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:
            raise ValidationError("Date must be in YYYY-MM-DD format")

    def to_payload(self) -> RecordPayload:
        """Normalized fields ready for the store.

        Raises ValidationError when the distance is missing or a field
        cannot be normalized.
        """
        hours, minutes, seconds = (int(self.fields[k] or 0) for k in TIME_FIELDS)
        values = dict(
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            race_location=self.fields["location"] or None,
            date_achieved=self._date_achieved(),
        )
        try:
            if not self.is_new:
                return RecordUpdate(**values)
            distance = self.effective_distance.strip()
            if not distance:
                raise ValidationError("Please select a distance")
            return RecordCreate(distance=distance, **values)
        except SchemaValidationError as e:
            raise ValidationError(str(e)) from e

    def submit(self, commit: Callable[[RecordPayload], object]) -> RecordPayload:
        """Validate, hand the payload to `commit`, and clear on success.

        Errors from `commit` put the form back into editing with every
        entered value intact, then propagate.
        """
        if self.state is not FormState.editing:
            raise ValidationError("Record is not being edited")
        payload = self.to_payload()

        self.state = FormState.submitting
        try:
            commit(payload)
        except Exception:
            self.state = FormState.editing
            raise

        if self.record is not None:
            self.record = self.record.model_copy(update=payload.changes())
        self._reset()
        self.state = FormState.idle
        return payload
