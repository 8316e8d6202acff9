from datetime import date

import pytest

from prtracker.client.record_form import FormState, RecordForm
from prtracker.core.errors import ValidationError, WriteError
from prtracker.schemas.record import RecordCreate, RecordRead, RecordUpdate


def new_form() -> RecordForm:
    form = RecordForm()
    form.start_editing()
    return form


def existing_record(**overrides) -> RecordRead:
    values = dict(
        id="rec-1",
        user_id="user-1",
        distance="10K",
        hours=0,
        minutes=41,
        seconds=5,
        race_location="Spring 10K",
        date_achieved=date(2025, 4, 6),
    )
    values.update(overrides)
    return RecordRead(**values)


@pytest.mark.parametrize("raw", ["", "0", "7", "07", "59"])
def test_minutes_and_seconds_in_range_are_accepted(raw):
    form = new_form()
    assert form.set_field("minutes", raw)
    assert form.set_field("seconds", raw)
    assert form.fields["minutes"] == raw
    assert form.fields["seconds"] == raw


@pytest.mark.parametrize("raw", ["60", "75", "99", "100"])
def test_out_of_range_minutes_keep_previous_value(raw):
    form = new_form()
    form.set_field("minutes", "10")
    assert form.set_field("minutes", raw) is False
    assert form.fields["minutes"] == "10"


def test_non_digits_are_stripped():
    form = new_form()
    form.set_field("hours", "1h2")
    form.set_field("seconds", "3s")
    assert form.fields["hours"] == "12"
    assert form.fields["seconds"] == "3"
    # nothing left after stripping counts as empty, which is allowed
    assert form.set_field("minutes", "ab")
    assert form.fields["minutes"] == ""


def test_hours_have_no_upper_bound():
    form = new_form()
    assert form.set_field("hours", "125")
    assert form.fields["hours"] == "125"


def test_custom_distance_mode():
    form = new_form()
    form.set_field("distance", "5K")
    form.set_field("distance", "custom")
    assert form.is_custom_distance
    assert form.distance == ""

    form.set_field("custom_distance", "15 Miles")
    assert form.effective_distance == "15 Miles"

    form.use_preset_distance()
    assert form.effective_distance == ""


def test_missing_distance_is_a_validation_error():
    form = new_form()
    form.set_field("hours", "1")
    form.set_field("minutes", "05")
    form.set_field("seconds", "30")
    with pytest.raises(ValidationError):
        form.to_payload()


def test_payload_for_new_record():
    form = new_form()
    form.set_field("distance", "5K")
    form.set_field("hours", "")
    form.set_field("minutes", "20")
    form.set_field("seconds", "15")
    form.set_field("location", "Parkrun")
    form.set_field("date", "2025-03-01")

    payload = form.to_payload()
    assert isinstance(payload, RecordCreate)
    assert (payload.hours, payload.minutes, payload.seconds) == (0, 20, 15)
    assert payload.race_location == "Parkrun"
    assert payload.date_achieved == date(2025, 3, 1)
    assert form.display_time == "00:20:15"


def test_bad_date_is_a_validation_error():
    form = new_form()
    form.set_field("distance", "5K")
    form.set_field("date", "March 1st")
    with pytest.raises(ValidationError):
        form.to_payload()


def test_set_field_requires_editing():
    form = RecordForm()
    assert form.state is FormState.idle
    with pytest.raises(ValidationError):
        form.set_field("minutes", "5")


def test_submit_success_clears_form():
    form = new_form()
    form.set_field("distance", "Marathon")
    form.set_field("hours", "3")
    committed = []

    payload = form.submit(committed.append)

    assert committed == [payload]
    assert form.state is FormState.idle
    assert form.fields["hours"] == ""
    assert form.distance == ""


def test_submit_failure_keeps_values():
    form = new_form()
    form.set_field("distance", "Marathon")
    form.set_field("hours", "3")

    def failing(payload):
        assert form.state is FormState.submitting
        raise WriteError("Could not save personal record")

    with pytest.raises(WriteError):
        form.submit(failing)

    assert form.state is FormState.editing
    assert form.fields["hours"] == "3"
    assert form.distance == "Marathon"


def test_edit_form_prefills_and_builds_update():
    form = RecordForm(existing_record())
    form.start_editing()
    assert form.fields["minutes"] == "41"
    assert form.fields["date"] == "2025-04-06"

    form.set_field("seconds", "2")
    payload = form.to_payload()
    assert isinstance(payload, RecordUpdate)
    assert payload.seconds == 2
    assert "distance" not in payload.model_dump()


def test_distance_is_fixed_after_creation():
    form = RecordForm(existing_record())
    form.start_editing()
    with pytest.raises(ValidationError):
        form.set_field("distance", "Marathon")


def test_cancel_discards_edits():
    form = RecordForm(existing_record())
    form.start_editing()
    form.set_field("minutes", "1")
    form.cancel()
    assert form.state is FormState.idle

    form.start_editing()
    assert form.fields["minutes"] == "41"


def test_distance_options_end_with_custom_entry():
    options = new_form().distance_options
    assert options[:2] == ["5K", "10K"]
    assert "Marathon" in options
    assert options[-1] == "custom"


def test_record_date_display():
    assert existing_record().date_display == "Apr 6, 2025"
    assert existing_record(date_achieved=None).date_display is None
    assert "date_display" not in existing_record().model_dump()
