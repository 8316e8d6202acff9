import re
from datetime import date

import pytest

from prtracker.core.errors import ValidationError
from prtracker.core.time_utils import (
    format_date_achieved,
    format_for_display,
    split_time_text,
)


@pytest.mark.parametrize(
    "parts, expected",
    [
        (("", "20", "15"), "00:20:15"),
        (("1", "5", "3"), "01:05:03"),
        (("01", "05", "03"), "01:05:03"),
        ((None, None, None), "00:00:00"),
        (("", "007", "0"), "00:07:00"),
        ((2, 3, 4), "02:03:04"),
    ],
)
def test_format_for_display(parts, expected):
    assert format_for_display(*parts) == expected


def test_format_for_display_shape():
    for h in ("", "0", "9", "12"):
        for m in ("", "0", "5", "59"):
            assert re.fullmatch(r"\d\d:\d\d:\d\d", format_for_display(h, m, m))



def test_split_time_text():
    assert split_time_text("19:42") == (0, 19, 42)
    assert split_time_text("3:14:56") == (3, 14, 56)
    with pytest.raises(ValidationError):
        split_time_text("1:75:00")
    with pytest.raises(ValidationError):
        split_time_text("fast")


def test_format_date_achieved():
    assert format_date_achieved(date(2025, 1, 5)) == "Jan 5, 2025"
    assert format_date_achieved(None) is None
