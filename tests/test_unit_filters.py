from carhire.utils.filters import fmt_iso_local


def test_utc_timestamp_shown_in_display_timezone():
    assert fmt_iso_local("2023-12-01T10:00:00+00:00") == "01/12/2023 15:30"
    assert fmt_iso_local("2023-12-01T10:00:00Z", tz_name="UTC") == "01/12/2023 10:00"


def test_date_only_and_garbage():
    assert fmt_iso_local("2024-01-03") == "03/01/2024"
    assert fmt_iso_local("not a date") == "not a date"
    assert fmt_iso_local(None) == ""
