"""Tests for reading and session validation."""

from datetime import date

from validation import sanitize_string, validate_bp_reading, validate_bp_session


def _session(**overrides):
    session = {
        "date": date(2026, 3, 1),
        "time_of_day": "morning",
        "readings": [{"systolic": 122, "diastolic": 78, "pulse": 64}],
        "notes": "",
    }
    session.update(overrides)
    return session


class TestValidateReading:
    def test_valid(self):
        assert validate_bp_reading({"systolic": 120, "diastolic": 80, "pulse": 70}) == (True, [])

    def test_missing(self):
        assert validate_bp_reading(None) == (False, ["Reading is required"])

    def test_out_of_range(self):
        ok, errors = validate_bp_reading({"systolic": 300, "diastolic": 20})
        assert not ok
        assert "Systolic must be between 60 and 250" in errors
        assert "Diastolic must be between 40 and 150" in errors

    def test_not_numbers(self):
        ok, errors = validate_bp_reading({"systolic": "120", "diastolic": None})
        assert errors == ["Systolic must be a number", "Diastolic must be a number"]

    def test_pulse_range(self):
        ok, errors = validate_bp_reading({"systolic": 120, "diastolic": 80, "pulse": 10})
        assert errors == ["Pulse must be between 30 and 220"]

    def test_fractional_values_rejected(self):
        ok, errors = validate_bp_reading({"systolic": 129.9, "diastolic": 79.9, "pulse": 70.5})
        assert not ok
        assert "Systolic must be a whole number" in errors
        assert "Diastolic must be a whole number" in errors
        assert "Pulse must be a whole number" in errors

    def test_whole_floats_accepted(self):
        assert validate_bp_reading({"systolic": 120.0, "diastolic": 80.0, "pulse": 70.0}) == (True, [])

    def test_systolic_above_diastolic(self):
        ok, errors = validate_bp_reading({"systolic": 90, "diastolic": 90})
        assert errors == ["Systolic must be greater than diastolic"]

    def test_arm(self):
        ok, errors = validate_bp_reading({"systolic": 120, "diastolic": 80, "arm": "X"})
        assert not ok


class TestValidateSession:
    def test_valid(self):
        assert validate_bp_session(_session()) == (True, [])

    def test_iso_string_date(self):
        assert validate_bp_session(_session(date="2026-03-01"))[0]

    def test_bad_date(self):
        ok, errors = validate_bp_session(_session(date="03/01/2026"))
        assert errors == ["Invalid date format"]

    def test_time_of_day(self):
        ok, errors = validate_bp_session(_session(time_of_day="night"))
        assert not ok

    def test_no_readings(self):
        assert validate_bp_session(_session(readings=[])) == (False, ["At least one reading is required"])

    def test_reading_errors_are_numbered(self):
        ok, errors = validate_bp_session(_session(readings=[
            {"systolic": 120, "diastolic": 80},
            {"systolic": 80, "diastolic": 90},
        ]))
        assert errors == ["Reading 2: Systolic must be greater than diastolic"]

    def test_notes_length(self):
        ok, errors = validate_bp_session(_session(notes="x" * 1001))
        assert not ok


def test_sanitize_string():
    assert sanitize_string("  after coffee\x00 ") == "after coffee"
    assert sanitize_string(None) == ""
    assert len(sanitize_string("a" * 2000)) == 1000
