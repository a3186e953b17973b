from datetime import datetime

import pytest

from stormpanel.codes import RecordIdentifier, Status
from stormpanel.decoder import (RADII_FIELDS, decode_line, decode_lines, exclusion_reason,
                                parse_coordinate, parse_timestamp)
from stormpanel.errors import (InvalidCoordinate, InvalidTimestamp, UNKNOWN_RECORD_CODE,
                               UNKNOWN_STATUS_CODE, UNPARSEABLE_NUMBER)
from stormpanel.models import TaggedLine
from stormpanel.source import split_line


def _tagged(text, n=2):
    return TaggedLine(storm_id="AL011980", storm_name="TEST", line=split_line(n, text))


def test_timestamp():
    assert parse_timestamp("19800915", "1830") == datetime(1980, 9, 15, 18, 30)


@pytest.mark.parametrize("date,time", [
    ("1980091", "1200"), ("19800915", "120"), ("1980O915", "1200"),
    ("19800230", "0000"), ("19800915", "2500"),
])
def test_invalid_timestamp(date, time):
    with pytest.raises(InvalidTimestamp):
        parse_timestamp(date, time, line_number=9)


@pytest.mark.parametrize("raw,axis,expected", [
    ("28.5N", "NS", 28.5), ("15.0S", "NS", -15.0),
    ("079.0W", "EW", -79.0), ("171.2E", "EW", 171.2), ("0.0N", "NS", 0.0),
])
def test_coordinates(raw, axis, expected):
    assert parse_coordinate(raw, axis) == pytest.approx(expected)


@pytest.mark.parametrize("raw,axis", [
    ("28.5", "NS"), ("-28.5N", "NS"), ("28.5W", "NS"), ("79.0N", "EW"), ("", "EW"), ("7a.0W", "EW"),
])
def test_invalid_coordinates(raw, axis):
    with pytest.raises(InvalidCoordinate):
        parse_coordinate(raw, axis)


def test_latitude_sign_round_trip(data_line):
    for raw in ("28.5N", "12.3S"):
        obs, _ = decode_line(_tagged(data_line(lat=raw)))
        sign = 1 if raw.endswith("N") else -1
        assert sign * abs(obs.latitude) == pytest.approx(obs.latitude)
        assert abs(obs.latitude) == pytest.approx(float(raw[:-1]))


def test_decode_full_line(data_line):
    radii = (100, 90, 80, 70, 50, 40, 30, 20, 25, -999, 15, 10)
    obs, issues = decode_line(_tagged(data_line(
        date="19800805", time="1200", record="L", status="HU",
        lat="25.9N", lon="97.2W", wind=100, pressure=945, radii=radii, rmw=15)))
    assert issues == []
    assert obs.timestamp == datetime(1980, 8, 5, 12, 0)
    assert obs.record_identifier is RecordIdentifier.L
    assert obs.status is Status.HU
    assert (obs.latitude, obs.longitude) == (pytest.approx(25.9), pytest.approx(-97.2))
    assert obs.wind == pytest.approx(115.078)
    assert obs.pressure == 945
    assert obs.r34_ne == 100 and obs.r50_nw == 20 and obs.r64_sw == 15
    assert obs.r64_se is None
    assert obs.radius_max_wind == 15
    assert obs.month_key() == "1980-08"
    assert obs.category is None


def test_sentinels_become_missing(data_line):
    obs, issues = decode_line(_tagged(data_line(wind=-99, pressure=-999, radii=(-99,) * 12, rmw=-999)))
    assert issues == []
    assert obs.wind is None and obs.pressure is None and obs.radius_max_wind is None
    assert all(getattr(obs, name) is None for name in RADII_FIELDS)


def test_unknown_codes_are_not_fatal(data_line):
    obs, issues = decode_line(_tagged(data_line(record="X", status="ZZ")))
    assert obs.record_identifier is None
    assert obs.status is None
    assert [(i.kind, i.value) for i in issues] == [(UNKNOWN_RECORD_CODE, "X"), (UNKNOWN_STATUS_CODE, "ZZ")]


def test_unparseable_number(data_line):
    obs, issues = decode_line(_tagged(data_line(pressure="n/a")))
    assert obs.pressure is None
    assert [(i.kind, i.line_number) for i in issues] == [(UNPARSEABLE_NUMBER, 2)]


def test_bad_timestamp_names_line(data_line):
    with pytest.raises(InvalidTimestamp) as exc:
        decode_line(_tagged(data_line(date="1980XX01"), n=42))
    assert exc.value.line_number == 42
    assert "line 42" in str(exc.value)


def test_decoding_is_idempotent(data_line):
    t = _tagged(data_line(record="I", status="TS", wind=55, pressure=990))
    assert decode_line(t) == decode_line(t)


def test_decode_lines_keeps_order_with_workers(data_line):
    tagged = [_tagged(data_line(time=f"{h:02d}00", wind=20 + h), n=2 + h) for h in range(0, 24, 6)]
    serial, _ = decode_lines(tagged)
    parallel, _ = decode_lines(tagged, workers=2)
    assert parallel == serial
    assert [o.line_number for o in serial] == [2, 8, 14, 20]


def test_exclusion_reasons(data_line):
    keep, _ = decode_line(_tagged(data_line()))
    old, _ = decode_line(_tagged(data_line(date="19791231", time="1800")))
    late, _ = decode_line(_tagged(data_line(date="20230601")))
    far, _ = decode_line(_tagged(data_line(lon="181.0W")))
    assert exclusion_reason(keep) is None
    assert exclusion_reason(old) == "before_first_year"
    assert exclusion_reason(late, last_year=2022) == "after_last_year"
    assert exclusion_reason(late) is None
    assert exclusion_reason(far) == "longitude_below_-180"
