import pytest

from coastwatch.core.errors import BadRequest
from coastwatch.models.report import HazardType, Severity
from coastwatch.services.validation import check_coordinates, parse_enum, parse_id, parse_optional_enum


@pytest.mark.parametrize("raw", ["tsunami", "TSUNAMI", "Tsunami", "  tsunami "])
def test_parse_enum_is_case_insensitive(raw):
    assert parse_enum(HazardType, raw, "hazard type") is HazardType.TSUNAMI


def test_parse_enum_names_offending_value():
    with pytest.raises(BadRequest) as exc:
        parse_enum(Severity, "Extreme", "severity")
    assert exc.value.message == "Invalid severity: Extreme"


def test_parse_optional_enum_allows_blank():
    assert parse_optional_enum(Severity, None, "severity") is None
    assert parse_optional_enum(Severity, "", "severity") is None
    assert parse_optional_enum(Severity, "high", "severity") is Severity.HIGH


@pytest.mark.parametrize("raw,expected", [("1", 1), ("42", 42), (7, 7)])
def test_parse_id_accepts_positive_integers(raw, expected):
    assert parse_id(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "0", "-1", "1.5", "12abc", "", "²", True, 0, -3, None])
def test_parse_id_rejects_everything_else(raw):
    with pytest.raises(BadRequest) as exc:
        parse_id(raw)
    assert exc.value.message == "Invalid report ID"


def test_check_coordinates_bounds():
    check_coordinates(-90, 180)
    with pytest.raises(BadRequest):
        check_coordinates(90.5, 0)
    with pytest.raises(BadRequest):
        check_coordinates(0, -181)
