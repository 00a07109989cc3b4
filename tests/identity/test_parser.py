import json

import pytest

from school_attendance.core.enums import PayloadShape, ValidationReason
from school_attendance.identity.model import ActorContext, ParsedIdentity, ParseError, ScannedIdentity
from school_attendance.identity.parser import PARSE_ORDER, parse_identity
from school_attendance.qr.codec import encode_payload

ACTOR = ActorContext(teacher_id="T-1", school_id="SCH-1", grade_level=11, section="Rizal")


def test_parse_order_is_json_then_delimited_then_bare():
    assert PARSE_ORDER == (PayloadShape.JSON, PayloadShape.DELIMITED, PayloadShape.BARE)


def test_delimited_payload_round_trips():
    identity = ScannedIdentity(
        student_id="S-1001", full_name="Juan Dela Cruz", grade_level=11, section="Rizal", school_id="SCH-1"
    )

    parsed = parse_identity(encode_payload(identity), ACTOR)

    assert isinstance(parsed, ParsedIdentity)
    assert parsed.shape == PayloadShape.DELIMITED
    assert parsed.identity == identity


def test_delimited_payload_ignores_extra_fields():
    parsed = parse_identity("S-1|Ana Reyes|11|Rizal|SCH-1|STEM|extra", ACTOR)

    assert isinstance(parsed, ParsedIdentity)
    assert parsed.identity.school_id == "SCH-1"
    assert parsed.identity.strand is None


def test_delimited_payload_with_non_numeric_grade_means_unknown_grade():
    parsed = parse_identity("S-1|Ana Reyes|eleven|Rizal|SCH-1", ACTOR)

    assert isinstance(parsed, ParsedIdentity)
    assert parsed.identity.grade_level == 0


@pytest.mark.parametrize("raw", ["S-1|Ana", "S-1|Ana|11", "S-1|Ana|11|Rizal"])
def test_two_to_four_fields_are_invalid(raw):
    parsed = parse_identity(raw, ACTOR)

    assert isinstance(parsed, ParseError)
    assert parsed.reason == ValidationReason.INVALID_FORMAT


def test_single_token_uses_actor_school_and_unknown_placeholders():
    parsed = parse_identity("  S-1001  ", ACTOR)

    assert isinstance(parsed, ParsedIdentity)
    assert parsed.shape == PayloadShape.BARE
    assert parsed.identity.student_id == "S-1001"
    assert parsed.identity.school_id == "SCH-1"
    assert parsed.identity.section == "Unknown"
    assert parsed.identity.full_name == "Unknown"
    assert parsed.identity.grade_level == 0


def test_numeric_bare_id_is_not_taken_for_json():
    parsed = parse_identity("20250001", ACTOR)

    assert isinstance(parsed, ParsedIdentity)
    assert parsed.shape == PayloadShape.BARE
    assert parsed.identity.student_id == "20250001"


def test_json_payload_with_camel_case_keys():
    raw = json.dumps(
        {
            "studentId": "S-1",
            "fullName": "Ana Reyes",
            "gradeLevel": 11,
            "section": "Rizal",
            "schoolId": "SCH-1",
            "strand": "STEM",
        }
    )

    parsed = parse_identity(raw, ACTOR)

    assert isinstance(parsed, ParsedIdentity)
    assert parsed.shape == PayloadShape.JSON
    assert parsed.identity.strand == "STEM"
    assert parsed.identity.grade_level == 11


def test_json_payload_with_pascal_case_keys():
    raw = '{"StudentId": "S-1", "FullName": "Ana", "GradeLevel": "11", "Section": "Rizal", "SchoolId": "SCH-1"}'

    parsed = parse_identity(raw, ACTOR)

    assert isinstance(parsed, ParsedIdentity)
    assert parsed.identity.student_id == "S-1"
    assert parsed.identity.grade_level == 11


def test_json_payload_missing_a_required_field_is_invalid():
    parsed = parse_identity('{"studentId": "S-1", "fullName": "Ana"}', ACTOR)

    assert isinstance(parsed, ParseError)


@pytest.mark.parametrize("raw", ["", "   ", None, "|Ana|11|Rizal|SCH-1"])
def test_blank_input_or_blank_student_id_is_invalid(raw):
    assert isinstance(parse_identity(raw, ACTOR), ParseError)


def test_bare_id_without_actor_has_empty_school():
    parsed = parse_identity("S-1", None)

    assert isinstance(parsed, ParsedIdentity)
    assert parsed.identity.school_id == ""
