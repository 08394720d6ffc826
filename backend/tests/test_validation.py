import pytest

from contact_relay.lib.validation import (
    ContactFieldError,
    to_submission,
    validate_contact,
)


def _payload(**overrides):
    data = {"name": "Ana", "email": "ana@example.com", "message": "Hello"}
    data.update(overrides)
    return data


def test_valid_submission_passes():
    result = validate_contact(_payload())
    assert result.is_valid
    assert result.error is None


@pytest.mark.parametrize("field", ["name", "email", "message"])
def test_missing_or_empty_field_is_required(field):
    missing = _payload()
    del missing[field]
    for data in (missing, _payload(**{field: ""}), _payload(**{field: None})):
        result = validate_contact(data)
        assert not result.is_valid
        assert result.code == ContactFieldError.MISSING_FIELD
        assert result.error == "All fields are required"


@pytest.mark.parametrize("data", [None, [], "name=Ana", b'{"name": "Ana"}'])
def test_non_object_payload_counts_as_missing_fields(data):
    assert validate_contact(data).code == ContactFieldError.MISSING_FIELD


def test_name_length_boundary():
    assert validate_contact(_payload(name="a" * 100)).is_valid
    result = validate_contact(_payload(name="a" * 101))
    assert result.code == ContactFieldError.INVALID_NAME
    assert result.error == "Invalid name"


def test_non_string_name_is_rejected():
    assert validate_contact(_payload(name=42)).code == ContactFieldError.INVALID_NAME


@pytest.mark.parametrize("email", ["a@b.co", "first.last@sub.example.org"])
def test_well_formed_emails_pass(email):
    assert validate_contact(_payload(email=email)).is_valid


@pytest.mark.parametrize(
    "email",
    ["not-an-email", "a@b", "a b@c.de", "a@@b.co", "@b.co", "a@b.co\n", 12345],
)
def test_malformed_emails_are_rejected(email):
    result = validate_contact(_payload(email=email))
    assert result.code == ContactFieldError.INVALID_EMAIL
    assert result.error == "Invalid email"


def test_message_length_boundary():
    assert validate_contact(_payload(message="m" * 1000)).is_valid
    result = validate_contact(_payload(message="m" * 1001))
    assert result.code == ContactFieldError.INVALID_MESSAGE
    assert result.error == "Invalid message"


def test_non_string_message_is_rejected():
    assert validate_contact(_payload(message=["hi"])).code == ContactFieldError.INVALID_MESSAGE


def test_first_failure_wins():
    result = validate_contact(_payload(name="a" * 101, email="nope", message="m" * 1001))
    assert result.code == ContactFieldError.INVALID_NAME


def test_to_submission_ignores_extra_keys():
    submission = to_submission(_payload(extra="ignored"))
    assert submission.model_dump() == {"name": "Ana", "email": "ana@example.com", "message": "Hello"}


@pytest.mark.parametrize(
    "field, code",
    [
        ("name", ContactFieldError.INVALID_NAME),
        ("email", ContactFieldError.INVALID_EMAIL),
        ("message", ContactFieldError.INVALID_MESSAGE),
    ],
)
@pytest.mark.parametrize("value", [[], {}, True])
def test_empty_containers_count_as_present_but_invalid(field, code, value):
    assert validate_contact(_payload(**{field: value})).code == code


@pytest.mark.parametrize("value", [0, 0.0, False, float("nan")])
def test_zero_false_and_nan_count_as_missing(value):
    assert validate_contact(_payload(name=value)).code == ContactFieldError.MISSING_FIELD
