"""Tests for Mojo response classification."""

import pytest

from crm_clients.mojo.models import CreatedContact, LOCKED_MESSAGE
from crm_clients.mojo.response import (
    BulkCreateResponse,
    Outcome,
    check_note_response,
    classify,
    decode_body,
    forbidden_message,
    parse_bulk_create_response,
)
from crm_clients.exceptions import (
    MojoDecodeError,
    MojoDuplicateError,
    MojoError,
    MojoInvalidError,
    MojoLockedError,
)


def test_classify_success():
    response = BulkCreateResponse.from_dict({
        "duplicated_api_contact_id": [],
        "errors": [],
        "result": [{"api_contact_id": "654A4BFB", "contact_id": 58}],
    })
    classification = classify(response)
    assert classification.outcome is Outcome.SUCCESS
    assert classification.created == [CreatedContact("654A4BFB", 58)]


def test_classify_locked():
    response = BulkCreateResponse(errors=[LOCKED_MESSAGE])
    assert classify(response).outcome is Outcome.LOCKED


def test_locked_wins_over_duplicate():
    response = BulkCreateResponse(
        errors=[LOCKED_MESSAGE],
        duplicated_api_contact_id=["X"],
    )
    assert classify(response).outcome is Outcome.LOCKED


def test_locked_requires_single_error():
    response = BulkCreateResponse(errors=[LOCKED_MESSAGE, "other"])
    classification = classify(response)
    assert classification.outcome is Outcome.INVALID
    assert classification.message == f"{LOCKED_MESSAGE} other"


def test_duplicate_wins_over_invalid():
    response = BulkCreateResponse.from_dict({
        "errors": ["Duplicated 'api_contact_id': X, Y"],
        "duplicated_api_contact_id": ["X", "Y"],
    })
    classification = classify(response)
    assert classification.outcome is Outcome.DUPLICATE
    assert classification.duplicated_ids == ["X", "Y"]


def test_duplicates_without_errors_is_success():
    response = BulkCreateResponse(duplicated_api_contact_id=["X"])
    assert classify(response).outcome is Outcome.SUCCESS


def test_invalid_joins_errors():
    response = BulkCreateResponse(errors=["first problem.", "second problem."])
    classification = classify(response)
    assert classification.outcome is Outcome.INVALID
    assert classification.message == "first problem. second problem."


def test_from_dict_handles_nulls():
    response = BulkCreateResponse.from_dict({"errors": None, "result": None})
    assert response.errors == []
    assert response.duplicated_api_contact_id == []
    assert response.result == []


def test_parse_duplicate():
    body = b'{"errors":["Duplicated \'api_contact_id\': X, Y"],"duplicated_api_contact_id":["X","Y"]}'
    with pytest.raises(MojoDuplicateError) as exc_info:
        parse_bulk_create_response(body)
    assert exc_info.value.ids == ["X", "Y"]


def test_parse_locked_is_generic_mojo_error():
    body = b'{"errors": ["Previous request was not finished or was interrupted."], "result": null}'
    with pytest.raises(MojoError) as exc_info:
        parse_bulk_create_response(body)
    assert isinstance(exc_info.value, MojoLockedError)
    assert str(exc_info.value) == "mojo: Previous request was not finished or was interrupted."


def test_parse_invalid():
    body = b'{"errors": ["All contacts should have the same group_id."], "result": null}'
    with pytest.raises(MojoInvalidError) as exc_info:
        parse_bulk_create_response(body)
    assert exc_info.value.msg == "All contacts should have the same group_id."


def test_parse_success_returns_created():
    body = (
        b'{"duplicated_api_contact_id": [], "errors": [], "result": ['
        b'{"api_contact_id": "f2d4a646", "contact_id": 816},'
        b'{"api_contact_id": "32ed3a5b", "contact_id": 815}]}'
    )
    assert parse_bulk_create_response(body) == [
        CreatedContact("f2d4a646", 816),
        CreatedContact("32ed3a5b", 815),
    ]


def test_decode_invalid_json():
    with pytest.raises(MojoDecodeError, match="decoding response body") as exc_info:
        decode_body(b"ops")
    assert "Expecting value" in str(exc_info.value)
    assert exc_info.value.__cause__ is not None


def test_decode_non_object():
    with pytest.raises(MojoDecodeError, match="expected a JSON object"):
        decode_body(b"[]")


@pytest.mark.parametrize(
    "body, expected",
    [
        (b'{"detail": "Invalid access_token"}', "Invalid access_token"),
        (b"get out of here", "get out of here"),
        (b'{"error": "ops"}', '{"error": "ops"}'),
        (b'{"detail": ""}', '{"detail": ""}'),
        (b'["detail"]', '["detail"]'),
    ],
)
def test_forbidden_message(body, expected):
    assert forbidden_message(body) == expected


def test_note_response_success():
    check_note_response(b"{}", "https://mojo.test/api/notes/", b"{}")
    check_note_response(b'{"non_field_errors": []}', "https://mojo.test/api/notes/", b"{}")


def test_note_response_errors():
    request_body = b'{"api_contact_id":"x","contents":"hi","type":1}'
    with pytest.raises(MojoInvalidError) as exc_info:
        check_note_response(
            b'{"non_field_errors": ["Contact not found.", "Try again."]}',
            "https://mojo.test/api/notes/",
            request_body,
        )
    err = exc_info.value
    assert err.msg == "Contact not found. Try again."
    assert err.url == "https://mojo.test/api/notes/"
    assert err.request_body == request_body.decode()


def test_note_response_bad_json():
    with pytest.raises(MojoDecodeError):
        check_note_response(b"<html>", "https://mojo.test/api/notes/", b"{}")


@pytest.mark.parametrize(
    "body",
    [
        b'{"errors": false}',
        b'{"errors": "boom"}',
        b'{"errors": [1, null]}',
        b'{"errors": ["Duplicated"], "duplicated_api_contact_id": "X"}',
        b'{"errors": [], "duplicated_api_contact_id": [7]}',
        b'{"errors": [], "result": {"api_contact_id": "x"}}',
        b'{"errors": [], "result": ["x"]}',
        b'{"errors": [], "result": [{"api_contact_id": 5, "contact_id": 1}]}',
        b'{"errors": [], "result": [{"api_contact_id": "x", "contact_id": "nope"}]}',
        b'{"errors": [], "result": [{"api_contact_id": "x", "contact_id": true}]}',
    ],
)
def test_parse_rejects_malformed_fields(body):
    with pytest.raises(MojoDecodeError, match="mojo: decoding response body"):
        parse_bulk_create_response(body)


@pytest.mark.parametrize(
    "body",
    [
        b'{"non_field_errors": "Contact not found."}',
        b'{"non_field_errors": [null]}',
        b'{"non_field_errors": false}',
    ],
)
def test_note_response_rejects_malformed_errors(body):
    with pytest.raises(MojoDecodeError):
        check_note_response(body, "https://mojo.test/api/notes/", b"{}")


def test_created_contact_id_may_be_missing():
    assert parse_bulk_create_response(b'{"result": [{"api_contact_id": "x"}]}') == [
        CreatedContact("x", None)
    ]
