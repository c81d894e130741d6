from backend.app.errors import (
    AlreadyActivated,
    Forbidden,
    InvalidToken,
    MissingField,
    StoreError,
    UpstreamUnavailable,
)


def test_payload_includes_detail():
    error = MissingField("userUids")

    assert error.payload == {
        "error": "missing_field",
        "message": "Missing required field: userUids",
        "field": "userUids",
    }


def test_client_errors_keep_their_message():
    error = AlreadyActivated("Trial already set")

    assert error.for_client("Failed to set trial") is error


def test_collaborator_errors_are_redacted():
    error = UpstreamUnavailable("adapty responded with status 503", detail={"http_status": 503})

    redacted = error.for_client("Failed to activate premium")

    assert redacted.payload == {"error": "upstream_unavailable", "message": "Failed to activate premium"}
    assert redacted.status_code == 500


def test_invalid_token_is_a_redacted_server_error():
    redacted = InvalidToken("Token has expired").for_client("Failed to set trial")

    assert redacted.status_code == 500
    assert redacted.payload["message"] == "Failed to set trial"


def test_http_exception_conversion():
    exc = Forbidden("No permission to send notifications").to_http_exception()

    assert exc.status_code == 403
    assert exc.detail == {"error": "forbidden", "message": "No permission to send notifications"}
    assert StoreError("boom").to_http_exception().status_code == 500
