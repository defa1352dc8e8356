from typing import Any

EVENT_CALLBACK = "event_callback"
URL_VERIFICATION = "url_verification"


def validate_data(data: dict[str, Any]) -> bool:
    """Validate a Slack Events API payload."""
    request_type = data.get("type")

    # Slack sends either a URL verification handshake or an event callback
    if request_type not in (EVENT_CALLBACK, URL_VERIFICATION):
        raise ValueError(f"Unknown request type: {request_type}")

    if request_type == URL_VERIFICATION:
        if not data.get("challenge") or not isinstance(data.get("challenge"), str):
            raise ValueError("No challenge provided in the verification request")
        return True

    event = data.get("event")
    if not isinstance(event, dict):
        raise ValueError("No event provided in the Slack request")

    # Only plain messages (and app mentions) are handled
    if event.get("type") not in ("message", "app_mention"):
        raise ValueError(f"Unsupported event type: {event.get('type')}")

    if not event.get("channel"):
        raise ValueError("No channel provided in the Slack event")

    if not event.get("text") or not isinstance(event.get("text"), str):
        raise ValueError("No text provided in the Slack event")

    if not event.get("user") and not event.get("bot_id"):
        raise ValueError("No user provided in the Slack event")

    return True


def process_event_data(event: dict[str, Any]) -> dict[str, Any]:
    """Extract and validate the Slack payload from the incoming event."""
    data: dict[str, Any] = event.get("payload", {})

    try:
        validate_data(data)
    except ValueError as e:
        raise ValueError(f"Invalid data: {e}") from e
    return data
