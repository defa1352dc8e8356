from typing import Any

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from chat_agent.infrastructure.data_models import AssistantMessage, Message, UserMessage


def post_to_slack(
    *, channel_id: str, slack_bot_token: str, message: str, thread_ts: str | None = None
) -> dict[str, Any]:
    """Post a message to Slack, optionally as a reply in a thread."""
    if not channel_id:
        error_msg = (
            "Argument 'channel_id' is not set. You must provide a channel ID to post to Slack."
        )
        return {"ok": False, "error": error_msg}
    if not message:
        error_msg = "Argument 'message' is not set. You must provide a message to post to Slack."
        return {"ok": False, "error": error_msg}
    if not slack_bot_token:
        return {"ok": False, "error": "SLACK_BOT_TOKEN is not configured"}

    try:
        client = WebClient(token=slack_bot_token)
        response = client.chat_postMessage(channel=channel_id, text=message, thread_ts=thread_ts)

        if response.get("ok"):
            return {
                "ok": True,
                "ts": response.get("ts"),
                "channel": response.get("channel"),
            }
        return {"ok": False, "error": f"Slack API error: {response.get('error')}"}

    except SlackApiError as e:
        error_msg = f"Slack API error: {e.response.get('error', str(e)) if e.response else str(e)}"
        return {"ok": False, "error": error_msg}


def is_bot_author(event: dict[str, Any], bot_user_id: str | None = None) -> bool:
    """True when the Slack message event was written by a bot (ours or another)."""
    if event.get("bot_id"):
        return True
    return bool(bot_user_id) and event.get("user") == bot_user_id


def message_from_slack_event(event: dict[str, Any], bot_user_id: str | None = None) -> Message:
    """
    Convert a Slack message event into a conversation message.

    Messages written by the bot become assistant messages, everything else becomes a
    user message named after the Slack user id. The text is kept byte-for-byte.

    Args:
        event: The ``event`` object of a Slack Events API callback.
        bot_user_id: Slack user id of the bot.

    Returns:
        Message: AssistantMessage or UserMessage.
    """
    text = event.get("text") or ""
    if is_bot_author(event, bot_user_id):
        return AssistantMessage(content=text)
    return UserMessage(content=text, name=event.get("user"))


def message_to_text(message: Message) -> str:
    """Text to post for a message; the content is returned unchanged."""
    return message.content or ""
