import asyncio
import json
import logging
from typing import Any

from chat_agent.app.config import AgentSettings
from chat_agent.app.process_event import URL_VERIFICATION, process_event_data
from chat_agent.infrastructure.data_models import completion_text
from chat_agent.infrastructure.platform_manager import create_logger
from chat_agent.infrastructure.slack_manager import (
    is_bot_author,
    message_from_slack_event,
    post_to_slack,
)
from chat_agent.services.agent_service import ChatAgent
from chat_agent.services.errors import ChatAgentError

APOLOGY_MESSAGE = "Sorry, something went wrong while answering. Please try again."

default_logger = create_logger(logger_name="chat-agent", log_level="INFO")


def create_response(
    status_code: int, body: str, content_type: str = "text/plain"
) -> dict[str, Any]:
    """
    Create a standard HTTP response.

    Args:
        status_code (int): HTTP status code.
        body (str): Response body.
        content_type (str, optional): Content-Type header. Defaults to "text/plain".

    Returns:
        dict: Standardized response dictionary.
    """
    return {
        "statusCode": status_code,
        "body": body,
        "headers": {"Content-Type": content_type},
        "isBase64Encoded": False,
    }


async def process(
    event: dict[str, Any],
    *,
    agent: ChatAgent,
    settings: AgentSettings,
    logger: logging.Logger | None = None,
) -> dict[str, Any]:
    """Process one Slack Events API delivery."""
    logger = logger or default_logger

    # Process the event data
    try:
        data = process_event_data(event)
    except ValueError as e:
        logger.error(e)
        return create_response(status_code=400, body=str(e), content_type="text/plain")

    # Slack checks the endpoint by asking for its challenge back
    if data["type"] == URL_VERIFICATION:
        return create_response(
            status_code=200,
            body=json.dumps({"challenge": data["challenge"]}),
            content_type="application/json",
        )

    slack_event: dict[str, Any] = data["event"]
    message = message_from_slack_event(slack_event, settings.slack_bot_user_id)

    # Bot messages are history only; our own replies echo back and are already stored
    if is_bot_author(slack_event, settings.slack_bot_user_id):
        history = agent.get_messages()
        if not history or history[-1] != message:
            try:
                agent.add_message(message)
            except ChatAgentError as e:
                logger.error(f"Could not record bot message: {e}")
                return create_response(status_code=500, body=str(e), content_type="text/plain")
        return create_response(status_code=200, body="Recorded", content_type="text/plain")

    logger.info("User message received.")
    status_code = 200
    # Restored on failure so no tool call is left without its results
    snapshot = agent.get_messages()
    try:
        agent.add_message(message)
        response = await agent.send()
        reply = completion_text(response)
    except ChatAgentError as e:
        logger.error(f"Agent error: {e}")
        agent.set_messages(snapshot)
        status_code = 500
        reply = APOLOGY_MESSAGE

    logger.info(f"Reply: {reply}")

    # Post the reply to the Slack channel if the integration is enabled
    if settings.slack_integration == "true":
        slack_response = await asyncio.to_thread(
            post_to_slack,
            channel_id=slack_event["channel"],
            slack_bot_token=settings.slack_bot_token,
            message=reply,
            thread_ts=slack_event.get("thread_ts"),
        )
        logger.info(f"Slack response: {slack_response}")

    return create_response(status_code=status_code, body=reply, content_type="text/plain")
