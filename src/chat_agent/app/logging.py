import logging
from typing import Any


def log_completion(response: dict[str, Any], logger: logging.Logger) -> None:
    choices = response.get("choices") or [{}]
    logger.info(f"Completion created by model: {response.get('model', 'Unknown')}")
    logger.info(f"Finish reason: {choices[0].get('finish_reason', 'Unknown')}")
    logger.info(f"Usage: {response.get('usage', 'Unknown')}")
