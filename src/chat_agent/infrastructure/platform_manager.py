import logging
import os
from pathlib import Path


def create_logger(
    log_level: str = "INFO",
    logger_name: str = "chat-agent",
    logs_dir: str | Path | None = None,
) -> logging.Logger:
    """
    Create a logger that outputs to console and optionally to a file.

    Args:
        log_level (str): Logging level (e.g., "INFO", "DEBUG").
        logger_name (str): Name for the logger instance. Also used as the log file name.
        logs_dir (str | Path | None): Directory for log files. If None, only the console
            handler is attached.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.DEBUG))
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

    if not logger.handlers:  # Prevent handler duplication
        # Console handler (stdio) - always add this
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if logs_dir is not None:
            try:
                logs_path = Path(logs_dir)
                logs_path.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(logs_path / logger_name)
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)
            except OSError:
                # If file logging fails, just continue with console logging
                logger.warning("File logging unavailable in %s", logs_dir)

    return logger


def get_parameters(param_names: list[str] | str) -> dict[str, str | None]:
    """
    Retrieve configuration parameters from environment variables.

    Parameters are looked up in upper case (``llm_api_key`` -> ``LLM_API_KEY``) and
    returned under their lower-case names. Missing parameters map to None.

    Args:
        param_names (list[str] | str): One or more parameter names.

    Returns:
        dict[str, str | None]: Parameter values keyed by lower-case name.
    """
    if isinstance(param_names, str):
        param_names = [param_names]

    result = {}
    for param_name in param_names:
        # Parameters are stored in the environment variables in uppercase
        # But we want to store them in lowercase in the result dictionary
        param_name = param_name.upper()
        result[param_name.lower()] = os.getenv(param_name)
    return result
