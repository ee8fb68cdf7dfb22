import logging
from pathlib import Path
from typing import Any, Optional

import watchtower

from .config import ProbeConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(config: ProbeConfig, session: Optional[Any] = None) -> logging.Logger:
    """Reset the root logger to a stream or file handler at the configured level.

    When ``config.cloudwatch_log_group`` is set, records are also shipped to
    CloudWatch Logs through watchtower using a logs client built from
    ``session`` (a boto3 Session).
    """
    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)
    handler.setLevel(level)
    root_logger.addHandler(handler)

    if config.cloudwatch_log_group:
        if session is None:
            root_logger.warning(
                f"CLOUDWATCH_LOG_GROUP={config.cloudwatch_log_group} set but no AWS session given; not shipping logs."
            )
        else:
            setup_cloudwatch_logging(config.cloudwatch_log_group, session)

    return root_logger


def setup_cloudwatch_logging(log_group: str, session: Any, stream_name: str = "cloudprobe") -> Optional[logging.Handler]:
    """Attach a watchtower handler to the root logger; returns it, or None on failure."""
    try:
        logs_client = session.client("logs")
        cloudwatch_handler = watchtower.CloudWatchLogHandler(
            log_group=log_group,
            stream_name=stream_name,
            boto3_client=logs_client,
            use_queues=False,
        )
    except Exception as e:
        logging.warning(f"CloudWatch logging not available: {e}. Using standard logging.")
        return None

    cloudwatch_handler.setLevel(logging.INFO)
    cloudwatch_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(cloudwatch_handler)
    logging.getLogger(__name__).info(f"CloudWatch logging configured: log_group={log_group}")
    return cloudwatch_handler
