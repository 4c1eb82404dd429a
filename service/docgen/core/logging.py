import logging

import structlog

# Libraries that log every request or subprocess event at INFO level
NOISY_LOGGERS = (
    "botocore",
    "boto3",
    "s3transfer",
    "urllib3",
    "asyncio",
    "httpx",
    "httpcore",
)


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging for the API and the render CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(level=log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
