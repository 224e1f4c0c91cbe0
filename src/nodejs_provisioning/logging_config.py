"""Structured logging configuration.

Uses structlog over the standard library, rendering either JSON (log
shippers) or console output (interactive use). Defaults come from the
``LOG_FORMAT`` and ``LOG_LEVEL`` environment variables.

Usage:
    from nodejs_provisioning.logging_config import setup_logging
    import structlog

    setup_logging()
    logger = structlog.get_logger()
    logger.info("event_name", key1=value1, key2=value2)
"""

import logging
import os
import sys
from typing import Any, Iterable, Literal, MutableMapping

import structlog

MASK = "****"


class SecretMasker:
    """structlog processor replacing known secrets in rendered events.

    Hosts register the values returned by ``sensitive_content`` so that
    credentials injected into an npmrc never reach build logs.
    """

    def __init__(self, secrets: Iterable[str] = ()):
        self._secrets: set[str] = set()
        self.add(secrets)

    def add(self, secrets: Iterable[str]) -> None:
        self._secrets.update(s for s in secrets if s)

    def mask(self, text: str) -> str:
        # longest first so a secret containing another is masked whole
        for secret in sorted(self._secrets, key=len, reverse=True):
            text = text.replace(secret, MASK)
        return text

    def __call__(self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        if not self._secrets:
            return event_dict
        for key, value in event_dict.items():
            if isinstance(value, str):
                event_dict[key] = self.mask(value)
        return event_dict


def setup_logging(
    log_format: Literal["json", "console"] | None = None,
    log_level: str | None = None,
    masker: SecretMasker | None = None,
) -> None:
    """Configure structured logging with structlog.

    Args:
        log_format: "json" or "console". Falls back to LOG_FORMAT env var or "console".
        log_level: DEBUG, INFO, WARNING or ERROR. Falls back to LOG_LEVEL env var or "INFO".
        masker: Optional secret masker applied before rendering
    """
    log_format = log_format or os.getenv("LOG_FORMAT", "console")
    log_level = log_level or os.getenv("LOG_LEVEL", "INFO")

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
        force=True,
    )

    processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=False),
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if masker is not None:
        processors.append(masker)

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer(sort_keys=False))
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


__all__ = ["SecretMasker", "setup_logging", "MASK"]
