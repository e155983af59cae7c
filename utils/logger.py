"""Logging setup for the dashboard server.

Every record passes through SecretMaskingFilter before it is written, so
GitHub tokens, bearer credentials, session cookie values and the configured
client/session secrets never reach the log output.
"""

import logging
import re
import sys
from typing import Iterable

MASK = "***"

# gho_ (OAuth), ghp_ (PAT), ghu_/ghs_/ghr_ (app tokens), github_pat_ (fine-grained)
_GITHUB_TOKEN_RE = re.compile(r"\b(?:gh[opusr]_[A-Za-z0-9]{8,}|github_pat_[A-Za-z0-9_]{8,})")
_AUTH_HEADER_RE = re.compile(r"\b(Bearer|Authorization:\s*token)\s+[A-Za-z0-9_\-.=]+", re.IGNORECASE)
_SESSION_COOKIE_RE = re.compile(r"\b(gh_session|gh_oauth_state)=[^;\s]+")

# Chatty HTTP client loggers, only shown when the app runs at DEBUG
_NOISY_LOGGERS = ("urllib3", "httpx", "httpcore")


class SecretMaskingFilter(logging.Filter):
    """Replace credentials in the formatted message with a mask.

    Args:
        secrets: Extra literal values to mask (client secret, session key)
    """

    def __init__(self, secrets: Iterable[str] = ()):
        super().__init__()
        self.secrets = [s for s in secrets if s]

    def mask(self, text: str) -> str:
        for secret in self.secrets:
            text = text.replace(secret, MASK)
        text = _GITHUB_TOKEN_RE.sub(MASK, text)
        text = _AUTH_HEADER_RE.sub(lambda m: f"{m.group(1)} {MASK}", text)
        return _SESSION_COOKIE_RE.sub(lambda m: f"{m.group(1)}={MASK}", text)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = self.mask(message)
        if masked != message:
            # Freeze the masked text; args were already interpolated
            record.msg = masked
            record.args = None
        return True


def setup_logger(
    log_level: str = "INFO",
    name: str = "pr_dashboard",
    secrets: Iterable[str] = ()
) -> logging.Logger:
    """
    Configure root logging for the server and return the app logger.

    Call once when the app is created, with the level from Config. Modules
    log through logging.getLogger(__name__) and inherit this setup.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger name (default: pr_dashboard)
        secrets: Literal values masked in every record, on top of token patterns

    Returns:
        logging.Logger: Configured logger instance
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stdout,
        force=True,  # replaces handlers, and with them any earlier filter
    )

    masking = SecretMaskingFilter(secrets)
    for handler in logging.getLogger().handlers:
        handler.addFilter(masking)

    http_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(http_level)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    return logger
