"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_DB_PATH = "lessonbook.db"
DEFAULT_SMTP_PORT = 587

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigError(Exception):
    """Raised when configuration values are invalid."""


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        db_path: SQLite database path. ":memory:" for an in-memory database.
        admin_token: Bearer token required by admin-only routes. None disables them.
        allow_duplicate_direct: Whether direct and substitution registration may
            create a second active registration for the same participant and lesson.
        smtp_host: SMTP server host.
        smtp_port: SMTP server port (STARTTLS).
        smtp_user: SMTP login.
        smtp_pass: SMTP password.
        admin_email: Recipient of admin notifications.
        from_email: Sender address for all notifications.
    """

    db_path: str = DEFAULT_DB_PATH
    admin_token: str | None = None
    allow_duplicate_direct: bool = True
    smtp_host: str | None = None
    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_user: str | None = None
    smtp_pass: str | None = None
    admin_email: str | None = None
    from_email: str | None = None

    @property
    def email_configured(self) -> bool:
        """True when every value needed to send mail is present."""
        return all(
            [
                self.smtp_host,
                self.smtp_user,
                self.smtp_pass,
                self.admin_email,
                self.from_email,
            ]
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Parsed settings.

        Raises:
            ConfigError: If SMTP_PORT is not an integer.
        """
        env = os.environ if environ is None else environ

        port_raw = env.get("SMTP_PORT") or str(DEFAULT_SMTP_PORT)
        try:
            smtp_port = int(port_raw)
        except ValueError as e:
            raise ConfigError(f"SMTP_PORT must be an integer, got {port_raw!r}") from e

        duplicate_raw = env.get("LESSONBOOK_ALLOW_DUPLICATE_DIRECT", "true")

        return cls(
            db_path=env.get("LESSONBOOK_DB_PATH", DEFAULT_DB_PATH),
            admin_token=env.get("LESSONBOOK_ADMIN_TOKEN") or None,
            allow_duplicate_direct=duplicate_raw.strip().lower() in _TRUE_VALUES,
            smtp_host=env.get("SMTP_HOST") or None,
            smtp_port=smtp_port,
            smtp_user=env.get("SMTP_USER") or None,
            smtp_pass=env.get("SMTP_PASS") or None,
            admin_email=env.get("ADMIN_EMAIL") or None,
            from_email=env.get("FROM_EMAIL") or None,
        )
