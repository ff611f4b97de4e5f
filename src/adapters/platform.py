"""Host platform adapter: locale and user agent."""

from __future__ import annotations

import locale
from dataclasses import dataclass
from typing import Optional

DEFAULT_LOCALE = "en"


def _system_locale() -> str:
    language, _ = locale.getlocale()
    return language or DEFAULT_LOCALE


@dataclass(frozen=True)
class PlatformInfo:
    """Static PlatformPort implementation built from configuration."""

    locale: str
    user_agent: Optional[str] = None

    def get_locale(self) -> str:
        return self.locale

    def get_user_agent(self) -> Optional[str]:
        return self.user_agent

    @classmethod
    def from_settings(cls, configured_locale: Optional[str], user_agent: Optional[str]) -> "PlatformInfo":
        """Prefer the configured locale and fall back to the process locale."""

        return cls(locale=configured_locale or _system_locale(), user_agent=user_agent or None)
