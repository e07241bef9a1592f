"""
HireBoard - Session context.

Identity of the person driving a board session. It is created once per
session and handed to the store client and the pipeline controller;
nothing reads user state from module globals.
"""
from dataclasses import dataclass
from typing import Dict, Optional

from .config import ClientSettings, settings

USER_HEADER = "X-HireBoard-User"


@dataclass(frozen=True)
class SessionContext:
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    api_token: Optional[str] = None

    @classmethod
    def from_settings(cls, client_settings: Optional[ClientSettings] = None) -> "SessionContext":
        cfg = client_settings or settings.client
        return cls(
            user_email=cfg.user_email,
            user_name=cfg.user_name,
            api_token=cfg.api_token,
        )

    @property
    def actor(self) -> str:
        """Label used in log lines and sent to the store for notes/activities."""
        return self.user_email or self.user_name or "anonymous"

    def headers(self) -> Dict[str, str]:
        """Headers attached to every store request in this session."""
        headers = {}
        if self.user_email or self.user_name:
            headers[USER_HEADER] = self.actor
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers
