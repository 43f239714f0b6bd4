"""
Application state - shared state initialized at startup.
"""
from __future__ import annotations

from webhook_handler.config import WebhookSettings
from webhook_handler.services.actions import ActionLauncher


class AppState:
    """
    Application state container.
    Initialized at startup via lifespan, read by the webhook router.
    Both stay None when the configuration is incomplete.
    """

    def __init__(self):
        self.settings: WebhookSettings | None = None
        self.launcher: ActionLauncher | None = None


app_state = AppState()
