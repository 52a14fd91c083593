"""
Local notifications.

The dashboard only knows the Notifier port; the UI plugs in whatever the
platform offers (a Streamlit toast, a console line).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from sales_dashboard.services.validation import validate_notification


class NotificationError(RuntimeError):
    pass


class Notifier(Protocol):
    def notify(self, title: str, body: str, icon: Optional[bytes] = None) -> None:
        ...


class ConsoleNotifier:
    def notify(self, title: str, body: str, icon: Optional[bytes] = None) -> None:
        print(f"🔔 {title}: {body}")


@dataclass
class NotificationService:
    notifier: Notifier
    title: str = "Sales Dashboard"
    enabled: bool = False

    def send(self, message: str, icon: Optional[bytes] = None) -> None:
        """
        Validate and dispatch one notification.
        Raises NotificationError when disabled or refused by the platform.
        """
        if not self.enabled:
            raise NotificationError("Notifications are disabled.")

        payload = validate_notification(message=message, icon=icon)

        try:
            self.notifier.notify(self.title, payload.message, payload.icon)
        except PermissionError as e:
            raise NotificationError(f"Notification permission denied: {e}") from e
