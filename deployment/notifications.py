import logging
from typing import Dict, Optional
import requests

logger = logging.getLogger(__name__)


class SlackNotifier:
    """Posts migration results to a Slack incoming webhook"""

    def __init__(self, webhook_url: str, title: str = "Contract Migrations"):
        self.webhook_url = webhook_url
        self.title = title

    def send(self, message: str, fields: Optional[Dict[str, str]] = None):
        """Send a message with optional short attachment fields"""
        payload = {
            "text": f"{self.title}: {message}",
            "attachments": [
                {
                    "fields": [
                        {"title": title, "value": str(value), "short": True}
                        for title, value in (fields or {}).items()
                    ]
                }
            ]
        }

        response = requests.post(self.webhook_url, json=payload, timeout=10)
        response.raise_for_status()
