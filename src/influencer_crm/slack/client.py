"""Slack alert client for operational failures.

Wraps ``slack_sdk.WebClient`` to post Block Kit messages to the alerts
channel.  Used by the retry layer when a Shopify or RapidAPI call keeps
failing after every retry.
"""

from __future__ import annotations

from typing import Any

from slack_sdk import WebClient


class SlackAlerter:
    """Posts alert messages to a single Slack channel."""

    def __init__(self, channel: str, bot_token: str) -> None:
        """Initialize the alerter.

        Args:
            channel: Channel ID that receives alerts.
            bot_token: Slack bot token (``xoxb-...``).
        """
        self._client = WebClient(token=bot_token)
        self._channel = channel

    def post_alert(self, blocks: list[dict[str, Any]], fallback_text: str) -> str:
        """Post an alert to the alerts channel.

        Args:
            blocks: Block Kit blocks for the message.
            fallback_text: Plain-text fallback for notifications.

        Returns:
            The Slack message timestamp (ts) for reference.

        Raises:
            SlackApiError: If the Slack API call fails.
        """
        response = self._client.chat_postMessage(
            channel=self._channel,
            blocks=blocks,
            text=fallback_text,
        )
        return str(response["ts"])
