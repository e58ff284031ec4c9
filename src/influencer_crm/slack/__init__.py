"""Slack alerting for operational failures."""

from influencer_crm.slack.client import SlackAlerter

__all__ = ["SlackAlerter"]
