"""Agents package - Slack-facing gateway and command handlers."""
