"""
Services package - External API clients and shared infrastructure.

- legacy_visibility - Session-cookie endpoints for channel conversion and manager lookup
- channel_locks     - Per-channel serialization of toggles
- log_channel       - Mirrors log lines into a Slack channel
"""
