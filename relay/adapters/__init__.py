"""Adapters: Slack, Flowise and the health check server."""
