"""WHOOP OAuth callback, webhook relay and health endpoints."""
