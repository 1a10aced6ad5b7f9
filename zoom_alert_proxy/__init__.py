"""Relay Prometheus Alertmanager notifications to Zoom chat channels."""
