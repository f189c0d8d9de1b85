"""Helpers shared by inbound and outbound adapters."""
