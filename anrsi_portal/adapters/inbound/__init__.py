"""Inbound adapters: HTTP service and command line."""
