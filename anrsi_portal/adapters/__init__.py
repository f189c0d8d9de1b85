"""Adapters connecting the core to HTTP, the terminal and local storage."""
