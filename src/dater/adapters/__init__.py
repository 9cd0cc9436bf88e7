"""Adapters binding the core ports to SQLite, HTTP platforms and Telegram."""
