"""In-memory system-design building blocks: expense ledger, URL shortener and greeting server."""

__version__ = "0.1.0"