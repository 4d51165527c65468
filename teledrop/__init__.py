"""Upload files through a Telegram bot and get temporary download links."""

__version__ = "0.1.0"
