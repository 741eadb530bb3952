"""Message models and MIME composition."""
