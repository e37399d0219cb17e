"""Task tracker backend: authentication and session lifecycle."""
