"""Project configuration constants."""
