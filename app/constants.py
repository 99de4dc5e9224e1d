"""Shared constants used across the application."""

# Value of the ``iss`` claim on every session token we mint.
TOKEN_ISSUER = "vibe-storm"

# Usernames: 3-20 letters, digits or underscores (e.g. john_doe)
USERNAME_PATTERN = r"^[A-Za-z0-9_]{3,20}$"

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARS = "!@#$%^&*"
