"""Credential helpers."""

import secrets
import string

PASSWORD_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def generate_password(length: int = 8) -> str:
    """Generate a one-time password of ``length`` alphanumeric characters.

    The password is handed to the employee once and is expected to be rotated
    on first login.
    """
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))
