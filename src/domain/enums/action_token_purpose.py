"""Purpose of a one-time action token sent by email."""

from enum import Enum


class ActionTokenPurpose(str, Enum):
    """Purpose of a one-time action token."""

    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"
