"""Token type carried in the ``tokenType`` claim.

Values are upper-case on the wire and must stay bit-exact with downstream
verifiers.
"""

from enum import Enum


class TokenType(str, Enum):
    """Value of the ``tokenType`` claim."""

    ACCESS = "ACCESS"
    REFRESH = "REFRESH"
    MFA_REQUIRED = "MFA_REQUIRED"


class ChallengePurpose(str, Enum):
    """What an MFA_REQUIRED challenge token may be exchanged for.

    Carried in the ``purpose`` claim so a login challenge can never be used to
    confirm an enrollment and vice versa.
    """

    MFA_LOGIN = "mfa_login"
    MFA_ENROLLMENT = "mfa_enrollment"
