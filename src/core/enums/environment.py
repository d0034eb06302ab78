"""Runtime environment types.

Used by Settings to pick environment-specific behavior (log rendering,
strictness of checks).

Environments:
- DEVELOPMENT: Local development, human-readable console logs
- TESTING: Automated test execution
- CI: Continuous integration runs
- PRODUCTION: Production deployment, JSON logs
"""

from enum import Enum


class Environment(str, Enum):
    """Runtime environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
