"""Device enricher implementation using user-agents library.

Reduces a raw User-Agent header to a coarse "Browser on OS" description.
Used for session device labels and for the audit trail, which must not
store full user agent strings.

Behavior:
    - Fail-open: returns None on parse errors (logged)
    - Non-blocking: pure string parsing (<1ms)
"""

import logging

from user_agents import parse as parse_user_agent  # type: ignore[import-untyped]
from user_agents.parsers import UserAgent  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

MAX_LOGGED_USER_AGENT = 100


class UserAgentDeviceEnricher:
    """Device enricher using the user-agents library.

    Implements DeviceEnricherProtocol (structural typing).

    Example:
        >>> UserAgentDeviceEnricher().describe(
        ...     "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        ...     "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"
        ... )
        'Chrome on Mac OS X'
    """

    def describe(self, user_agent: str | None) -> str | None:
        """Coarse device description.

        Args:
            user_agent: Raw user agent string from HTTP header.

        Returns:
            "Chrome on Mac OS X", "Bot", or None when nothing is known.
        """
        if not user_agent:
            return None

        try:
            ua: UserAgent = parse_user_agent(user_agent)
        except Exception as e:
            logger.warning(
                "Failed to parse user agent",
                extra={"user_agent": user_agent[:MAX_LOGGED_USER_AGENT], "error": str(e)},
            )
            return None

        if ua.is_bot:
            return "Bot"

        browser = self._known(ua.browser.family)
        os_name = self._known(ua.os.family)
        return self._build_device_info(browser, os_name)

    @staticmethod
    def _known(family: str | None) -> str | None:
        # user-agents reports unparseable parts as "Other"
        if not family or family == "Other":
            return None
        return family

    @staticmethod
    def _build_device_info(browser: str | None, os_name: str | None) -> str | None:
        """Build human-readable device info string.

        Returns:
            Human-readable string like "Chrome on Mac OS X", or None.
        """
        if browser and os_name:
            return f"{browser} on {os_name}"
        if browser:
            return browser
        if os_name:
            return f"Unknown browser on {os_name}"
        return None
