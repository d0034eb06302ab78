"""Client context attached to every engine call for the audit trail."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestContext:
    """Where a request came from.

    Attributes:
        ip_address: Client IP address, if known.
        user_agent: Raw User-Agent header, if known.
    """

    ip_address: str | None = None
    user_agent: str | None = None

    def to_metadata(self) -> dict[str, str]:
        """Event bus metadata for audit enrichment (empty keys omitted)."""
        metadata: dict[str, str] = {}
        if self.ip_address:
            metadata["ip_address"] = self.ip_address
        if self.user_agent:
            metadata["user_agent"] = self.user_agent
        return metadata


ANONYMOUS_CONTEXT = RequestContext()
