from pydantic import Field

from .common import BasePydanticModel, DiscoveryErrorKind


class ServiceEntry(BasePydanticModel):
    service: str = Field(..., description="Service type or instance name decoded from a PTR answer, e.g. '_http._tcp'.")
    ips: list[str] = Field(default_factory=list, description="IPv4 addresses that answered for this service, in dotted-quad order.")
    display_name: str | None = Field(None, description="Human-readable name from the DNS-SD service type table, if known.")

class DiscoveryError(BasePydanticModel):
    """An error reported through a discovery session's callback.

    These are values, not exceptions: per-interface failures and the empty-result
    timeout do not stop the session.
    """
    kind: DiscoveryErrorKind
    message: str
    address: str | None = None # Local interface address the error relates to, if any
    code: int | None = None # errno or transport result code, if any

    def __str__(self) -> str:
        suffix = f" ({self.address})" if self.address else ""
        return f"{self.kind}: {self.message}{suffix}"
