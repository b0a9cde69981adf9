from enum import Enum

from pydantic import BaseModel


class BasePydanticModel(BaseModel):
    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
        "use_enum_values": True,
    }

class DiscoveryErrorKind(str, Enum):
    """Kinds of error a discovery session reports through its callback.

    ``protocol_error`` is reported when the outgoing query cannot be encoded
    with the configured name and buffer limits. Malformed inbound packets are
    only logged.
    """
    NO_NETWORK_AVAILABLE = "no_network_available"
    BIND_FAILURE = "bind_failure"
    SEND_FAILURE = "send_failure"
    RECEIVE_ERROR = "receive_error"
    PROTOCOL_ERROR = "protocol_error"
    EMPTY_RESULT = "empty_result"

class SessionState(str, Enum):
    CREATED = "created"
    ENUMERATING_INTERFACES = "enumerating_interfaces"
    BINDING = "binding"
    LISTENING = "listening"
    SHUTTING_DOWN = "shutting_down"
    CLOSED = "closed"
