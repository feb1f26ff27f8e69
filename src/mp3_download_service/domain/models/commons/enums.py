from enum import Enum, unique


@unique
class AUTH_EVENT(str, Enum):
    """Enumeration for identity change events."""

    SIGNED_UP = "signed_up"
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
