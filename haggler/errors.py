class HagglerError(ValueError):
    """Base class for errors raised by the negotiation engine."""


class ConfigurationError(HagglerError):
    """Invalid item catalog, round count or strategy parameters."""


class ProtocolError(HagglerError):
    """An engine call that breaks the turn protocol.

    Raised for malformed incoming proposals and out-of-order calls. The engine
    raises it before touching any match state.
    """
