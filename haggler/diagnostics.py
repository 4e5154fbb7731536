"""Diagnostic sinks for the decision engine.

The engine reports what it is doing through ``record(message)``. Sinks only
observe; nothing they do feeds back into a decision.
"""


class NullSink:
    def record(self, message: str) -> None:
        pass


class PrintSink:
    """Print every message, optionally prefixed (e.g. with the agent name)."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def record(self, message: str) -> None:
        print(f"{self.prefix}{message}")


class MemorySink:
    """Keep messages in memory so a match can be inspected afterwards."""

    def __init__(self):
        self.messages: list[str] = []

    def record(self, message: str) -> None:
        self.messages.append(message)

    def contains(self, fragment: str) -> bool:
        return any(fragment in message for message in self.messages)
