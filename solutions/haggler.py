import os

from haggler.diagnostics import PrintSink
from haggler.engine import DecisionEngine
from misc.loaders import load_strategy

STRATEGY = load_strategy()


class Agent:
    """Battle-harness adapter around the haggler decision engine."""

    def __init__(self, me: int, counts: list[int], values: list[int], max_rounds: int):
        sink = PrintSink(f"[haggler {me}] ") if os.getenv("HAGGLER_LOG") == "1" else None
        self.engine = DecisionEngine(
            bool(me), counts, values, max_rounds, sink, strategy=STRATEGY
        )

    def offer(self, o: list[int] | None) -> list[int] | None:
        if o is None:
            decision = self.engine.opening_offer()
        else:
            decision = self.engine.respond(o)
        if decision.proposal is None:
            return None
        return list(decision.proposal)
