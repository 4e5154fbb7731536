from dataclasses import dataclass

from haggler.catalog import Catalog, Thresholds


@dataclass
class MatchState:
    """Mutable per-match bookkeeping owned by one DecisionEngine."""

    rounds_left: int
    round: int
    rounds_till_fold: int
    prev_request_counts: list[int]
    prev_request_value: float
    prev_offered_counts: list[int] | None = None
    no_value_offer_count: int = 0
    calls: int = 0

    @classmethod
    def start(cls, catalog: Catalog, thresholds: Thresholds) -> "MatchState":
        return cls(
            rounds_left=thresholds.rounds,
            round=0,
            rounds_till_fold=thresholds.rounds_till_fold,
            prev_request_counts=catalog.hold_vector(),
            prev_request_value=catalog.total_value,
        )

    def advance(self, rounds: int) -> None:
        self.rounds_left -= 1
        self.round = rounds - self.rounds_left
        self.calls += 1
