"""Per-turn decision engine for one side of a multi-item haggle.

Proposal vectors going out list what we keep for ourselves. Proposals coming
in list what the opponent offers us, so an all-zero incoming vector means the
opponent is asking for everything.
"""

from dataclasses import dataclass

from haggler.catalog import Catalog, Thresholds, check_rounds
from haggler.config import StrategyConfig
from haggler.diagnostics import NullSink
from haggler.errors import ProtocolError
from haggler.offers import OfferConstructor
from haggler.opponent import OpponentModel
from haggler.state import MatchState


@dataclass(frozen=True)
class Accept:
    @property
    def proposal(self) -> None:
        return None


@dataclass(frozen=True)
class Counter:
    proposal: tuple[int, ...]


class DecisionEngine:
    def __init__(
        self,
        is_second_mover: bool,
        counts: list[int],
        values: list[float],
        rounds: int,
        diagnostic_sink=None,
        strategy: StrategyConfig | None = None,
    ):
        self.is_first = not is_second_mover
        self.rounds = check_rounds(rounds)
        self.strategy = strategy or StrategyConfig()
        self.sink = diagnostic_sink or NullSink()
        self.catalog = Catalog(counts, values)
        self.thresholds = Thresholds.derive(self.catalog, rounds, self.is_first, self.strategy)
        self.state = MatchState.start(self.catalog, self.thresholds)
        self.opponent = OpponentModel.for_catalog(self.catalog)
        self.offers = OfferConstructor(self.catalog, self.thresholds, self.strategy, self.sink)

    @property
    def turns(self) -> int:
        return self.thresholds.turns

    def opening_offer(self) -> Counter:
        """First proposal of the match: ask for everything."""
        if self.state.calls:
            raise ProtocolError("opening offer must be the first call of a match")
        self._start_turn()
        self.sink.record("I am holding on first offer")
        return Counter(tuple(self.catalog.hold_vector()))

    def respond(self, offered: list[int]) -> Accept | Counter:
        """Accept ``offered`` or answer it with a counter-proposal."""
        if self.is_first and not self.state.calls:
            raise ProtocolError("first mover must make the opening offer before responding")
        offered = self.catalog.check_proposal(offered)
        if self.state.rounds_left <= 0:
            raise ProtocolError("no rounds left in this match")

        state = self.state
        turns_left = self._start_turn()

        if offered == state.prev_request_counts:
            self.sink.record("Accepting offer matching last request")
            return Accept()

        offer_value = self.catalog.value_of(offered)

        if turns_left == 0 and offer_value > 0:
            self.sink.record("I accept anything of value on very last turn")
            return Accept()
        if state.round >= state.rounds_till_fold and offer_value == self.catalog.total_value:
            self.sink.record(
                f"I accept any offer of total value when past round {state.rounds_till_fold - 1}"
            )
            return Accept()

        self.sink.record(f"offerValue: {offer_value}")

        held_before_fold = self.opponent.observe(self.catalog, offered, state.prev_offered_counts)
        state.prev_offered_counts = offered
        if held_before_fold:
            self.sink.record("Opponent is holding")
        elif not any(offered):
            self.sink.record("Opponent is holding after folding")
        self.sink.record(f"opponent: {self.opponent}")

        request_counts = None
        if held_before_fold:
            request_counts = self.offers.hold_response(state)
        if request_counts is None:
            request_counts = self.offers.build(state, self.opponent)

        request_value = self.catalog.value_of(request_counts)
        self.sink.record(f"requestValue: {request_value}")
        self.sink.record(f"requestCounts: {request_counts}")

        if state.rounds_left == 0 and offer_value > request_value:
            self.sink.record(
                "Accepting offer, value is higher than request value, and it is last round"
            )
            return Accept()

        state.prev_request_counts = request_counts
        state.prev_request_value = request_value
        return Counter(tuple(request_counts))

    def _start_turn(self) -> int:
        self.state.advance(self.rounds)
        state = self.state
        turn = state.round * 2 - (1 if self.is_first else 0)
        turns_left = state.rounds_left * 2 + (1 if self.is_first else 0)
        self.sink.record(f"round {state.round}")
        self.sink.record(f"{state.rounds_left} rounds left")
        self.sink.record(f"turn {turn}")
        self.sink.record(f"{turns_left} turns left")
        return turns_left


def create(
    is_second_mover: bool,
    counts: list[int],
    values: list[float],
    rounds: int,
    diagnostic_sink=None,
    strategy: StrategyConfig | None = None,
) -> DecisionEngine:
    return DecisionEngine(is_second_mover, counts, values, rounds, diagnostic_sink, strategy)
