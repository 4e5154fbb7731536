"""Counter-proposal construction.

Items the opponent has asked for are ranked by *tradability*: the estimated
per-unit value to the opponent over the per-unit value to us. Concessions are
made most-tradable-first. Items worth nothing to us (undesirables) rank first
and are always given away in full once we stop trickling them out.
"""

import math
from dataclasses import dataclass

from haggler.catalog import Catalog, Thresholds
from haggler.config import StrategyConfig
from haggler.diagnostics import NullSink
from haggler.opponent import OpponentModel
from haggler.state import MatchState


@dataclass(frozen=True)
class RankedItem:
    index: int
    count: int
    value: float
    importance: float
    sub_total_importance: float
    est_op_value: float
    est_op_sub_total_value: float
    tradability: float


def rank_items(
    catalog: Catalog, model: OpponentModel, est_error_multiplier: float
) -> list[RankedItem]:
    """Estimate the opponent's value for every item it has asked for, in catalog order."""
    if model.total_req_count == 0:
        return []

    ranked = []
    for i, (item, req_count) in enumerate(zip(catalog.items, model.sub_total_req_counts)):
        if not req_count:
            continue
        importance = req_count / item.count
        est_op_sub_total_value = importance * catalog.total_value * est_error_multiplier
        est_op_value = est_op_sub_total_value / item.count
        ranked.append(
            RankedItem(
                index=i,
                count=item.count,
                value=item.value,
                importance=importance,
                sub_total_importance=req_count / model.total_req_count,
                est_op_value=est_op_value,
                est_op_sub_total_value=est_op_sub_total_value,
                tradability=est_op_value / item.value if item.value else math.inf,
            )
        )
    return ranked


def by_tradability(ranked: list[RankedItem]) -> list[RankedItem]:
    # stable: ties keep catalog order
    return sorted(ranked, key=lambda r: r.tradability, reverse=True)


def undesirables_vector(catalog: Catalog, offer_count: int) -> list[int]:
    """Keep every valued item and give away ``offer_count`` undesirable units.

    Undesirables are filled in catalog order: each zero-value item is conceded
    up to the remaining target before moving on to the next one.
    """
    offered_sum = 0
    request_counts = []
    for item in catalog.items:
        if item.value:
            request_counts.append(item.count)
            continue
        offered = min(offer_count - offered_sum, item.count) if offered_sum < offer_count else 0
        offered_sum += offered
        request_counts.append(item.count - offered)
    return request_counts


def apply_concessions(catalog: Catalog, conceded: list[int]) -> list[int]:
    """Request counts keeping everything valued except ``conceded``; undesirables all go."""
    return [
        item.count - conceded[i] if item.value else 0
        for i, item in enumerate(catalog.items)
    ]


class OfferConstructor:
    def __init__(
        self,
        catalog: Catalog,
        thresholds: Thresholds,
        strategy: StrategyConfig,
        sink=None,
    ):
        self.catalog = catalog
        self.thresholds = thresholds
        self.strategy = strategy
        self.sink = sink or NullSink()

    def offer_undesirables(self, state: MatchState, offer_count: int) -> list[int]:
        offer_count = min(offer_count, self.catalog.total_no_value_count)
        state.no_value_offer_count = offer_count
        self.sink.record(
            f"I will offer {offer_count}/{self.catalog.total_no_value_count} undesirables"
        )
        return undesirables_vector(self.catalog, offer_count)

    def hold_response(self, state: MatchState) -> list[int] | None:
        """Answer an opponent that holds without ever having folded.

        Returns None when the normal offer construction should run instead.
        """
        if state.round < self.thresholds.rounds_to_hold:
            self.sink.record("I will hold")
            return self.catalog.hold_vector()

        if state.no_value_offer_count < self.catalog.total_no_value_count:
            if state.round < state.rounds_till_fold:
                return self.offer_undesirables(state, state.no_value_offer_count + 1)
            if state.round < self.thresholds.rounds_till_panic:
                return self.offer_undesirables(state, self.catalog.total_no_value_count)
        return None

    def no_value_important_count(
        self, model: OpponentModel, ranked: list[RankedItem]
    ) -> int:
        """Units of undesirables the opponent has shown sustained interest in."""
        limit = self.strategy.important_interest_ratio * self.thresholds.rounds
        return sum(
            r.count
            for r in ranked
            if not r.value and model.importance_scores[r.index] > limit
        )

    def retained_value_floor(self, rounds_left: int) -> float:
        """Value we insist on keeping; decays from the total value towards the lowest request."""
        lowest = self.thresholds.lowest_req_value
        rounds = self.thresholds.rounds
        if rounds == 1:
            return lowest
        return lowest + (rounds_left / (rounds - 1)) * (self.catalog.total_value - lowest)

    def build(self, state: MatchState, model: OpponentModel) -> list[int]:
        ranked = rank_items(self.catalog, model, self.strategy.est_error_multiplier)
        no_value_important = self.no_value_important_count(model, ranked)
        self.sink.record(f"no value important count: {no_value_important}")

        if (
            state.round < state.rounds_till_fold
            and state.no_value_offer_count >= no_value_important
        ):
            self.sink.record("Fold early")
            state.rounds_till_fold = state.round

        if state.rounds_left == 0:
            ordered = by_tradability(ranked)
            if model.is_stubborn:
                self.sink.record("Final offer to a stubborn opponent")
                return self._stubborn_final(ordered)
            if no_value_important > 0:
                self.sink.record("Final offer of every undesirable")
                return self.offer_undesirables(state, self.catalog.total_no_value_count)
            self.sink.record("Final offer of undesirables and the most tradable item")
            return self._final_concession(ordered)

        if state.round < state.rounds_till_fold:
            self.sink.record("I wont fold yet")
            return self.offer_undesirables(state, state.no_value_offer_count + 1)

        self.sink.record("Make calculated offer")
        return self._calculated(by_tradability(ranked), state.rounds_left)

    def _stubborn_final(self, ordered: list[RankedItem]) -> list[int]:
        # Hand over the most tradable units until the opponent's estimated
        # share reaches the acceptable value, never giving away all our value.
        acceptable = self.thresholds.stubborn_acceptable_offer_value
        conceded = [0] * len(self.catalog)
        est_op_total = 0.0
        retained = self.catalog.total_value
        for r in ordered:
            offer_count = 0
            while (
                est_op_total < acceptable
                and offer_count < r.count
                and retained - r.value > 0
            ):
                offer_count += 1
                est_op_total += r.est_op_value
                retained -= r.value
            conceded[r.index] = offer_count
            if est_op_total >= acceptable:
                break
        return apply_concessions(self.catalog, conceded)

    def _final_concession(self, ordered: list[RankedItem]) -> list[int]:
        conceded = [0] * len(self.catalog)
        valued = [r for r in ordered if r.value]
        if valued:
            conceded[valued[0].index] = 1
        return apply_concessions(self.catalog, conceded)

    def _calculated(self, ordered: list[RankedItem], rounds_left: int) -> list[int]:
        req_value = self.retained_value_floor(rounds_left)
        self.sink.record(f"retained value floor: {req_value}")
        conceded = [0] * len(self.catalog)
        retained = self.catalog.total_value
        for r in ordered:
            offer_count = 0
            while offer_count < r.count and retained - r.value > req_value:
                offer_count += 1
                retained -= r.value
            conceded[r.index] = offer_count
        return apply_concessions(self.catalog, conceded)
