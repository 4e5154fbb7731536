import math
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from haggler.catalog import Catalog, Thresholds
from haggler.config import StrategyConfig
from haggler.diagnostics import MemorySink
from haggler.offers import (
    OfferConstructor,
    apply_concessions,
    by_tradability,
    rank_items,
    undesirables_vector,
)
from haggler.opponent import OpponentModel
from haggler.state import MatchState


def make_constructor(counts, values, rounds, is_first=False, strategy=None):
    strategy = strategy or StrategyConfig()
    catalog = Catalog(counts, values)
    thresholds = Thresholds.derive(catalog, rounds, is_first, strategy)
    sink = MemorySink()
    constructor = OfferConstructor(catalog, thresholds, strategy, sink)
    state = MatchState.start(catalog, thresholds)
    return constructor, state, OpponentModel.for_catalog(catalog), sink


def at_round(state, rounds, round_):
    state.round = round_
    state.rounds_left = rounds - round_


def observe_all(constructor, model, *offers):
    prev = None
    for offered in offers:
        model.observe(constructor.catalog, offered, prev)
        prev = offered


class TestUndesirables:
    """Tests for the undesirable-item fill rule."""

    def test_fill_in_catalog_order(self):
        catalog = Catalog([2, 1, 3], [0, 5, 0])

        assert undesirables_vector(catalog, 0) == [2, 1, 3]
        assert undesirables_vector(catalog, 1) == [1, 1, 3]
        assert undesirables_vector(catalog, 3) == [0, 1, 2]
        assert undesirables_vector(catalog, 5) == [0, 1, 0]

    def test_offer_is_capped_and_recorded(self):
        constructor, state, _, sink = make_constructor([2, 1, 3], [0, 5, 0], 10)

        assert constructor.offer_undesirables(state, 9) == [0, 1, 0]
        assert state.no_value_offer_count == 5
        assert sink.contains("I will offer 5/5 undesirables")

    def test_apply_concessions_drops_undesirables(self):
        catalog = Catalog([2, 4, 3], [0, 5, 1])
        assert apply_concessions(catalog, [0, 1, 2]) == [0, 3, 1]


class TestRanking:
    """Tests for the tradability estimate."""

    def test_nothing_ranked_before_any_request(self):
        constructor, _, model, _ = make_constructor([3, 2], [0, 10], 5)
        assert rank_items(constructor.catalog, model, 0.6) == []

    def test_estimates(self):
        constructor, _, model, _ = make_constructor([3, 2], [0, 10], 5)
        observe_all(constructor, model, [0, 0])

        undesirable, valued = rank_items(constructor.catalog, model, 0.6)

        assert undesirable.importance == 1.0
        assert undesirable.sub_total_importance == pytest.approx(0.6)
        assert undesirable.est_op_sub_total_value == pytest.approx(12)
        assert undesirable.est_op_value == pytest.approx(4)
        assert math.isinf(undesirable.tradability)
        assert valued.est_op_value == pytest.approx(6)
        assert valued.tradability == pytest.approx(0.6)

    def test_unrequested_items_are_skipped(self):
        constructor, _, model, _ = make_constructor([3, 2], [0, 10], 5)
        observe_all(constructor, model, [0, 2])

        ranked = rank_items(constructor.catalog, model, 0.6)
        assert [r.index for r in ranked] == [0]

    def test_order_is_most_tradable_first(self):
        constructor, _, model, _ = make_constructor([1, 4, 2], [6, 1, 0], 5)
        observe_all(constructor, model, [0, 0, 0], [1, 0, 0])

        ordered = by_tradability(rank_items(constructor.catalog, model, 0.6))
        assert [r.index for r in ordered] == [2, 1, 0]


class TestRetainedValueFloor:
    """Tests for the decaying retained-value floor."""

    def test_decay(self):
        constructor, _, _, _ = make_constructor([3, 2], [0, 10], 5)

        assert constructor.retained_value_floor(4) == pytest.approx(20)
        assert constructor.retained_value_floor(2) == pytest.approx(17)
        assert constructor.retained_value_floor(0) == pytest.approx(14)

    def test_single_round_uses_lowest_request(self):
        constructor, _, _, _ = make_constructor([3, 2], [0, 10], 1)
        assert constructor.retained_value_floor(0) == pytest.approx(14)


class TestHoldResponse:
    """Tests for answering an opponent that holds before folding."""

    def test_hold_while_configured_to(self):
        strategy = StrategyConfig(rounds_to_hold=2)
        constructor, state, _, _ = make_constructor([3, 2], [0, 10], 10, strategy=strategy)
        at_round(state, 10, 1)

        assert constructor.hold_response(state) == [3, 2]
        assert state.no_value_offer_count == 0

    def test_one_more_undesirable_before_fold(self):
        constructor, state, _, _ = make_constructor([3, 2], [0, 10], 10)
        at_round(state, 10, 1)

        assert constructor.hold_response(state) == [2, 2]
        assert state.no_value_offer_count == 1

    def test_all_undesirables_before_panic(self):
        constructor, state, _, _ = make_constructor([3, 2], [0, 10], 10)
        at_round(state, 10, 3)

        assert constructor.hold_response(state) == [0, 2]
        assert state.no_value_offer_count == 3

    def test_falls_through_after_panic(self):
        constructor, state, _, _ = make_constructor([3, 2], [0, 10], 10)
        at_round(state, 10, 4)

        assert constructor.hold_response(state) is None

    def test_falls_through_without_undesirables(self):
        constructor, state, _, _ = make_constructor([3, 2], [1, 10], 10)
        at_round(state, 10, 1)

        assert constructor.hold_response(state) is None


class TestBuild:
    """Tests for the offer construction branches."""

    def test_calculated_offer_respects_floor(self):
        constructor, state, model, sink = make_constructor([1, 4, 2], [6, 1, 0], 5)
        observe_all(constructor, model, [0, 0, 0], [1, 0, 0])
        at_round(state, 5, 3)

        # floor is 8.5 of 10: one unit of the cheap item fits, the rest do not
        assert constructor.build(state, model) == [1, 3, 0]
        assert sink.contains("Make calculated offer")

    def test_final_offer_to_stubborn_opponent(self):
        constructor, state, model, sink = make_constructor([1, 4], [6, 1], 5)
        observe_all(constructor, model, [0, 0], [0, 0])
        at_round(state, 5, 5)

        assert constructor.build(state, model) == [1, 2]
        assert sink.contains("stubborn")

    def test_final_offer_to_stubborn_opponent_keeps_some_value(self):
        constructor, state, model, _ = make_constructor([2], [5], 3)
        observe_all(constructor, model, [0])
        at_round(state, 3, 3)

        assert constructor.build(state, model) == [1]

    def test_final_offer_of_wanted_undesirables(self):
        constructor, state, model, _ = make_constructor([1, 4, 2], [6, 1, 0], 5)
        observe_all(constructor, model, [0, 0, 0], [1, 0, 0])
        at_round(state, 5, 5)

        assert model.is_stubborn is False
        assert constructor.build(state, model) == [1, 4, 0]
        assert state.no_value_offer_count == 2

    def test_final_offer_concedes_most_tradable_valued_unit(self):
        constructor, state, model, _ = make_constructor([1, 4], [6, 1], 5)
        observe_all(constructor, model, [0, 0], [1, 0])
        at_round(state, 5, 5)

        assert constructor.build(state, model) == [1, 3]

    def test_final_offer_skips_wanted_undesirable_for_valued_unit(self):
        constructor, state, model, _ = make_constructor([2, 1, 4], [0, 6, 1], 5)
        observe_all(constructor, model, [0, 0, 0], [1, 0, 0])
        at_round(state, 5, 5)

        ranked = by_tradability(rank_items(constructor.catalog, model, 0.6))
        assert constructor.no_value_important_count(model, ranked) == 0
        assert ranked[0].tradability == math.inf
        # the free item ranks first, but the conceded unit must be worth something
        assert constructor.build(state, model) == [0, 1, 3]

    def test_incremental_undesirables_before_fold(self):
        constructor, state, _, sink = make_constructor([3, 2], [0, 10], 10)
        model = OpponentModel(
            sub_total_req_counts=[12, 0],
            importance_scores=[4.0, 0.0],
            total_req_count=12,
        )
        at_round(state, 10, 1)

        assert constructor.build(state, model) == [2, 2]
        assert state.no_value_offer_count == 1
        assert state.rounds_till_fold == 2
        assert sink.contains("I wont fold yet")

    def test_early_fold(self):
        constructor, state, model, sink = make_constructor([3, 2], [0, 10], 10)
        observe_all(constructor, model, [0, 2])
        at_round(state, 10, 1)

        assert constructor.build(state, model) == [0, 2]
        assert state.rounds_till_fold == 1
        assert sink.contains("Fold early")
