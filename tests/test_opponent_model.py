import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from haggler.catalog import Catalog
from haggler.opponent import OpponentModel


class TestOpponentModel:
    """Tests for the opponent preference model."""

    @pytest.fixture(autouse=True)
    def setup(self):
        self.catalog = Catalog([3, 2], [0, 10])
        self.model = OpponentModel.for_catalog(self.catalog)

    def test_initial_state(self):
        model = self.model
        assert model.importance_scores == pytest.approx([0.6, 0.4])
        assert model.sub_total_req_counts == [0, 0]
        assert model.total_req_count == 0
        assert model.is_stubborn is True
        assert model.has_folded is False

    def test_hold_before_fold(self):
        held = self.model.observe(self.catalog, [0, 0], None)

        assert held is True
        assert self.model.times_held == 1
        assert self.model.times_held_after_fold == 0
        assert self.model.request_history == [[3, 2]]
        assert self.model.fold_req_history == []
        assert self.model.sub_total_req_counts == [3, 2]
        assert self.model.total_req_count == 5
        assert self.model.importance_scores == [1.0, 1.0]

    def test_importance_is_cumulative(self):
        self.model.observe(self.catalog, [0, 0], None)
        self.model.observe(self.catalog, [0, 0], [0, 0])

        assert self.model.is_stubborn is True
        assert self.model.sub_total_req_counts == [6, 4]
        assert self.model.importance_scores == [2.0, 2.0]

    def test_concession_is_a_fold(self):
        self.model.observe(self.catalog, [0, 0], None)
        held = self.model.observe(self.catalog, [1, 0], [0, 0])

        assert held is False
        assert self.model.has_folded is True
        assert self.model.is_stubborn is False
        assert self.model.fold_req_history == [[2, 2]]
        assert self.model.sub_total_req_counts == [5, 4]
        assert self.model.total_req_count == 9

    def test_hold_after_fold(self):
        self.model.observe(self.catalog, [1, 0], None)
        held = self.model.observe(self.catalog, [0, 0], [1, 0])

        assert held is False
        assert self.model.times_held == 1
        assert self.model.times_held_after_fold == 1

    def test_first_observation_never_breaks_stubbornness(self):
        self.model.observe(self.catalog, [2, 1], None)
        assert self.model.is_stubborn is True

    def test_stubbornness_never_comes_back(self):
        self.model.observe(self.catalog, [0, 0], None)
        self.model.observe(self.catalog, [1, 0], [0, 0])
        for _ in range(3):
            self.model.observe(self.catalog, [1, 0], [1, 0])

        assert self.model.is_stubborn is False
