"""Item catalog and the strategy thresholds derived from it at match start."""

import math
from dataclasses import dataclass

from haggler.config import StrategyConfig
from haggler.errors import ConfigurationError, ProtocolError


@dataclass(frozen=True)
class Item:
    count: int
    value: float

    @property
    def sub_total_value(self) -> float:
        return self.count * self.value


class Catalog:
    """The item types of one match, in the order the harness uses."""

    def __init__(self, counts: list[int], values: list[float]):
        if len(counts) != len(values):
            raise ConfigurationError(
                f"counts and values differ in length ({len(counts)} != {len(values)})"
            )
        if not counts:
            raise ConfigurationError("catalog must contain at least one item type")

        items = []
        for i, (count, value) in enumerate(zip(counts, values)):
            if not _is_int(count) or count < 1:
                raise ConfigurationError(f"count of item {i} must be an integer >= 1, got {count!r}")
            if not _is_number(value) or not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"value of item {i} must be a number >= 0, got {value!r}")
            items.append(Item(count, value))

        self.items = tuple(items)
        self.total_count = sum(item.count for item in items)
        self.total_value = sum(item.sub_total_value for item in items)
        self.total_no_value_count = sum(item.count for item in items if not item.value)

    @property
    def is_all_valued(self) -> bool:
        return self.total_no_value_count == 0

    def __len__(self):
        return len(self.items)

    def hold_vector(self) -> list[int]:
        """Ask for everything."""
        return [item.count for item in self.items]

    def value_of(self, counts: list[int]) -> float:
        return sum(count * item.value for count, item in zip(counts, self.items))

    def check_proposal(self, proposal) -> list[int]:
        """Return ``proposal`` as a list, or raise ProtocolError if it does not fit the catalog."""
        if proposal is None:
            raise ProtocolError("proposal is missing")
        try:
            proposal = list(proposal)
        except TypeError:
            raise ProtocolError("proposal is not a sequence") from None
        if len(proposal) != len(self.items):
            raise ProtocolError(
                f"proposal has {len(proposal)} entries, catalog has {len(self.items)}"
            )
        for i, (count, item) in enumerate(zip(proposal, self.items)):
            if not _is_int(count):
                raise ProtocolError(f"entry {i} of proposal is not an integer: {count!r}")
            if not 0 <= count <= item.count:
                raise ProtocolError(
                    f"entry {i} of proposal is {count}, expected within [0, {item.count}]"
                )
        return proposal


@dataclass(frozen=True)
class Thresholds:
    rounds: int
    rounds_to_hold: int
    rounds_till_fold: int
    rounds_till_panic: int
    stubborn_acceptable_offer_value: float
    lowest_req_value: float

    @classmethod
    def derive(
        cls, catalog: Catalog, rounds: int, is_first: bool, strategy: StrategyConfig
    ) -> "Thresholds":
        check_rounds(rounds)
        first_mover_bonus = 1 if is_first else 0
        return cls(
            rounds=rounds,
            rounds_to_hold=strategy.rounds_to_hold,
            rounds_till_fold=math.floor(rounds * strategy.fold_ratio) + first_mover_bonus,
            rounds_till_panic=math.floor(rounds * strategy.panic_ratio) + first_mover_bonus,
            stubborn_acceptable_offer_value=catalog.total_value * strategy.stubborn_acceptable_ratio,
            lowest_req_value=catalog.total_value * strategy.lowest_req_ratio,
        )

    @property
    def turns(self) -> int:
        return self.rounds * 2


def check_rounds(rounds) -> int:
    if not _is_int(rounds) or rounds < 1:
        raise ConfigurationError(f"rounds must be an integer >= 1, got {rounds!r}")
    return rounds


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
