from dataclasses import asdict, dataclass, fields

from haggler.errors import ConfigurationError


@dataclass(frozen=True)
class StrategyConfig:
    """Tunable constants of the haggling strategy.

    Attributes:
        rounds_to_hold: rounds during which an opponent's hold is answered with
            our own hold vector. Zero disables it.
        fold_ratio: share of the rounds spent conceding undesirables one by one.
        panic_ratio: share of the rounds before every undesirable is offered at once.
        stubborn_acceptable_ratio: share of our total value we try to hand a
            stubborn opponent (by their estimate) on the final proposal.
        lowest_req_ratio: share of our total value the retained-value floor decays to.
        est_error_multiplier: dampening applied to demand-based value estimates.
        important_interest_ratio: per-round demand ratio above which an
            undesirable counts as something the opponent really wants.
    """

    rounds_to_hold: int = 0
    fold_ratio: float = 0.2
    panic_ratio: float = 0.4
    stubborn_acceptable_ratio: float = 0.5
    lowest_req_ratio: float = 0.7
    est_error_multiplier: float = 0.6
    important_interest_ratio: float = 0.3

    def __post_init__(self):
        if (
            not isinstance(self.rounds_to_hold, int)
            or isinstance(self.rounds_to_hold, bool)
            or self.rounds_to_hold < 0
        ):
            raise ConfigurationError(
                f"rounds_to_hold must be a non-negative integer, got {self.rounds_to_hold!r}"
            )
        for name in (
            "fold_ratio",
            "panic_ratio",
            "stubborn_acceptable_ratio",
            "lowest_req_ratio",
            "important_interest_ratio",
        ):
            ratio = getattr(self, name)
            if not _is_number(ratio) or not 0 <= ratio <= 1:
                raise ConfigurationError(f"{name} must be within [0, 1], got {ratio!r}")
        if not _is_number(self.est_error_multiplier) or self.est_error_multiplier <= 0:
            raise ConfigurationError(
                f"est_error_multiplier must be positive, got {self.est_error_multiplier!r}"
            )

    @classmethod
    def from_dict(cls, data: dict | None) -> "StrategyConfig":
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown strategy parameters: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict:
        return asdict(self)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
