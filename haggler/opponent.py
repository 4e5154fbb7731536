from dataclasses import dataclass, field

from haggler.catalog import Catalog


@dataclass
class OpponentModel:
    """Running estimate of what the opponent wants, built from its proposals.

    ``importance_scores`` are cumulative demand ratios: after many rounds of
    asking for every unit of an item its score keeps growing past 1.
    """

    sub_total_req_counts: list[int]
    importance_scores: list[float]
    request_history: list[list[int]] = field(default_factory=list)
    fold_req_history: list[list[int]] = field(default_factory=list)
    times_held: int = 0
    times_held_after_fold: int = 0
    has_folded: bool = False
    is_stubborn: bool = True
    total_req_count: int = 0

    @classmethod
    def for_catalog(cls, catalog: Catalog) -> "OpponentModel":
        return cls(
            sub_total_req_counts=[0] * len(catalog),
            importance_scores=[item.count / catalog.total_count for item in catalog.items],
        )

    def observe(
        self, catalog: Catalog, offered: list[int], prev_offered: list[int] | None
    ) -> bool:
        """Fold one incoming proposal into the model.

        ``offered`` is what the opponent would give us; the opponent's ask is
        the complement. Returns True when the opponent is holding and has never
        folded, which is when the caller should run hold handling.
        """
        requested = [item.count - count for item, count in zip(catalog.items, offered)]
        self.request_history.append(requested)

        if prev_offered is not None and self.is_stubborn and offered != prev_offered:
            self.is_stubborn = False

        held_before_fold = False
        if not any(offered):
            self.times_held += 1
            if self.has_folded:
                self.times_held_after_fold += 1
            else:
                held_before_fold = True
        else:
            self.has_folded = True
            self.fold_req_history.append(requested)

        self.sub_total_req_counts = [
            sub_total + count for sub_total, count in zip(self.sub_total_req_counts, requested)
        ]
        self.total_req_count = sum(self.sub_total_req_counts)
        self.importance_scores = [
            sub_total / item.count
            for sub_total, item in zip(self.sub_total_req_counts, catalog.items)
        ]
        return held_before_fold
