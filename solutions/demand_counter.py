class Agent:
    """Tallies what the opponent keeps asking for and gives up one unit of its favourite."""

    def __init__(self, me: int, counts: list[int], values: list[int], max_rounds: int):
        self.me = me
        self.counts = counts
        self.values = values
        self.rounds = max_rounds
        self.total = sum(c * v for c, v in zip(counts, values))
        self.wanted = [0] * len(counts)

    def offer(self, o: list[int] | None) -> list[int] | None:
        self.rounds -= 1
        if o is None:
            return self.counts.copy()

        worth = sum(v * n for v, n in zip(self.values, o))
        if self.rounds == 0 and self.me == 1 and worth > 0:
            return None
        if worth * 10 >= self.total * 6:
            return None

        for i, n in enumerate(o):
            self.wanted[i] += self.counts[i] - n

        proposal = [c if v else 0 for c, v in zip(self.counts, self.values)]
        favourite = -1
        best = -1.0
        for i, n in enumerate(proposal):
            if not n:
                continue
            ratio = self.wanted[i] / self.counts[i]
            if ratio > best or (ratio == best and self.values[i] < self.values[favourite]):
                best = ratio
                favourite = i
        if favourite >= 0 and sum(proposal) > 1:
            proposal[favourite] -= 1
        return proposal
