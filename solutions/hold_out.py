class Agent:
    """Asks for everything every turn and only gives in on its very last turn."""

    def __init__(self, me: int, counts: list[int], values: list[int], max_rounds: int):
        self.me = me
        self.counts = counts
        self.values = values
        self.rounds = max_rounds

    def offer(self, o: list[int] | None) -> list[int] | None:
        self.rounds -= 1
        if o is not None:
            worth = sum(v * n for v, n in zip(self.values, o))
            if worth and self.rounds == 0 and self.me == 1:
                return None
        return self.counts.copy()
