class Agent:
    """Takes anything worth half its total; otherwise gives away its worthless items."""

    def __init__(self, me: int, counts: list[int], values: list[int], max_rounds: int):
        self.counts = counts
        self.values = values
        self.total = sum(c * v for c, v in zip(counts, values))

    def offer(self, o: list[int] | None) -> list[int] | None:
        if o is not None and sum(v * n for v, n in zip(self.values, o)) * 2 >= self.total:
            return None
        return [c if v else 0 for c, v in zip(self.counts, self.values)]
