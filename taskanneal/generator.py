import random

from taskanneal.models import HORIZON, ProblemInstance, Task
from taskanneal.parser import DURATION_MAX, PROFIT_MAX_EXCLUSIVE


def generate_instance(n: int, seed: int = 0) -> ProblemInstance:
    """Generate a random instance with deadlines spread over min(20n, 1440) minutes."""
    if n <= 0:
        return ProblemInstance(tasks=())
    rng = random.Random(seed)
    spread = min(n * 20, HORIZON)
    tasks = []
    for _ in range(n):
        deadline = int(rng.random() * spread) + 1
        duration = int(rng.random() * DURATION_MAX) + 1
        # rounded to 3 decimals, kept inside the open profit range
        profit = round(rng.random() * PROFIT_MAX_EXCLUSIVE * 1000.0) / 1000.0
        profit = min(max(profit, 0.001), PROFIT_MAX_EXCLUSIVE - 0.001)
        tasks.append(Task(deadline, duration, profit))
    return ProblemInstance(tasks=tuple(tasks))
