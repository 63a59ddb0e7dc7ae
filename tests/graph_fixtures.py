import random

from task_graph_engine.core.model import TaskRecord


def basic_records() -> list[TaskRecord]:
    return [
        TaskRecord(id=1, dependency_ids=()),
        TaskRecord(id=2, dependency_ids=(1,)),
        TaskRecord(id=3, dependency_ids=(1, 2)),
    ]


def random_records(seed: int, n: int = 12, connected: bool = False) -> list[TaskRecord]:
    """Random task set over [0, n); may contain self and duplicate dependencies."""
    rng = random.Random(seed)
    records = []
    for tid in range(n):
        deps = [rng.randrange(n) for _ in range(rng.randint(0, 3))]
        if connected and tid > 0:
            deps.append(rng.randrange(tid))
        records.append(TaskRecord(id=tid, dependency_ids=tuple(deps)))
    return records
