"""DTOs for the seeding phase."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class PassResult:
    """
    Outcome of one seeding pass.

    :param name: Pass identifier (``unique_plays``, ``creator_hearts``,
        ``level_hearts``).
    :param targets: Stored entities that had a positive counter.
    :param rows: Join rows created (a unique-play pass counts each
        unique-play/play-count pair once).
    :param clamped: Targets whose counter exceeded the pool and were cut.
    :param pool: Placeholders available to the pass.
    """

    name: str
    targets: int = 0
    rows: int = 0
    clamped: int = 0
    pool: int = 0


@dataclass(slots=True)
class SeedResult:
    """
    Summary of a whole seeding run.

    :param pool_size: Placeholder users created by this run.
    :param placeholders_total: Placeholder users in the store after the run.
    :param purged: Placeholder users removed first (replace mode only).
    :param passes: Per-pass results, in execution order.
    """

    pool_size: int = 0
    placeholders_total: int = 0
    purged: int = 0
    passes: list[PassResult] = field(default_factory=list)

    def pass_named(self, name: str) -> PassResult:
        for result in self.passes:
            if result.name == name:
                return result
        raise KeyError(name)
