"""Data models for schedule_sources pipeline stage."""

from dataclasses import dataclass

from discover_sources.models import Source


@dataclass
class WorkPlan:
    """Sources selected for one run, and the shard that selected them."""
    priority: list[Source]
    sharded: list[Source]
    shard_index: int
    shard_count: int

    @property
    def sources(self) -> list[Source]:
        return self.priority + self.sharded
