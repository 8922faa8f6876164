"""Run configuration: which examples to run and in what order."""

import logging
from collections.abc import Iterable, Sequence

from pydantic import Field, field_validator

from bdd_runner.models.base import Model
from bdd_runner.models.metadata import normalize_tags
from bdd_runner.models.tree import TestNode
from bdd_runner.transforms import (
    filter_by_description,
    filter_by_tags,
    filter_focused,
    shuffle,
)

log = logging.getLogger(__name__)


class RunConfig(Model):
    """Selection and ordering options for a run."""

    tags: tuple[str, ...] = Field(
        default=(), description="Run only examples carrying all of these tags"
    )
    example_filter: str | None = Field(
        default=None, description="Case-insensitive description substring"
    )
    seed: int | None = Field(
        default=None, description="Shuffle siblings with this seed (None keeps order)"
    )

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tag_values(cls, value: Iterable[str]) -> tuple[str, ...]:
        """Normalize tags the same way metadata does."""
        if isinstance(value, str):
            value = [value]
        return normalize_tags(value)

    def prepare(self, nodes: Sequence[TestNode]) -> Sequence[TestNode]:
        """Apply focus, tag and description filters, then the optional shuffle."""
        prepared = filter_focused(nodes)
        if self.tags:
            log.info("Filtering examples by tags: %s", ", ".join(self.tags))
            prepared = filter_by_tags(self.tags, prepared)
        if self.example_filter:
            log.info("Filtering examples by description: %s", self.example_filter)
            prepared = filter_by_description(self.example_filter, prepared)
        if self.seed is not None:
            log.info("Randomizing example order with seed %d", self.seed)
            prepared = shuffle(self.seed, prepared)
        return prepared
