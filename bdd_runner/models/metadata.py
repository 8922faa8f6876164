"""Tags and traits attached to examples and groups."""

from collections.abc import Iterable, Mapping

from pydantic import Field, field_validator

from bdd_runner.models.base import Model


def normalize_tag(tag: str) -> str | None:
    """Trim and lowercase a tag, returning None for blank tags."""
    normalized = tag.strip().lower()
    return normalized or None


def normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    """Normalize tags, dropping blanks and duplicates while keeping order."""
    normalized: list[str] = []
    for tag in tags:
        if (value := normalize_tag(tag)) is not None and value not in normalized:
            normalized.append(value)
    return tuple(normalized)


class TestMetadata(Model):
    """Metadata associated with an example or group.

    Tags are normalized on construction, so every instance holds lowercase,
    trimmed, de-duplicated tags in first-insertion order.
    """

    __test__ = False

    tags: tuple[str, ...] = Field(default=(), description="Normalized tags")
    traits: Mapping[str, str] = Field(
        default_factory=dict, description="Free-form key/value traits"
    )

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tag_values(cls, value: Iterable[str]) -> tuple[str, ...]:
        """Normalize raw tag input; a bare string counts as a single tag."""
        if isinstance(value, str):
            value = [value]
        return normalize_tags(value)

    @classmethod
    def of_tags(cls, tags: Iterable[str]) -> "TestMetadata":
        """Create metadata containing the supplied tags."""
        return cls(tags=tuple(tags))

    def add_tag(self, tag: str) -> "TestMetadata":
        """Return metadata with the tag appended if not already present."""
        return self.add_tags([tag])

    def add_tags(self, tags: Iterable[str]) -> "TestMetadata":
        """Return metadata with tags appended, preserving order."""
        return TestMetadata(tags=(*self.tags, *tags), traits=self.traits)

    def remove_tag(self, tag: str) -> "TestMetadata":
        """Return metadata without the given tag."""
        normalized = normalize_tag(tag)
        if normalized is None:
            return self
        return TestMetadata(
            tags=tuple(t for t in self.tags if t != normalized), traits=self.traits
        )

    def clear_tags(self) -> "TestMetadata":
        """Return metadata with no tags."""
        return TestMetadata(traits=self.traits)

    def set_trait(self, key: str, value: str) -> "TestMetadata":
        """Return metadata with the trait set or replaced."""
        return TestMetadata(tags=self.tags, traits={**self.traits, key: value})

    def get_trait(self, key: str) -> str | None:
        """Return a trait value, or None when missing."""
        return self.traits.get(key)

    def has_tag(self, tag: str) -> bool:
        """Check whether the metadata carries the tag."""
        normalized = normalize_tag(tag)
        return normalized is not None and normalized in self.tags

    def has_all_tags(self, tags: Iterable[str]) -> bool:
        """Check whether every (non-blank) tag is present."""
        return all(tag in self.tags for tag in normalize_tags(tags))

    def has_any_tag(self, tags: Iterable[str]) -> bool:
        """Check whether at least one (non-blank) tag is present."""
        return any(tag in self.tags for tag in normalize_tags(tags))
