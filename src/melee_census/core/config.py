"""Configuration dataclasses for the harvesting pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from melee_census.core.constants import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_EXCLUDED_OWNER_IDS,
    DEFAULT_EXCLUDED_SLUGS,
    DEFAULT_INITIAL_BACKOFF_SECONDS,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PAGE_DELAY_SECONDS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_RESULTS_PATH,
    DEFAULT_TIMEOUT,
)


class FailurePolicy(Enum):
    """What the monthly driver does when a tournament walk fails."""

    ABORT = "abort"  # Re-raise; the month is not written
    SKIP = "skip"  # Log, drop the tournament, keep going


@dataclass(frozen=True)
class ExclusionPolicy:
    """Tournaments that never count, by slug or by owner id."""

    slugs: frozenset[str] = DEFAULT_EXCLUDED_SLUGS
    owner_ids: frozenset[int] = DEFAULT_EXCLUDED_OWNER_IDS

    def excludes_slug(self, slug: str) -> bool:
        return slug in self.slugs

    def excludes_owner(self, owner_id: object) -> bool:
        return owner_id in self.owner_ids

    def extended(
        self,
        slugs: Iterable[str] = (),
        owner_ids: Iterable[int] = (),
    ) -> ExclusionPolicy:
        """Return a copy with extra slugs and owner ids excluded."""
        return ExclusionPolicy(
            slugs=self.slugs | frozenset(slugs),
            owner_ids=self.owner_ids | frozenset(owner_ids),
        )


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff for 5xx responses.

    ``max_attempts=None`` retries forever; server outages are waited out
    rather than surfaced.
    """

    initial_delay: float = DEFAULT_INITIAL_BACKOFF_SECONDS
    multiplier: float = DEFAULT_BACKOFF_MULTIPLIER
    max_attempts: Optional[int] = None

    def delay_for(self, retry_index: int) -> float:
        """Seconds to wait before retry number ``retry_index`` (0-based)."""
        return self.initial_delay * (self.multiplier**retry_index)

    def allows(self, attempts: int) -> bool:
        """Whether another attempt may follow ``attempts`` failed ones."""
        return self.max_attempts is None or attempts < self.max_attempts


@dataclass
class HarvestConfig:
    """Configuration for a full backfill run."""

    api_key: str
    results_path: Path = field(default_factory=lambda: Path(DEFAULT_RESULTS_PATH))
    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))

    exclusions: ExclusionPolicy = field(default_factory=ExclusionPolicy)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    failure_policy: FailurePolicy = FailurePolicy.ABORT

    page_size: int = DEFAULT_PAGE_SIZE
    page_delay: float = DEFAULT_PAGE_DELAY_SECONDS
    timeout: Optional[float] = DEFAULT_TIMEOUT

    # Console progress bars
    show_progress: bool = True
