# doc_redaction/core/domain.py

"""Domain models for redaction results."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Optional

from doc_redaction.core.definitions import RedactionCategory


@dataclass(frozen=True)
class StepOutcome:
    """Outcome of one non-fatal sub-step of a redaction run.

    Attributes:
        step: Name of the sub-step (tracking, header, scan)
        ok: False when a host error left the step unfinished
        error: Host error met during the step, even if it was recovered
    """

    step: str
    ok: bool = True
    error: Optional[str] = None


@dataclass(frozen=True)
class TrackingOutcome(StepOutcome):
    """Result of switching the document to track all changes."""

    supported: bool = False
    enabled: bool = False


@dataclass(frozen=True)
class HeaderOutcome(StepOutcome):
    """Result of ensuring the confidentiality header.

    Attributes:
        present: Whether the header marker is in the document after the step
        placement: "existing", "header" or "body"; None when nothing was placed
    """

    present: bool = False
    placement: Optional[str] = None


@dataclass(frozen=True)
class CategoryOutcome(StepOutcome):
    """Result of one scan-and-replace pass."""

    category: Optional[RedactionCategory] = None
    count: int = 0
    distinct_matches: int = 0


def _empty_counts() -> Dict[RedactionCategory, int]:
    return {category: 0 for category in RedactionCategory}


@dataclass
class RedactionResult:
    """Result object returned by the redaction engine.

    Filled in phase by phase during a run and frozen before it is handed
    to the caller.

    Attributes:
        counts: Replacements made per category
        tracking_enabled: Whether change tracking was confirmed active
        header_added: Whether the confidentiality header is present
        outcomes: Ordered trail of sub-step outcomes
    """

    counts: Dict[RedactionCategory, int] = field(default_factory=_empty_counts)
    tracking_enabled: bool = False
    header_added: bool = False
    outcomes: List[StepOutcome] = field(default_factory=list)
    _frozen: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if self._frozen:
            raise AttributeError(f"RedactionResult is read-only, cannot set '{name}'")
        super().__setattr__(name, value)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def email_count(self) -> int:
        return self.counts[RedactionCategory.EMAIL]

    @property
    def phone_count(self) -> int:
        return self.counts[RedactionCategory.PHONE]

    @property
    def ssn_count(self) -> int:
        return self.counts[RedactionCategory.NATIONAL_ID]

    @property
    def frozen(self) -> bool:
        return self._frozen

    def record(self, outcome: StepOutcome) -> None:
        """Appends a sub-step outcome to the audit trail."""
        if self._frozen:
            raise AttributeError("RedactionResult is read-only")
        self.outcomes.append(outcome)

    def freeze(self) -> "RedactionResult":
        """Makes the result read-only and returns it."""
        self.counts = MappingProxyType(dict(self.counts))  # type: ignore[assignment]
        self.outcomes = tuple(self.outcomes)  # type: ignore[assignment]
        super().__setattr__("_frozen", True)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Returns a JSON-friendly summary for display and logging."""
        return {
            "email_count": self.email_count,
            "phone_count": self.phone_count,
            "ssn_count": self.ssn_count,
            "total": self.total,
            "tracking_enabled": self.tracking_enabled,
            "header_added": self.header_added,
        }
