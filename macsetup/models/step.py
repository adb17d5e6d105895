"""Step, outcome and report models for the provisioning sequence."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional


class StepStatus(Enum):
    """Lifecycle of a single step during a run."""
    PENDING = "pending"
    CHECKING = "checking"
    SKIPPED = "skipped"
    INSTALLING = "installing"
    DONE = "done"
    FAILED = "failed"

    @property
    def label(self) -> str:
        """Report wording for terminal states."""
        return {
            StepStatus.SKIPPED: "already_present",
            StepStatus.DONE: "installed",
            StepStatus.FAILED: "failed",
        }.get(self, self.value)


@dataclass(frozen=True)
class Step:
    """One idempotent provisioning unit.

    ``presence_check`` must only query host state. ``install_action`` raises
    StepExecutionFailure when the underlying command fails.
    """
    name: str
    presence_check: Callable[[], bool]
    install_action: Callable[[], None]
    post_install_message: Optional[str] = None
    description: str = ""
    # False for changes that only show up in a new login session
    verify_after_install: bool = True


@dataclass
class StepOutcome:
    """Terminal result of one step."""
    name: str
    status: StepStatus
    cause: Optional[str] = None
    returncode: Optional[int] = None
    verified: bool = True
    message: Optional[str] = None

    def as_dict(self) -> dict:
        data = {"name": self.name, "status": self.status.label}
        if self.status is StepStatus.FAILED:
            data["cause"] = self.cause
        if not self.verified:
            data["verified"] = False
        return data


@dataclass
class Report:
    """Ordered outcomes of a provisioning run."""
    outcomes: List[StepOutcome] = field(default_factory=list)

    def add(self, outcome: StepOutcome):
        self.outcomes.append(outcome)

    @property
    def installed(self) -> List[str]:
        return [o.name for o in self.outcomes if o.status is StepStatus.DONE]

    @property
    def skipped(self) -> List[str]:
        return [o.name for o in self.outcomes if o.status is StepStatus.SKIPPED]

    @property
    def failed(self) -> Optional[StepOutcome]:
        for outcome in self.outcomes:
            if outcome.status is StepStatus.FAILED:
                return outcome
        return None

    @property
    def unverified(self) -> List[str]:
        return [o.name for o in self.outcomes if not o.verified]

    @property
    def ok(self) -> bool:
        return self.failed is None

    @property
    def exit_code(self) -> int:
        failed = self.failed
        if failed is None:
            return 0
        return failed.returncode or 1
