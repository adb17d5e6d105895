"""Run the provisioning sequence with skip-if-present, fail-fast semantics.

Each step moves pending -> checking -> (skipped | installing -> (done | failed)).
The first failure stops the run; nothing is rolled back. Running again
skips whatever is already present and retries from the failed step.
"""
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from macsetup.core.host import Host
from macsetup.core.logger import get_logger
from macsetup.models.errors import PreconditionFailure, StepExecutionFailure
from macsetup.models.step import Report, Step, StepOutcome, StepStatus

logger = get_logger(__name__)


class Provisioner:
    """Executes Steps strictly in order against one host."""

    def __init__(
        self,
        host: Host,
        expected_platform: str = "darwin",
        on_outcome: Optional[Callable[[Step, StepOutcome], None]] = None,
    ):
        """Initialize provisioner.

        Args:
            host: Host whose platform is checked before any step runs
            expected_platform: Prefix the host platform must start with
            on_outcome: Called after each step reaches a terminal state
        """
        self.host = host
        self.expected_platform = expected_platform
        self.on_outcome = on_outcome
        self.states: Dict[str, StepStatus] = {}

    def check_platform(self):
        """Raise PreconditionFailure unless the host platform matches."""
        actual = self.host.platform()
        if not actual.startswith(self.expected_platform):
            logger.error(f"Platform check failed: expected {self.expected_platform}, got {actual}")
            raise PreconditionFailure(self.expected_platform, actual)

    def survey(self, sequence: Sequence[Step]) -> List[Tuple[Step, bool]]:
        """Evaluate presence checks only; no install action is run.

        Raises:
            PreconditionFailure: Host platform mismatch
            StepExecutionFailure: A presence check could not read host state
        """
        self.check_platform()
        return [(step, self._check(step)) for step in sequence]

    def run(self, sequence: Sequence[Step]) -> Report:
        """Run every step in order.

        Returns:
            Report of terminal outcomes. If a step failed it is the last
            outcome and later steps were never checked.

        Raises:
            PreconditionFailure: Host platform mismatch (before any step)
        """
        self.check_platform()

        self.states = {step.name: StepStatus.PENDING for step in sequence}
        report = Report()

        logger.info(f"Starting provisioning run ({len(sequence)} steps)")

        for step in sequence:
            outcome = self._run_step(step)
            report.add(outcome)
            if self.on_outcome is not None:
                self.on_outcome(step, outcome)

            if outcome.status is StepStatus.FAILED:
                remaining = len(sequence) - len(report.outcomes)
                logger.error(
                    f"✗ Aborting: {step.name} failed, {remaining} remaining step(s) not attempted"
                )
                break

        if report.ok:
            logger.info(
                f"✓ Provisioning complete: {len(report.installed)} installed, "
                f"{len(report.skipped)} already present"
            )
        return report

    def _failed(self, step: Step, error: StepExecutionFailure) -> StepOutcome:
        self.states[step.name] = StepStatus.FAILED
        error.step = step.name
        logger.error(f"✗ {step.name} failed: {error}")
        if error.stderr:
            logger.error(f"Error output: {error.stderr.strip()}")
        return StepOutcome(
            name=step.name,
            status=StepStatus.FAILED,
            cause=str(error),
            returncode=error.returncode,
        )

    def _check(self, step: Step) -> bool:
        """Evaluate a presence check, turning file errors into step failures."""
        try:
            return bool(step.presence_check())
        except OSError as e:
            raise StepExecutionFailure(
                f"Presence check failed: {e}", step=step.name
            ) from e

    def _run_step(self, step: Step) -> StepOutcome:
        self.states[step.name] = StepStatus.CHECKING
        try:
            present = self._check(step)
        except StepExecutionFailure as e:
            return self._failed(step, e)

        if present:
            self.states[step.name] = StepStatus.SKIPPED
            logger.info(f"✓ {step.name} is already installed")
            return StepOutcome(name=step.name, status=StepStatus.SKIPPED)

        self.states[step.name] = StepStatus.INSTALLING
        logger.info(f"Installing {step.name}...")

        try:
            step.install_action()
        except StepExecutionFailure as e:
            return self._failed(step, e)
        except OSError as e:
            return self._failed(step, StepExecutionFailure(str(e), step=step.name))

        self.states[step.name] = StepStatus.DONE
        logger.info(f"✓ {step.name} installed successfully")

        verified = True
        if step.verify_after_install and not self.host.mock:
            try:
                verified = self._check(step)
            except StepExecutionFailure as e:
                return self._failed(step, e)
            if not verified:
                # Would be reinstalled on every run until the check passes
                logger.warning(
                    f"{step.name} reported success but its presence check still fails; "
                    "the next run will try to install it again"
                )
        elif not step.verify_after_install:
            logger.warning(
                f"{step.name} takes effect in new login sessions only; "
                "re-running from this terminal will apply it again"
            )

        if step.post_install_message:
            logger.warning(step.post_install_message)

        return StepOutcome(
            name=step.name,
            status=StepStatus.DONE,
            verified=verified,
            message=step.post_install_message,
        )
