"""Data models for macsetup."""
from macsetup.models.errors import (
    ConfigEmitError,
    MacSetupError,
    PreconditionFailure,
    SequenceDefinitionError,
    StepExecutionFailure,
)
from macsetup.models.step import Report, Step, StepOutcome, StepStatus

__all__ = [
    'ConfigEmitError',
    'MacSetupError',
    'PreconditionFailure',
    'SequenceDefinitionError',
    'StepExecutionFailure',
    'Report',
    'Step',
    'StepOutcome',
    'StepStatus',
]
