"""
Utility modules for the report simplifier.
"""

from .exceptions import (
    ReportSimplifierError,
    InputError,
    ExtractionFailure,
    OCRError,
    HallucinationError,
    StructuralValidationError,
    SafetyViolation,
    InternalInvariantError,
    CompletionError,
    CapabilityUnavailable,
    RetryableCompletionError,
    CompletionRequestError,
)

from .logging import (
    setup_logging,
    JsonFormatter,
    ProcessingLogAdapter,
)

__all__ = [
    # Exceptions
    'ReportSimplifierError',
    'InputError',
    'ExtractionFailure',
    'OCRError',
    'HallucinationError',
    'StructuralValidationError',
    'SafetyViolation',
    'InternalInvariantError',
    'CompletionError',
    'CapabilityUnavailable',
    'RetryableCompletionError',
    'CompletionRequestError',
    # Logging
    'setup_logging',
    'JsonFormatter',
    'ProcessingLogAdapter',
]
