# ============================================================================
# src/report_simplifier/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the report simplifier pipeline.

Stages turn the expected failures into result envelopes themselves:
- HallucinationError and StructuralValidationError from a completion reply,
  and SafetyViolation on the final summary attempt -> unprocessed
- CapabilityUnavailable -> deterministic fallback path

The orchestrator maps whatever escapes a stage:
- HallucinationError -> unprocessed (step "validation")
- InputError -> raised to the caller
- everything else, StructuralValidationError included -> error
"""


class ReportSimplifierError(Exception):
    """Base exception for all report simplifier errors."""
    pass


class InputError(ReportSimplifierError):
    """Missing or empty text / image input."""
    pass


class ExtractionFailure(ReportSimplifierError):
    """Text or OCR extraction failed."""
    pass


class OCRError(ExtractionFailure):
    """OCR engine could not read the image."""
    pass


class HallucinationError(ReportSimplifierError):
    """Normalized output cannot be traced back to the raw input."""
    pass


class StructuralValidationError(ReportSimplifierError):
    """Malformed JSON or missing fields in a completion reply or stage output."""
    pass


class SafetyViolation(ReportSimplifierError):
    """Generated patient text contains directive or diagnostic language."""
    def __init__(self, message: str, phrase: str = ""):
        super().__init__(message)
        self.phrase = phrase


class InternalInvariantError(ReportSimplifierError):
    """Final result shape violated an upstream stage contract."""
    pass


class CompletionError(ReportSimplifierError):
    """Base class for completion capability failures."""
    pass


class CapabilityUnavailable(CompletionError):
    """Completion capability disabled, unreachable, timed out or out of retries."""
    pass


class RetryableCompletionError(CompletionError):
    """Rate limit, overload or server-side failure worth retrying."""
    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class CompletionRequestError(CompletionError):
    """Non-retryable request failure (authentication, bad request)."""
    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
