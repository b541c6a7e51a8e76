"""
Medical lab report simplifier.

Turns lab report text or images into validated structured tests and a
safety-checked plain-language explanation.
"""

from .core.orchestrator import SERVICE_VERSION as __version__
from .core.orchestrator import ReportPipeline

__all__ = ["ReportPipeline", "__version__"]
