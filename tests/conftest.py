# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import asyncio
import json
from contextlib import asynccontextmanager

import pytest

from report_simplifier.completion.disabled_client import DisabledCompletionClient
from report_simplifier.completion.ollama_client import OllamaCompletionClient
from report_simplifier.config import CompletionSettings, PipelineSettings
from report_simplifier.core.enums import LabStatus
from report_simplifier.core.models import NormalizedTest, ReferenceRange
from report_simplifier.core.orchestrator import ReportPipeline
from report_simplifier.extractors.ocr_extractor import OCREngine, OCRResult
from report_simplifier.extractors.text_extractor import TextExtractor
from report_simplifier.normalizers.ai_normalizer import AINormalizer
from report_simplifier.summary.ai_summary import SummaryGenerator


class FakeOCREngine(OCREngine):
    """Returns a fixed OCR result, or raises the given error."""

    def __init__(self, text: str = "", confidence: float = 0.9, error: Exception = None):
        self.text = text
        self.confidence = confidence
        self.error = error
        self.calls = 0

    async def recognize(self, image_bytes: bytes) -> OCRResult:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return OCRResult(text=self.text, confidence=self.confidence, method="fake")


@pytest.fixture
def sample_report_text():
    """Two abnormal results, as typed by a patient"""
    return "Hemoglobin 10.2 g/dL (Low), WBC 11200 /uL (High)"


@pytest.fixture
def normal_report_text():
    return "Hemoglobin 14.1 g/dL (Normal), Glucose 88 mg/dL (Normal)"


@pytest.fixture
def sample_lab_text():
    """Multi-line lab report with header lines"""
    return """
    City Lab Services
    Patient: Jane Roe        Date: 2024-01-15

    COMPLETE BLOOD COUNT
    Hemoglobin: 13.2 g/dL
    WBC: 7200 /uL
    Platelets: 250000 /uL
    Glucose 105 mg/dL (High)
    """


@pytest.fixture
def fast_settings():
    """Pipeline settings without inter-stage delay"""
    return PipelineSettings(_env_file=None, INTER_STAGE_DELAY_SECONDS=0.0)


@pytest.fixture
def fast_completion():
    """Completion settings without retry delay"""
    return CompletionSettings(
        _env_file=None,
        COMPLETION_BACKEND="disabled",
        COMPLETION_RETRY_BASE_DELAY=0.0,
    )


@pytest.fixture
def make_test():
    """Factory for NormalizedTest records"""
    def _make(name="Hemoglobin", value=10.2, unit="g/dL", status=LabStatus.LOW, low=12.0, high=16.0):
        return NormalizedTest(
            name=name,
            value=value,
            unit=unit,
            status=status,
            ref_range=ReferenceRange(low=low, high=high),
        )
    return _make


@pytest.fixture
def abnormal_tests(make_test):
    return [
        make_test(),
        make_test(name="WBC", value=11200.0, unit="/μL", status=LabStatus.HIGH, low=4000.0, high=11000.0),
    ]


@pytest.fixture
def hemoglobin_entry():
    return {
        "name": "Hemoglobin",
        "value": 10.2,
        "unit": "g/dL",
        "status": "low",
        "ref_range": {"low": 12, "high": 16},
    }


@pytest.fixture
def wbc_entry():
    return {
        "name": "WBC",
        "value": 11200,
        "unit": "/μL",
        "status": "high",
        "ref_range": {"low": 4000, "high": 11000},
    }


@pytest.fixture
def normalization_reply():
    """Builds a normalization completion reply"""
    def _reply(tests, notes=None):
        return json.dumps({"tests": tests, "notes": notes or []})
    return _reply


@pytest.fixture
def safe_summary_reply():
    return json.dumps({
        "summary": (
            "Two of your results are outside the usual range. "
            "A healthcare provider can help explain what they mean."
        ),
        "explanations": [
            "Low hemoglobin may relate to many factors that affect red blood cells.",
            "White blood cell counts can vary for many everyday reasons.",
        ],
    })


@pytest.fixture
def make_pipeline(fast_settings, fast_completion):
    """Factory for a pipeline with no delays and an injected client"""
    def _make(client=None, ocr_engine=None):
        client = client or DisabledCompletionClient()
        return ReportPipeline(
            text_extractor=TextExtractor(ocr_engine=ocr_engine, settings=fast_settings),
            normalizer=AINormalizer(client, settings=fast_settings, completion_config=fast_completion),
            summary_generator=SummaryGenerator(client, settings=fast_settings, completion_config=fast_completion),
            completion_client=client,
            settings=fast_settings,
        )
    return _make


@pytest.fixture
def fake_ocr():
    """Factory for FakeOCREngine"""
    def _make(text="", confidence=0.9, error=None):
        return FakeOCREngine(text=text, confidence=confidence, error=error)
    return _make


class FakeHTTPResponse:
    def __init__(self, status: int = 200, body=None, text: str = ""):
        self.status = status
        self.body = body if body is not None else {}
        self._text = text

    async def text(self) -> str:
        return self._text

    async def json(self):
        return self.body


class FakeHTTPSession:
    """Stands in for aiohttp.ClientSession; post() raises, stalls, or replies."""

    def __init__(self, response: FakeHTTPResponse = None, error: Exception = None, delay: float = 0.0):
        self.response = response or FakeHTTPResponse()
        self.error = error
        self.delay = delay
        self.closed = False
        self.posts = []

    @asynccontextmanager
    async def post(self, url, json=None):
        self.posts.append((url, json))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        yield self.response

    async def close(self):
        self.closed = True


@pytest.fixture
def ollama_client():
    """Factory for an Ollama client bound to a FakeHTTPSession"""
    def _make(session: FakeHTTPSession, timeout: float = 5.0):
        client = OllamaCompletionClient({"ollama_host": "http://ollama.test:11434", "timeout": timeout})
        client._session = session
        client._session_loop = asyncio.get_running_loop()
        return client
    return _make


@pytest.fixture
def http_session():
    """Factory for FakeHTTPSession"""
    def _make(status=200, body=None, text="", error=None, delay=0.0):
        return FakeHTTPSession(
            response=FakeHTTPResponse(status=status, body=body, text=text),
            error=error,
            delay=delay,
        )
    return _make
