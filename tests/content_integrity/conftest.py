"""Shared fixtures for content_integrity tests."""

import pytest

from content_integrity.config import AppConfig, DetectionConfig, LLMConfig
from content_integrity.judgment import SourceCandidate, StaticJudge
from content_integrity.utils.metrics import OperationMetrics, reset_operation_metrics

# ============================================================================
# Metrics
# ============================================================================


@pytest.fixture(autouse=True)
def metrics() -> OperationMetrics:
    """Fresh global metrics for every test."""
    return reset_operation_metrics()


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def detection_config() -> DetectionConfig:
    """Detection settings with library defaults."""
    return DetectionConfig()


@pytest.fixture
def small_segments_config() -> DetectionConfig:
    """Detection settings with tiny windows so short texts split."""
    return DetectionConfig(ai_segment_size=3, plagiarism_segment_size=4, max_concurrent=2)


@pytest.fixture
def llm_config() -> LLMConfig:
    """LLM settings pointing at a local test endpoint."""
    return LLMConfig(api_base="http://test:8000/v1", model_name="test-model", timeout=5.0)


@pytest.fixture
def app_config(detection_config: DetectionConfig, llm_config: LLMConfig) -> AppConfig:
    return AppConfig(llm=llm_config, detection=detection_config)


# ============================================================================
# Judge Fixtures
# ============================================================================


@pytest.fixture
def silent_judge() -> StaticJudge:
    """Judge that proposes nothing and scores every segment 0."""
    return StaticJudge()


@pytest.fixture
def wikipedia_candidate() -> SourceCandidate:
    return SourceCandidate(title="Academic integrity - Wikipedia", type="wikipedia", similarity=0.82)


# ============================================================================
# Sample Text Fixtures
# ============================================================================


@pytest.fixture
def corpus_sentence() -> str:
    """Verbatim copy of the first reference document."""
    return "Academic integrity is fundamental to the educational process."


@pytest.fixture
def unrelated_text() -> str:
    """Text sharing no vocabulary with the reference corpus."""
    return "Quantum chromodynamics describes strong interactions between quarks via gluons."


@pytest.fixture
def nine_words() -> str:
    return "alpha beta gamma delta epsilon zeta eta theta iota"
