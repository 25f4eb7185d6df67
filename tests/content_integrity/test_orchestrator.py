"""Tests for content_integrity/orchestrator.py - document analysis."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from content_integrity.judgment import LLMJudge, SourceCandidate, StaticJudge, VLLMClient
from content_integrity.models import AIContentResult, PlagiarismResult
from content_integrity.orchestrator import AnalysisOrchestrator, AnalysisStatus, DocumentAnalysis


# ============================================================================
# DocumentAnalysis
# ============================================================================


class TestDocumentAnalysis:
    """Tests for DocumentAnalysis."""

    def test_combined_confidence_is_mean(self):
        analysis = DocumentAnalysis(
            plagiarism=PlagiarismResult(confidence_score=88.0),
            ai_content=AIContentResult(confidence_score=60.0),
        )
        assert analysis.combined_confidence == 74.0

    def test_to_record(self):
        analysis = DocumentAnalysis(
            plagiarism=PlagiarismResult(60.0, [], 2, 88.0),
            ai_content=AIContentResult(25.0, [], 40.0),
            completed_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        )

        record = analysis.to_record()

        assert record["plagiarism_percentage"] == 60.0
        assert record["ai_content_percentage"] == 25.0
        assert record["confidence_score"] == 64.0
        assert record["total_sources"] == 2
        assert record["status"] == "completed"
        assert record["completed_at"] == "2024-05-01T12:00:00+00:00"
        data = json.loads(record["analysis_data"])
        assert set(data) == {"plagiarism", "ai"}
        assert data["ai"]["overall_percentage"] == 25.0

    def test_to_dict(self):
        analysis = DocumentAnalysis(
            plagiarism=PlagiarismResult(),
            ai_content=AIContentResult(),
            word_count=8,
            status=AnalysisStatus.FAILED,
        )

        data = analysis.to_dict()

        assert data["status"] == "failed"
        assert data["word_count"] == 8
        assert set(data) >= {"plagiarism", "ai", "combined_confidence"}


# ============================================================================
# AnalysisOrchestrator
# ============================================================================


class TestAnalysisOrchestrator:
    """Tests for AnalysisOrchestrator."""

    @pytest.mark.asyncio
    async def test_analyze_corpus_sentence(self, app_config, corpus_sentence):
        judge = StaticJudge(probabilities=["0.5"])
        orchestrator = AnalysisOrchestrator(judge, app_config)

        analysis = await orchestrator.analyze(corpus_sentence)

        assert analysis.status == AnalysisStatus.COMPLETED
        assert analysis.word_count == 8
        assert analysis.char_count == len(corpus_sentence)
        assert analysis.plagiarism.overall_percentage == 100.0
        assert analysis.plagiarism.confidence_score == 100.0
        assert analysis.ai_content.overall_percentage == 50.0
        assert analysis.ai_content.confidence_score == 60.0
        assert analysis.combined_confidence == 80.0

    @pytest.mark.asyncio
    async def test_empty_document(self, app_config, silent_judge):
        orchestrator = AnalysisOrchestrator(silent_judge, app_config)

        analysis = await orchestrator.analyze("   ")

        assert analysis.plagiarism == PlagiarismResult(0.0, [], 0, 95.0)
        assert analysis.ai_content == AIContentResult(0.0, [], 95.0)
        assert analysis.combined_confidence == 95.0
        assert silent_judge.proposal_requests == []

    @pytest.mark.asyncio
    async def test_unreachable_endpoint_still_completes(self, app_config, corpus_sentence, metrics):
        client = VLLMClient(app_config.llm)
        orchestrator = AnalysisOrchestrator(LLMJudge(client), app_config)

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http_client = MagicMock()
            mock_http_client.post = AsyncMock(side_effect=httpx.ConnectError("refused"))
            mock_get_client.return_value = mock_http_client

            analysis = await orchestrator.analyze(corpus_sentence)

        assert analysis.status == AnalysisStatus.COMPLETED
        assert analysis.plagiarism.total_sources == 1
        assert [s.ai_probability for s in analysis.ai_content.segments] == [0.0]
        # One proposal call and one segment call
        assert metrics.counters["evidence_unavailable"] == 2

    @pytest.mark.asyncio
    async def test_detector_failure_is_contained(self, app_config, corpus_sentence):
        orchestrator = AnalysisOrchestrator(StaticJudge(probabilities=["0.3"]), app_config)
        orchestrator.plagiarism_detector.matcher.find_matches = AsyncMock(
            side_effect=RuntimeError("index offline")
        )

        analysis = await orchestrator.analyze(corpus_sentence)

        assert analysis.plagiarism == PlagiarismResult.failed()
        assert analysis.ai_content.overall_percentage == 30.0
        assert analysis.combined_confidence == round((0 + 44.0) / 2, 2)

    @pytest.mark.asyncio
    async def test_analyze_text_segments(self, app_config, corpus_sentence):
        judge = StaticJudge(
            sources=[SourceCandidate(title="Essay mill", type="website", similarity=0.5)]
        )
        orchestrator = AnalysisOrchestrator(judge, app_config)
        text = " ".join([corpus_sentence] * 3)

        matches = await orchestrator.analyze_text_segments(text, segment_size=8)

        # Each chunk yields one corpus match and one proposed source
        assert len(matches) == 6
        assert len(judge.proposal_requests) == 3

    @pytest.mark.asyncio
    async def test_analyze_text_segments_rejects_zero_size(self, app_config, corpus_sentence):
        orchestrator = AnalysisOrchestrator(StaticJudge(), app_config)

        with pytest.raises(ValueError, match="segment_size"):
            await orchestrator.analyze_text_segments(corpus_sentence, segment_size=0)

    @pytest.mark.asyncio
    async def test_analyze_text_segments_default_size(self, app_config, corpus_sentence):
        judge = StaticJudge()
        orchestrator = AnalysisOrchestrator(judge, app_config)

        await orchestrator.analyze_text_segments(" ".join([corpus_sentence] * 3))

        # 24 words fit in one default-sized chunk
        assert len(judge.proposal_requests) == 1

    def test_from_config(self, app_config):
        orchestrator = AnalysisOrchestrator.from_config(app_config)

        assert isinstance(orchestrator.judge, LLMJudge)
        assert orchestrator.judge.client.config.api_base == "http://test:8000/v1"

    @pytest.mark.asyncio
    async def test_close(self, app_config):
        judge = MagicMock()
        judge.close = AsyncMock()
        orchestrator = AnalysisOrchestrator(judge, app_config)

        await orchestrator.close()

        judge.close.assert_awaited_once()
