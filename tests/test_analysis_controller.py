"""HTTP-level tests for the analysis and export routes."""
import json

import pytest
from fastapi.testclient import TestClient

from controller.controller_dependencies import get_analysis_service
from core.entities import Completion, CompletionDiagnostics
from main import app
from service.analysis_service import AnalysisService
from util.constants import InternalURIs
from util.errors import UpstreamError

DOCUMENT = (
    "Despite extensive research on parsing, little is known about long inputs. "
    "However, we examine three encoders on two benchmarks."
)
RECORD = {
    "sections": [
        {
            "category": "연구 공백",
            "category_en": "Research Gap",
            "expressions": [
                {
                    "expression": "little is known about",
                    "usage": "연구 공백을 제시할 때",
                    "example": "little is known about long inputs",
                    "difficulty": "basic",
                }
            ],
        }
    ]
}


def _completion(content: str, finish: str = "stop") -> Completion:
    return Completion(
        content=content,
        truncated=finish == "length" or not content,
        diagnostics=CompletionDiagnostics(id="cmpl-x", finish_reason=finish, usage={"total_tokens": 7}),
    )


class FakeUpstage:
    def __init__(self, outputs, ocr_text=DOCUMENT, ocr_error=None) -> None:
        self.outputs = list(outputs)
        self.ocr_text = ocr_text
        self.ocr_error = ocr_error
        self.keys = []

    async def ocr(self, data: bytes, filename: str, *, api_key: str) -> str:
        self.keys.append(api_key)
        if self.ocr_error:
            raise self.ocr_error
        return self.ocr_text

    def completion_factory(self, api_key: str):
        async def complete(prompt: str, max_output_tokens: int) -> Completion:
            return self.outputs.pop(0)

        return complete


@pytest.fixture
def client_for():
    def build(fake: FakeUpstage) -> TestClient:
        app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(
            ocr=fake.ocr, completion_factory=fake.completion_factory
        )
        return TestClient(app)

    yield build
    app.dependency_overrides.clear()


def _upload(client: TestClient, content_type: str = "application/pdf", api_key: str = "sk-test"):
    return client.post(
        InternalURIs.ANALYZE,
        files={"file": ("paper.pdf", b"%PDF-1.4 scanned", content_type)},
        data={"apiKey": api_key},
    )


class TestAnalyze:
    def test_success(self, client_for) -> None:
        fake = FakeUpstage([_completion(json.dumps(RECORD))])
        r = _upload(client_for(fake))
        assert r.status_code == 200
        body = r.json()
        assert body["method"] == "upstage-ocr"
        assert body["pagesIndexed"] == 0
        record = body["record"]
        assert record["sections"][0]["category_en"] == "Research Gap"
        assert record["sections"][0]["expressions"][0]["citation"] is None
        assert [v["verb"] for v in record["academic_verbs"]] == ["examine"]
        assert [t["word"] for t in record["transition_words"]] == ["however"]
        assert len(record["sentence_insights"]["items"]) == 2
        assert fake.keys == ["sk-test"]

    def test_rejects_non_pdf(self, client_for) -> None:
        r = _upload(client_for(FakeUpstage([])), content_type="text/plain")
        assert r.status_code == 415

    def test_missing_api_key(self, client_for) -> None:
        r = _upload(client_for(FakeUpstage([])), api_key="")
        assert r.status_code == 422

    def test_empty_ocr_text(self, client_for) -> None:
        r = _upload(client_for(FakeUpstage([], ocr_text="")))
        assert r.status_code == 422

    def test_ocr_upstream_error(self, client_for) -> None:
        fake = FakeUpstage([], ocr_error=UpstreamError("down", status_code=503))
        r = _upload(client_for(fake))
        assert r.status_code == 502
        assert r.json()["detail"]["upstreamStatus"] == 503

    def test_analysis_failure_carries_diagnostics(self, client_for) -> None:
        fake = FakeUpstage(
            [
                _completion('{"sections": [', finish="length"),
                _completion('{"sections": [{"cat', finish="length"),
                _completion("sorry, no JSON"),
            ]
        )
        r = _upload(client_for(fake))
        assert r.status_code == 502
        detail = r.json()["detail"]
        assert detail["diagnostics"] == {
            "id": "cmpl-x",
            "finishReason": "stop",
            "usage": {"total_tokens": 7},
        }
        assert fake.outputs == []


class TestExport:
    def test_markdown(self, client_for) -> None:
        r = client_for(FakeUpstage([])).post(InternalURIs.EXPORT_MARKDOWN, json=RECORD)
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/plain")
        assert "## 📌 연구 공백" in r.text

    def test_anki(self, client_for) -> None:
        r = client_for(FakeUpstage([])).post(InternalURIs.EXPORT_ANKI, json=RECORD)
        assert r.status_code == 200
        assert r.text.startswith("📖 little is known about")


def test_healthz() -> None:
    assert TestClient(app).get("/healthz").json() == {"ok": True}
