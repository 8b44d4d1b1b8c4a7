"""Tests for core.upstage_client against an in-process httpx transport."""
import json

import httpx
import pytest

from core.upstage_client import (
    fetch_document_text,
    fetch_model_completion,
    make_completion_fn,
    parse_completion,
)
from util.errors import UpstreamError

CHAT_URL = "https://upstage.test/v1/chat/completions"
OCR_URL = "https://upstage.test/v1/document-digitization"


def _transport(handler, seen=None):
    def wrapped(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    return httpx.MockTransport(wrapped)


def _chat_body(content, finish="stop"):
    return {
        "id": "cmpl-9",
        "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": finish}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5},
    }


class TestParseCompletion:
    def test_string_content(self) -> None:
        c = parse_completion(_chat_body("  {\"a\": 1}  "))
        assert c.content == '{"a": 1}'
        assert not c.truncated
        assert c.diagnostics.id == "cmpl-9"
        assert c.diagnostics.usage == {"prompt_tokens": 10, "completion_tokens": 5}

    def test_length_finish_is_truncated(self) -> None:
        c = parse_completion(_chat_body('{"a": ', finish="length"))
        assert c.truncated
        assert c.diagnostics.finish_reason == "length"

    def test_empty_content_is_truncated(self) -> None:
        assert parse_completion(_chat_body("")).truncated
        assert parse_completion({}).truncated

    def test_list_of_parts(self) -> None:
        body = _chat_body([{"type": "text", "text": '{"a"'}, {"type": "text", "text": ": 1}"}])
        assert parse_completion(body).content == '{"a": 1}'

    def test_legacy_text_field(self) -> None:
        body = {"choices": [{"text": "hello", "finish_reason": "stop"}]}
        assert parse_completion(body).content == "hello"

    def test_error_object(self) -> None:
        with pytest.raises(UpstreamError, match="quota exceeded"):
            parse_completion({"error": {"message": "quota exceeded"}})
        with pytest.raises(UpstreamError, match="bad things"):
            parse_completion({"error": "bad things"})


@pytest.mark.asyncio
class TestFetchModelCompletion:
    async def test_posts_single_user_message(self) -> None:
        seen = []
        transport = _transport(lambda r: httpx.Response(200, json=_chat_body("ok")), seen)
        c = await fetch_model_completion(
            "the prompt", 900, api_key="sk-test", model="solar-test",
            api_url=CHAT_URL, transport=transport,
        )
        assert c.content == "ok"
        request = seen[0]
        assert request.headers["Authorization"] == "Bearer sk-test"
        payload = json.loads(request.content)
        assert payload["model"] == "solar-test"
        assert payload["max_tokens"] == 900
        assert payload["stream"] is False
        assert payload["messages"] == [{"role": "user", "content": "the prompt"}]

    async def test_non_2xx_is_upstream_error(self) -> None:
        transport = _transport(lambda r: httpx.Response(500, text="internal failure"))
        with pytest.raises(UpstreamError) as exc:
            await fetch_model_completion(
                "p", 10, api_key="k", api_url=CHAT_URL, transport=transport
            )
        assert exc.value.status_code == 500
        assert exc.value.body_preview == "internal failure"

    async def test_error_object_with_200(self) -> None:
        transport = _transport(lambda r: httpx.Response(200, json={"error": {"message": "nope"}}))
        with pytest.raises(UpstreamError):
            await fetch_model_completion(
                "p", 10, api_key="k", api_url=CHAT_URL, transport=transport
            )

    async def test_non_json_body(self) -> None:
        transport = _transport(lambda r: httpx.Response(200, text="<html>gateway</html>"))
        with pytest.raises(UpstreamError):
            await fetch_model_completion(
                "p", 10, api_key="k", api_url=CHAT_URL, transport=transport
            )

    async def test_connection_failure(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamError):
            await fetch_model_completion(
                "p", 10, api_key="k", api_url=CHAT_URL, transport=httpx.MockTransport(refuse)
            )

    async def test_bound_completion_fn(self) -> None:
        seen = []
        transport = _transport(lambda r: httpx.Response(200, json=_chat_body("x")), seen)
        complete = make_completion_fn("sk-bound", api_url=CHAT_URL, transport=transport)
        c = await complete("hi", 123)
        assert c.content == "x"
        assert seen[0].headers["Authorization"] == "Bearer sk-bound"
        assert json.loads(seen[0].content)["max_tokens"] == 123


@pytest.mark.asyncio
class TestFetchDocumentText:
    async def test_multipart_upload(self) -> None:
        seen = []
        transport = _transport(lambda r: httpx.Response(200, json={"text": "  Page one text.\n"}), seen)
        text = await fetch_document_text(
            b"%PDF-1.4 fake", "paper.pdf", api_key="k", api_url=OCR_URL, transport=transport
        )
        assert text == "Page one text."
        request = seen[0]
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="document"; filename="paper.pdf"' in request.content
        assert b'name="model"' in request.content
        assert b"%PDF-1.4 fake" in request.content

    async def test_missing_text_is_empty(self) -> None:
        transport = _transport(lambda r: httpx.Response(200, json={"pages": []}))
        text = await fetch_document_text(
            b"x", "a.pdf", api_key="k", api_url=OCR_URL, transport=transport
        )
        assert text == ""

    async def test_ocr_failure(self) -> None:
        transport = _transport(lambda r: httpx.Response(401, json={"error": "unauthorized"}))
        with pytest.raises(UpstreamError) as exc:
            await fetch_document_text(
                b"x", "a.pdf", api_key="bad", api_url=OCR_URL, transport=transport
            )
        assert exc.value.status_code == 401
