# core/upstage_client.py
from typing import Any, Awaitable, Callable, Dict, Optional
import httpx
from config.settings import settings
from core.entities import Completion, CompletionDiagnostics
from util.errors import UpstreamError
from util.functions import clip_chars
import logging
from util.timing import timed

logger = logging.getLogger(__name__)

CompletionFn = Callable[[str, int], Awaitable[Completion]]


def _auth_headers(api_key: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"}


async def _post(
    url: str,
    *,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs: Any,
) -> httpx.Response:
    """
    POST to `url`. Transport failures and non-2xx statuses become UpstreamError.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            r = await client.post(url, **kwargs)
    except httpx.RequestError as e:
        logger.error("upstage.request_error url=%s err=%s", url, type(e).__name__)
        raise UpstreamError(f"Request to {url} failed: {type(e).__name__}") from e

    if r.status_code // 100 != 2:
        logger.error("upstage.bad_status url=%s status=%d", url, r.status_code)
        raise UpstreamError(
            f"Upstage returned HTTP {r.status_code}",
            status_code=r.status_code,
            body_preview=clip_chars(r.text, settings.ERROR_PREVIEW_CHARS),
        )
    return r


def _json_body(r: httpx.Response) -> Dict[str, Any]:
    try:
        data = r.json()
    except ValueError as e:
        raise UpstreamError(
            "Upstage returned a non-JSON body",
            status_code=r.status_code,
            body_preview=clip_chars(r.text, settings.ERROR_PREVIEW_CHARS),
        ) from e
    return data if isinstance(data, dict) else {}


def _part_text(part: Any) -> str:
    if not part:
        return ""
    if isinstance(part, str):
        return part
    if isinstance(part, dict):
        return str(
            part.get("text") or part.get("output_text") or part.get("content") or ""
        )
    return str(part)


def _message_text(choice: Dict[str, Any]) -> str:
    """
    OpenAI-compatible providers put text in message.content (string, list of
    parts, or a part object) or, for legacy completions, in choice.text.
    """
    message = choice.get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if content is None:
        content = choice.get("text")
    if isinstance(content, list):
        return "".join(_part_text(p) for p in content).strip()
    return _part_text(content).strip()


def parse_completion(data: Dict[str, Any]) -> Completion:
    """
    Normalize a chat-completion body. Some providers return an `error` object
    with HTTP 200; that is treated as an upstream failure.
    """
    error = data.get("error")
    if error:
        msg = error.get("message") if isinstance(error, dict) else None
        msg = msg or str(error)
        raise UpstreamError(f"Upstage LLM error: {msg}")

    choices = data.get("choices") or []
    choice = choices[0] if choices and isinstance(choices[0], dict) else {}
    content = _message_text(choice)
    finish = choice.get("finish_reason")
    return Completion(
        content=content,
        truncated=finish == "length" or not content,
        diagnostics=CompletionDiagnostics(
            id=data.get("id"),
            finish_reason=finish,
            usage=data.get("usage"),
        ),
    )


async def fetch_model_completion(
    prompt: str,
    max_output_tokens: int,
    *,
    api_key: str,
    model: Optional[str] = None,
    api_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Completion:
    """
    One non-streaming chat completion with a single user message.
    """
    model = model or settings.UPSTAGE_MODEL
    payload = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": settings.UPSTAGE_TEMPERATURE,
        "max_tokens": max_output_tokens,
        "stream": False,
    }
    with timed(logger, "ai.complete", model=model, max_tokens=max_output_tokens):
        r = await _post(
            api_url or settings.UPSTAGE_CHAT_URL,
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
            headers=_auth_headers(api_key),
            json=payload,
        )
        completion = parse_completion(_json_body(r))

    logger.info(
        "ai.complete.result id=%s finish=%s chars=%d truncated=%s",
        completion.diagnostics.id,
        completion.diagnostics.finish_reason,
        len(completion.content),
        completion.truncated,
    )
    return completion


async def fetch_document_text(
    file_bytes: bytes,
    filename: str,
    *,
    api_key: str,
    api_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    OCR the whole document and return its plain text (may be empty).
    """
    with timed(logger, "ocr.fetch", bytes=len(file_bytes)):
        r = await _post(
            api_url or settings.UPSTAGE_OCR_URL,
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
            headers=_auth_headers(api_key),
            files={"document": (filename, file_bytes, "application/pdf")},
            data={"model": settings.UPSTAGE_OCR_MODEL},
        )
        text = str(_json_body(r).get("text") or "").strip()
    logger.info("ocr.fetch.result chars=%d", len(text))
    return text


def make_completion_fn(api_key: str, **kwargs: Any) -> CompletionFn:
    """
    Bind credentials so the orchestrator only sees (prompt, max_output_tokens).
    """

    async def complete(prompt: str, max_output_tokens: int) -> Completion:
        return await fetch_model_completion(
            prompt, max_output_tokens, api_key=api_key, **kwargs
        )

    return complete
