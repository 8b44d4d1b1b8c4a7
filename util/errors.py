# util/errors.py
from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self,
        message: str,
        http_status: int = status.HTTP_400_BAD_REQUEST,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        detail: Any = {"message": message, **extra} if extra else message
        super().__init__(status_code=http_status, detail=detail)


class AnalysisError(Exception):
    """Base for failures raised by the analysis core."""


class EmptyResponse(AnalysisError):
    """The model returned no usable text."""

    def __init__(self, message: str = "Model response is empty") -> None:
        super().__init__(message)


class UnrecoverableFormat(AnalysisError):
    """Every recovery stage failed; `preview` holds the head of the raw text."""

    def __init__(self, preview: str, reason: str = "") -> None:
        self.preview = preview
        self.reason = reason
        msg = "Unable to recover structured output"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class UpstreamError(AnalysisError):
    """Transport-level failure from the OCR or chat-completion service."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body_preview: str = "",
    ) -> None:
        self.status_code = status_code
        self.body_preview = body_preview
        super().__init__(message)


class AnalysisFailed(AnalysisError):
    """Escalation and repair were both exhausted for one analysis request."""

    def __init__(
        self,
        *,
        finish_reason: Optional[str],
        usage: Optional[Dict[str, Any]],
        completion_id: Optional[str],
        preview: str = "",
    ) -> None:
        self.finish_reason = finish_reason
        self.usage = usage
        self.completion_id = completion_id
        self.preview = preview
        super().__init__(
            "Model output could not be parsed "
            f"(id={completion_id or 'n/a'}, finish_reason={finish_reason or 'n/a'}, "
            f"usage={usage or 'n/a'})"
        )

    def diagnostics(self) -> Dict[str, Any]:
        return {
            "id": self.completion_id,
            "finishReason": self.finish_reason,
            "usage": self.usage,
        }
