import logging
from fastapi import UploadFile
from core.analysis_orchestrator import run_analysis
from core.export import to_anki_tsv, to_markdown
from core.pdf_text import extract_page_lines
from core.post_process import post_process
from core.upstage_client import CompletionFn, fetch_document_text, make_completion_fn
from model.analysis import AnalysisRecord
from model.api import AnalyzeResponse
from util.enums import ErrorMessage
from util.errors import AnalysisFailed, AppError, UpstreamError

logger = logging.getLogger(__name__)

OCR_METHOD = "upstage-ocr"
PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}


def _app_error(info: ErrorMessage, **extra) -> AppError:
    return AppError(info.value.message, info.value.http_status, extra or None)


class AnalysisService:
    """
    One upload -> OCR text + text-layer lines -> model analysis -> citations and
    local enrichment. Holds no state between requests.
    """

    def __init__(self, ocr=fetch_document_text, completion_factory=make_completion_fn) -> None:
        self._ocr = ocr
        self._completion_factory = completion_factory

    async def analyze_upload(self, file: UploadFile, api_key: str) -> AnalyzeResponse:
        """
        Logs: sizes, page counts and outcome only (no document text).
        """
        if (file.content_type or "").lower() not in PDF_CONTENT_TYPES:
            logger.warning("analyze.unsupported type=%s", file.content_type)
            raise _app_error(ErrorMessage.UNSUPPORTED_FILE)

        data = await file.read()
        await file.seek(0)
        logger.info("analyze.start bytes=%d", len(data))

        pages = extract_page_lines(data)

        try:
            text = await self._ocr(data, file.filename or "document.pdf", api_key=api_key)
        except UpstreamError as e:
            logger.error("analyze.ocr.error status=%s", e.status_code)
            raise _app_error(
                ErrorMessage.UPSTREAM_ERROR, upstreamStatus=e.status_code
            ) from e

        if not text:
            raise _app_error(ErrorMessage.EMPTY_DOCUMENT)

        record = await self.analyze_text(text, self._completion_factory(api_key))
        enriched = post_process(record, pages, text, method=OCR_METHOD)
        logger.info(
            "analyze.ok pages=%d sections=%d",
            len(pages or []),
            len(enriched.sections),
        )
        return AnalyzeResponse(
            method=OCR_METHOD, pagesIndexed=len(pages or []), record=enriched
        )

    async def analyze_text(self, text: str, complete: CompletionFn) -> AnalysisRecord:
        try:
            return await run_analysis(text, complete)
        except UpstreamError as e:
            logger.error("analyze.llm.error status=%s", e.status_code)
            raise _app_error(
                ErrorMessage.UPSTREAM_ERROR, upstreamStatus=e.status_code
            ) from e
        except AnalysisFailed as e:
            raise _app_error(
                ErrorMessage.ANALYSIS_FAILED, diagnostics=e.diagnostics()
            ) from e

    @staticmethod
    def export_markdown(record: AnalysisRecord) -> str:
        return to_markdown(record)

    @staticmethod
    def export_anki(record: AnalysisRecord) -> str:
        return to_anki_tsv(record)
