from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import PlainTextResponse
from model.analysis import AnalysisRecord
from model.api import AnalyzeResponse
from service.analysis_service import AnalysisService
from util.constants import InternalURIs
from controller.controller_dependencies import (
    enforce_max_upload_size,
    get_analysis_service,
)

analysis_router = APIRouter()


@analysis_router.post(
    InternalURIs.ANALYZE,
    response_model=AnalyzeResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(enforce_max_upload_size)],
)
async def analyze(
    file: UploadFile = File(...),
    apiKey: str = Form(..., min_length=1),
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalyzeResponse:
    return await service.analyze_upload(file, apiKey)


@analysis_router.post(InternalURIs.EXPORT_MARKDOWN, response_class=PlainTextResponse)
async def export_markdown(
    record: AnalysisRecord,
    service: AnalysisService = Depends(get_analysis_service),
) -> str:
    return service.export_markdown(record)


@analysis_router.post(InternalURIs.EXPORT_ANKI, response_class=PlainTextResponse)
async def export_anki(
    record: AnalysisRecord,
    service: AnalysisService = Depends(get_analysis_service),
) -> str:
    return service.export_anki(record)
