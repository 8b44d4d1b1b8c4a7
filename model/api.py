from pydantic import BaseModel
from model.analysis import AnalysisRecord


class AnalyzeResponse(BaseModel):
    method: str
    pagesIndexed: int
    record: AnalysisRecord


class HealthResponse(BaseModel):
    ok: bool
