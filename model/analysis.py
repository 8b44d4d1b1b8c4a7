from typing import Annotated, Any, Callable, Optional
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError


def _text_or_empty(v: Any) -> Any:
    if v is None:
        return ""
    if isinstance(v, (int, float)):
        return str(v)
    return v


def _label_or_none(v: Any) -> Optional[str]:
    if isinstance(v, str):
        return v
    if isinstance(v, (int, float)):
        return str(v)
    return None


def _lenient_list(key: Optional[str] = None) -> Callable[[Any], Any]:
    """
    Models sometimes emit null or a single object where a list belongs, or bare
    strings where objects belong (["analyze", "examine"]). `key` names the field
    a bare string is promoted to.
    """

    def coerce(v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, dict):
            v = [v]
        if key and isinstance(v, list):
            return [{key: x} if isinstance(x, str) else x for x in v]
        return v

    return coerce


Text = Annotated[str, BeforeValidator(_text_or_empty)]


class CitationModel(BaseModel):
    page: int
    lineStart: int
    lineEnd: int
    confidence: float


def _citation_or_none(v: Any) -> Optional[CitationModel]:
    # A malformed model-written citation becomes None; post-processing recomputes it
    if v is None or isinstance(v, CitationModel):
        return v
    try:
        return CitationModel.model_validate(v)
    except ValidationError:
        return None


class Expression(BaseModel):
    model_config = ConfigDict(extra="allow")

    expression: Text = ""
    usage: Text = ""
    example: Text = ""
    difficulty: Annotated[Optional[str], BeforeValidator(_label_or_none)] = None
    citation: Annotated[
        Optional[CitationModel], BeforeValidator(_citation_or_none)
    ] = None

    def snippet(self) -> str:
        """Text used to locate this expression in the document."""
        return self.example or self.expression


class Section(BaseModel):
    model_config = ConfigDict(extra="allow")

    category: Text = ""
    category_en: Text = ""
    expressions: Annotated[
        list[Expression], BeforeValidator(_lenient_list("expression"))
    ] = Field(default_factory=list)


class AcademicVerb(BaseModel):
    model_config = ConfigDict(extra="allow")

    verb: Text = ""
    meaning: Text = ""
    example: Text = ""
    count: Optional[int] = None


class TransitionWord(BaseModel):
    model_config = ConfigDict(extra="allow")

    word: Text = ""
    usage: Text = ""
    example: Text = ""
    count: Optional[int] = None


class PhraseHitModel(BaseModel):
    phrase: str
    usage: str


class SentenceInsight(BaseModel):
    sentence: str
    citation: Optional[CitationModel] = None
    phrases: list[PhraseHitModel] = Field(default_factory=list)


class SentenceInsights(BaseModel):
    method: str
    note: str
    items: list[SentenceInsight] = Field(default_factory=list)


class AnalysisRecord(BaseModel):
    """
    Structured result of one analysis. Every collection defaults to empty so
    downstream stages never need to guard against missing keys.
    """

    model_config = ConfigDict(extra="allow")

    sections: Annotated[list[Section], BeforeValidator(_lenient_list())] = Field(
        default_factory=list
    )
    academic_verbs: Annotated[
        list[AcademicVerb], BeforeValidator(_lenient_list("verb"))
    ] = Field(default_factory=list)
    transition_words: Annotated[
        list[TransitionWord], BeforeValidator(_lenient_list("word"))
    ] = Field(default_factory=list)
    sentence_insights: Optional[SentenceInsights] = None
