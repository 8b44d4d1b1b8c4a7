# core/lexicon.py
"""
Fixed vocabularies used to enrich the model output locally.
Glosses are Korean, matching the learner-facing text produced by the model.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

ACADEMIC_VERBS: Mapping[str, str] = MappingProxyType(
    {
        "acknowledge": "인정하다",
        "address": "다루다/해결하다",
        "analyze": "분석하다",
        "argue": "주장하다",
        "assess": "평가하다",
        "attribute": "~에 기인하다",
        "characterize": "특징짓다",
        "clarify": "명확히 하다",
        "compare": "비교하다",
        "compute": "계산하다",
        "conclude": "결론내리다",
        "confirm": "확인하다",
        "construct": "구성하다",
        "contrast": "대조하다",
        "contribute": "기여하다",
        "demonstrate": "입증하다",
        "derive": "도출하다",
        "describe": "설명하다",
        "determine": "규명하다",
        "discuss": "논의하다",
        "distinguish": "구별하다",
        "elucidate": "명확히 밝히다",
        "emphasize": "강조하다",
        "establish": "정립하다",
        "estimate": "추정하다",
        "evaluate": "평가하다",
        "examine": "검토하다",
        "explore": "탐구하다",
        "formulate": "정식화하다",
        "highlight": "부각하다",
        "identify": "식별하다",
        "illustrate": "예시하다",
        "imply": "함의하다",
        "indicate": "시사하다",
        "infer": "추론하다",
        "investigate": "조사하다",
        "justify": "정당화하다",
        "maintain": "유지하다/주장하다",
        "measure": "측정하다",
        "motivate": "동기부여하다",
        "observe": "관찰하다",
        "outline": "개요를 제시하다",
        "predict": "예측하다",
        "propose": "제안하다",
        "quantify": "정량화하다",
        "reveal": "밝히다",
        "report": "보고하다",
        "suggest": "제안/시사하다",
        "support": "뒷받침하다",
        "test": "검증하다",
        "theorize": "이론화하다",
        "validate": "타당화하다",
        "verify": "검증하다",
    }
)

TRANSITIONS: Mapping[str, str] = MappingProxyType(
    {
        "however": "그러나/반면에(대조)",
        "nevertheless": "그럼에도 불구하고(역접)",
        "nonetheless": "그럼에도 불구하고(역접)",
        "therefore": "그러므로(결과)",
        "thus": "따라서(결과)",
        "consequently": "결과적으로(결과)",
        "moreover": "게다가(추가)",
        "furthermore": "더욱이(추가)",
        "in addition": "추가로(추가)",
        "additionally": "추가로(추가)",
        "for example": "예를 들어(예시)",
        "for instance": "예컨대(예시)",
        "in contrast": "대조적으로(대조)",
        "by contrast": "대조적으로(대조)",
        "on the other hand": "다른 한편으로(대조)",
        "in particular": "특히(강조)",
        "notably": "주목할 점은(강조)",
        "in summary": "요약하면(요약)",
        "overall": "전반적으로(요약)",
        "in conclusion": "결론적으로(결론)",
        "as a result": "그 결과(결과)",
        "as such": "따라서/그런 이유로(결과)",
        "meanwhile": "한편(전환)",
        "in turn": "그 결과/차례로(연쇄)",
        "in other words": "즉(재진술)",
        "that is": "즉(재진술)",
        "similarly": "유사하게(비교)",
        "likewise": "마찬가지로(비교)",
        "specifically": "구체적으로(구체화)",
        "in fact": "사실(강조)",
        "indeed": "실제로(강조)",
        "alternatively": "대안적으로(대안)",
    }
)

ACADEMIC_PHRASES: Tuple[Tuple[str, str], ...] = (
    ("it is worth noting that", "주목할 점을 덧붙일 때"),
    ("to the best of our knowledge", "선행연구 대비 새로움을 주장할 때"),
    ("in line with", "기존 결과/이론과 일치함을 말할 때"),
    ("with respect to", "특정 관점/대상에 대해 말할 때"),
    ("in the context of", "어떤 맥락에서 논의할 때"),
    ("as shown in", "그림/표/결과를 참조할 때"),
    ("taken together", "여러 결과를 종합할 때"),
    ("in terms of", "~의 측면에서 비교/평가할 때"),
    ("on the basis of", "근거를 제시할 때"),
    ("in accordance with", "규칙/절차/기준에 따라"),
    ("as opposed to", "~와 대비하여"),
    ("in contrast to", "~와 대조하여"),
    ("consistent with", "~와 일관됨을 말할 때"),
    ("contrary to", "~와 반대로"),
    ("to this end", "이 목적을 위해"),
    ("in order to", "목적을 표현할 때"),
    ("as a means of", "수단을 표현할 때"),
    ("in light of", "~을 고려할 때"),
    ("with the aim of", "목표를 표현할 때"),
    ("from the perspective of", "관점 전환"),
)


@dataclass(frozen=True)
class Lexicon:
    verbs: Mapping[str, str]
    transitions: Mapping[str, str]
    phrases: Tuple[Tuple[str, str], ...]


DEFAULT_LEXICON = Lexicon(
    verbs=ACADEMIC_VERBS, transitions=TRANSITIONS, phrases=ACADEMIC_PHRASES
)
