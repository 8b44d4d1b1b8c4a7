# core/analysis_orchestrator.py
from enum import Enum
from string import Template
from typing import List, Optional
from config.settings import settings
from core.entities import Completion, PromptVariant
from core.json_recovery import recover_analysis_record
from core.upstage_client import CompletionFn
from model.analysis import AnalysisRecord
from util.errors import AnalysisFailed, EmptyResponse, UnrecoverableFormat, UpstreamError
from util.functions import clip_chars, truncate_for_prompt
import logging
from util.timing import timed

logger = logging.getLogger(__name__)


class AnalysisState(str, Enum):
    DRAFTING = "drafting"
    AWAITING_COMPLETION = "awaiting_completion"
    RECOVERING = "recovering"
    ESCALATING = "escalating"
    REPAIR_PASS = "repair_pass"
    DONE = "done"
    FAILED = "failed"


def primary_variant() -> PromptVariant:
    return PromptVariant(
        name="primary",
        max_per_category=settings.PRIMARY_MAX_PER_CATEGORY,
        max_example_chars=settings.PRIMARY_MAX_EXAMPLE_CHARS,
        max_output_tokens=settings.PRIMARY_MAX_TOKENS,
    )


def escalated_variant() -> PromptVariant:
    return PromptVariant(
        name="escalated",
        max_per_category=settings.ESCALATED_MAX_PER_CATEGORY,
        max_example_chars=settings.ESCALATED_MAX_EXAMPLE_CHARS,
        max_output_tokens=settings.ESCALATED_MAX_TOKENS,
    )


def _bounded(text: str) -> str:
    return truncate_for_prompt(
        text, settings.MAX_INPUT_CHARS, settings.TRUNCATION_MARKER
    )


def build_analysis_prompt(document_text: str, variant: PromptVariant) -> str:
    return Template(settings.ANALYSIS_PROMPT_TEMPLATE).substitute(
        schema=settings.RECORD_SCHEMA,
        document_text=_bounded(document_text),
        max_per_category=variant.max_per_category,
        max_example_chars=variant.max_example_chars,
    )


def build_repair_prompt(broken_output: str) -> str:
    return Template(settings.REPAIR_PROMPT_TEMPLATE).substitute(
        schema=settings.RECORD_SCHEMA,
        broken_output=_bounded(broken_output),
    )


class AnalysisOrchestrator:
    """
    Drives one analysis request through a bounded retry policy:

      primary prompt -> recover
        -> (failed and truncated) one smaller prompt -> recover
        -> (still failed) one repair prompt over the last broken output -> recover
        -> AnalysisFailed

    UpstreamError from the completion function is never retried.
    """

    def __init__(
        self,
        complete: CompletionFn,
        *,
        primary: Optional[PromptVariant] = None,
        escalated: Optional[PromptVariant] = None,
        repair_max_tokens: Optional[int] = None,
    ) -> None:
        self._complete_fn = complete
        self._primary = primary or primary_variant()
        self._escalated = escalated or escalated_variant()
        self._repair_max_tokens = repair_max_tokens or settings.REPAIR_MAX_TOKENS
        if (
            self._escalated.max_output_tokens >= self._primary.max_output_tokens
            or self._escalated.max_per_category >= self._primary.max_per_category
        ):
            raise ValueError("escalated prompt must be strictly smaller than primary")
        self.state = AnalysisState.DRAFTING
        self.history: List[AnalysisState] = [self.state]

    def _enter(self, state: AnalysisState) -> None:
        logger.debug("analysis.state from=%s to=%s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    async def _complete(self, prompt: str, max_output_tokens: int) -> Completion:
        self._enter(AnalysisState.AWAITING_COMPLETION)
        try:
            return await self._complete_fn(prompt, max_output_tokens)
        except UpstreamError:
            self._enter(AnalysisState.FAILED)
            raise

    def _recover(self, completion: Completion) -> Optional[AnalysisRecord]:
        self._enter(AnalysisState.RECOVERING)
        try:
            return recover_analysis_record(completion.content)
        except (EmptyResponse, UnrecoverableFormat) as e:
            logger.warning(
                "analysis.recover.failed err=%s finish=%s truncated=%s",
                type(e).__name__,
                completion.diagnostics.finish_reason,
                completion.truncated,
            )
            return None

    def _done(self, record: AnalysisRecord) -> AnalysisRecord:
        self._enter(AnalysisState.DONE)
        logger.info(
            "analysis.done path=%s sections=%d",
            "->".join(s.value for s in self.history if s != AnalysisState.RECOVERING),
            len(record.sections),
        )
        return record

    def _fail(self, completion: Completion, broken: str) -> AnalysisFailed:
        self._enter(AnalysisState.FAILED)
        d = completion.diagnostics
        logger.error(
            "analysis.failed id=%s finish=%s usage=%s", d.id, d.finish_reason, d.usage
        )
        return AnalysisFailed(
            finish_reason=d.finish_reason,
            usage=d.usage,
            completion_id=d.id,
            preview=clip_chars(broken, settings.ERROR_PREVIEW_CHARS),
        )

    async def run(self, document_text: str) -> AnalysisRecord:
        with timed(logger, "analysis.run", chars=len(document_text)):
            completion = await self._complete(
                build_analysis_prompt(document_text, self._primary),
                self._primary.max_output_tokens,
            )
            record = self._recover(completion)
            if record is not None:
                return self._done(record)
            last = completion

            if completion.truncated:
                self._enter(AnalysisState.ESCALATING)
                completion = await self._complete(
                    build_analysis_prompt(document_text, self._escalated),
                    self._escalated.max_output_tokens,
                )
                record = self._recover(completion)
                if record is not None:
                    return self._done(record)
                if completion.content.strip():
                    last = completion

            broken = last.content
            if not broken.strip():
                # Nothing for the model to reformat
                raise self._fail(completion, broken)

            self._enter(AnalysisState.REPAIR_PASS)
            repaired = await self._complete(
                build_repair_prompt(broken), self._repair_max_tokens
            )
            record = self._recover(repaired)
            if record is not None:
                return self._done(record)
            raise self._fail(repaired, repaired.content or broken)


async def run_analysis(
    document_text: str, complete: CompletionFn, **kwargs
) -> AnalysisRecord:
    """
    Analyze `document_text` with the injected completion function.
    Raises UpstreamError (transport) or AnalysisFailed (escalation and repair exhausted).
    """
    return await AnalysisOrchestrator(complete, **kwargs).run(document_text)
