"""Pre-filled form answer records.

Maps pipeline outcomes onto form questions and builds the record the
session layer stores: the answers, an ``url_prefilled`` marker and the
time the pre-fill happened.  Persisting the record is the caller's job.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from formprefill.core.config import Settings, get_settings
from formprefill.models.outcome import Accepted, FieldType, PassthroughArray, ValidationOutcome
from formprefill.pipeline import apply_field_types, process_parameters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Question:
    """A form question that can receive a pre-filled answer."""

    id: int
    name: str
    field_type: FieldType = FieldType.TEXT


@dataclass
class PrefillRecord:
    """Answers pre-filled from the URL, keyed by answer key."""

    data: dict[str, Any] = field(default_factory=dict)
    url_prefilled: bool = False
    prefill_timestamp: float | None = None

    def to_session(self) -> dict[str, Any]:
        """Session payload; empty when nothing was pre-filled."""
        if not self.url_prefilled:
            return {}
        return {
            "data": dict(self.data),
            "url_prefilled": True,
            "prefill_timestamp": self.prefill_timestamp,
        }


def map_to_questions(
    outcomes: Mapping[str, ValidationOutcome],
    questions: Iterable[Question],
    settings: Settings | None = None,
) -> dict[int, Any]:
    """Map accepted values onto question ids.

    Names match exactly.  Each question's ``field_type`` is enforced and
    failing values are dropped.  List values are kept as lists, mappings as dicts.
    """
    by_name: dict[str, Question] = {}
    for question in questions:
        by_name.setdefault(question.name, question)

    typed = apply_field_types(
        {name: outcome for name, outcome in outcomes.items() if name in by_name},
        {name: question.field_type for name, question in by_name.items()},
        settings,
    )

    answers: dict[int, Any] = {}
    for name, outcome in typed.items():
        question = by_name[name]
        if isinstance(outcome, Accepted):
            answers[question.id] = outcome.value
        elif isinstance(outcome, PassthroughArray):
            items = outcome.items
            answers[question.id] = dict(items) if isinstance(items, dict) else list(items)

    unmatched = [name for name in outcomes if name not in by_name]
    if unmatched:
        logger.debug("Ignoring %d pre-fill fields with no matching question", len(unmatched))
    return answers


def build_prefill_record(
    params: Mapping[str, Any],
    questions: Iterable[Question],
    settings: Settings | None = None,
    clock: Callable[[], float] = time.time,
) -> PrefillRecord:
    """Run the full pre-fill path for one request's query parameters."""
    settings = settings or get_settings()
    answers = map_to_questions(process_parameters(params, settings), questions, settings)
    if not answers:
        return PrefillRecord()

    data = {
        settings.ANSWER_KEY_TEMPLATE.format(question_id=question_id): value
        for question_id, value in answers.items()
    }
    return PrefillRecord(data=data, url_prefilled=True, prefill_timestamp=clock())
