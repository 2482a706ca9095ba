"""Gemini-backed annotation of journal text."""

from __future__ import annotations

import json
import logging
import re
from typing import Iterable, Mapping, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from pydantic import ValidationError

from moodlog.domains.journal.ml.prompts import build_analysis_prompt, build_question_prompt
from moodlog.domains.journal.schemas.journal_schemas import AnnotationResult

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class AnnotationError(Exception):
    """Base exception for annotation failures."""

    pass


class AnnotationConfigError(AnnotationError):
    """Raised when the model credential or configuration is missing."""

    pass


class AnnotationValidationError(AnnotationError):
    """Raised when the model output cannot be parsed or fails the schema."""

    pass


class AnnotationTransportError(AnnotationError):
    """Raised when the model API cannot be reached or rejects the call."""

    pass


def parse_annotation(raw: str) -> AnnotationResult:
    """Parse raw model text into a validated AnnotationResult."""
    text = (raw or "").strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise AnnotationValidationError(f"Model output is not JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise AnnotationValidationError("Model output is not a JSON object")
    try:
        return AnnotationResult.model_validate(payload)
    except ValidationError as exc:
        raise AnnotationValidationError(f"Model output failed validation: {exc.error_count()} error(s)") from exc


class AnnotationClient:
    """Maps text to a validated annotation, or raises an AnnotationError.

    The client never retries; callers decide whether a failure matters.
    """

    def __init__(self, api_key: Optional[str], model_name: str, timeout: int = 30):
        self.api_key = api_key or ""
        self.model_name = model_name
        self.timeout = timeout
        self._model = None

    @classmethod
    def from_config(cls, config: Mapping) -> "AnnotationClient":
        return cls(
            api_key=config.get("GEMINI_API_KEY"),
            model_name=config.get("GEMINI_MODEL", "gemini-2.0-flash"),
            timeout=int(config.get("ANNOTATION_TIMEOUT_SECONDS", 30)),
        )

    def annotate(self, content: str) -> AnnotationResult:
        raw = self._generate(
            build_analysis_prompt(content),
            generation_config={"response_mime_type": "application/json"},
        )
        result = parse_annotation(raw)
        logger.info("Annotated entry: mood=%s score=%s", result.mood, result.sentiment_score)
        return result

    def answer_question(self, question: str, contents: Iterable[str]) -> str:
        answer = self._generate(build_question_prompt(question, contents)).strip()
        if not answer:
            raise AnnotationValidationError("Model returned an empty answer")
        return answer

    def _get_model(self):
        if not self.api_key:
            raise AnnotationConfigError("GEMINI_API_KEY is not configured")
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def _generate(self, prompt: str, generation_config: Optional[dict] = None) -> str:
        model = self._get_model()
        try:
            response = model.generate_content(
                prompt,
                generation_config=generation_config,
                request_options={"timeout": self.timeout},
            )
        except (google_exceptions.GoogleAPIError, ConnectionError, TimeoutError) as exc:
            logger.error("Annotation model call failed: %s", exc)
            raise AnnotationTransportError(f"Model call failed: {exc}") from exc
        try:
            return response.text
        except ValueError as exc:
            # Raised when the response carries no text part (e.g. blocked by safety filters).
            raise AnnotationValidationError(f"Model returned no text: {exc}") from exc
