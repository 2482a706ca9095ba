"""Annotation client tests; the Gemini SDK is replaced with fakes."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
from google.api_core import exceptions as google_exceptions

pytestmark = pytest.mark.unit

from moodlog.domains.journal.ml import annotation_client as ac
from moodlog.domains.journal.ml.annotation_client import (
    AnnotationClient,
    AnnotationConfigError,
    AnnotationTransportError,
    AnnotationValidationError,
    parse_annotation,
)

VALID = {
    "mood": "happy",
    "subject": "beach",
    "summary": "A relaxing day at the beach.",
    "color": "#22c55e",
    "negative": False,
    "sentimentScore": 7,
}


class _FakeModel:
    def __init__(self, text=None, error=None):
        self._text = text
        self._error = error
        self.prompts = []

    def generate_content(self, prompt, generation_config=None, request_options=None):
        self.prompts.append((prompt, generation_config, request_options))
        if self._error is not None:
            raise self._error
        return SimpleNamespace(text=self._text)


class _BlockedResponse:
    @property
    def text(self):
        raise ValueError("response has no parts")


@pytest.fixture
def install_model(monkeypatch):
    """Route genai.GenerativeModel to the given fake and record the configured key."""
    configured = {}

    def _install(model):
        monkeypatch.setattr(ac.genai, "configure", lambda **kwargs: configured.update(kwargs))
        monkeypatch.setattr(ac.genai, "GenerativeModel", lambda name: model)
        return configured

    return _install


# ==================== parse_annotation ====================


def test_parse_valid_payload():
    result = parse_annotation(json.dumps(VALID))
    assert result.mood == "happy"
    assert result.sentiment_score == 7
    assert result.negative is False


def test_parse_strips_markdown_fence():
    raw = "```json\n" + json.dumps(VALID) + "\n```"
    assert parse_annotation(raw).subject == "beach"


def test_parse_rejects_non_json():
    with pytest.raises(AnnotationValidationError):
        parse_annotation("I think the mood is happy.")


def test_parse_rejects_json_array():
    with pytest.raises(AnnotationValidationError):
        parse_annotation(json.dumps([VALID]))


@pytest.mark.parametrize("color", ["green", "#12345", "22c55e", "#ggg"])
def test_parse_rejects_bad_color(color):
    with pytest.raises(AnnotationValidationError):
        parse_annotation(json.dumps({**VALID, "color": color}))


@pytest.mark.parametrize("missing", ["mood", "subject", "summary", "color", "negative", "sentimentScore"])
def test_parse_rejects_missing_field(missing):
    payload = {k: v for k, v in VALID.items() if k != missing}
    with pytest.raises(AnnotationValidationError):
        parse_annotation(json.dumps(payload))


@pytest.mark.parametrize(
    "raw_score, expected",
    [(15, 10), (-42, -10), (6.5, 7), (-2.5, -3), ("4", 4), (0, 0)],
)
def test_parse_clamps_and_rounds_score(raw_score, expected):
    result = parse_annotation(json.dumps({**VALID, "sentimentScore": raw_score}))
    assert result.sentiment_score == expected


@pytest.mark.parametrize("bad", [None, True, "very good"])
def test_parse_rejects_non_numeric_score(bad):
    with pytest.raises(AnnotationValidationError):
        parse_annotation(json.dumps({**VALID, "sentimentScore": bad}))


# ==================== AnnotationClient ====================


def test_from_config_reads_settings():
    client = AnnotationClient.from_config(
        {"GEMINI_API_KEY": "k", "GEMINI_MODEL": "gemini-test", "ANNOTATION_TIMEOUT_SECONDS": "12"}
    )
    assert client.api_key == "k"
    assert client.model_name == "gemini-test"
    assert client.timeout == 12


def test_missing_api_key_raises_config_error():
    client = AnnotationClient(api_key="", model_name="gemini-test")
    with pytest.raises(AnnotationConfigError):
        client.annotate("hello")


def test_annotate_returns_validated_result(install_model):
    model = _FakeModel(text=json.dumps(VALID))
    configured = install_model(model)
    client = AnnotationClient(api_key="secret", model_name="gemini-test", timeout=9)

    result = client.annotate("Went to the beach, felt great")

    assert result.color == "#22c55e"
    assert configured == {"api_key": "secret"}
    prompt, generation_config, request_options = model.prompts[0]
    assert "Went to the beach, felt great" in prompt
    assert generation_config == {"response_mime_type": "application/json"}
    assert request_options == {"timeout": 9}


def test_transport_failure_maps_to_transport_error(install_model):
    install_model(_FakeModel(error=google_exceptions.ServiceUnavailable("backend down")))
    client = AnnotationClient(api_key="secret", model_name="gemini-test")
    with pytest.raises(AnnotationTransportError):
        client.annotate("anything")


def test_timeout_maps_to_transport_error(install_model):
    install_model(_FakeModel(error=TimeoutError("read timed out")))
    client = AnnotationClient(api_key="secret", model_name="gemini-test")
    with pytest.raises(AnnotationTransportError):
        client.annotate("anything")


def test_blocked_response_maps_to_validation_error(install_model):
    model = _FakeModel()
    model.generate_content = lambda *args, **kwargs: _BlockedResponse()
    install_model(model)
    client = AnnotationClient(api_key="secret", model_name="gemini-test")
    with pytest.raises(AnnotationValidationError):
        client.annotate("anything")


def test_malformed_model_output_is_validation_error(install_model):
    install_model(_FakeModel(text="{\"mood\": \"happy\""))
    client = AnnotationClient(api_key="secret", model_name="gemini-test")
    with pytest.raises(AnnotationValidationError):
        client.annotate("anything")


def test_answer_question_includes_entries(install_model):
    model = _FakeModel(text="  You wrote about the beach twice.  ")
    install_model(model)
    client = AnnotationClient(api_key="secret", model_name="gemini-test")

    answer = client.answer_question("What did I do?", ["Beach day", "Beach again"])

    assert answer == "You wrote about the beach twice."
    prompt = model.prompts[0][0]
    assert "What did I do?" in prompt
    assert "Beach again" in prompt


def test_empty_answer_is_validation_error(install_model):
    install_model(_FakeModel(text="   "))
    client = AnnotationClient(api_key="secret", model_name="gemini-test")
    with pytest.raises(AnnotationValidationError):
        client.answer_question("Anything?", ["entry"])
