"""Journal request/response schemas."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCORE_MIN = -10
SCORE_MAX = 10
HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


# ---- requests ----


class JournalEntryCreate(BaseModel):
    content: str = ""


class JournalEntryUpdate(BaseModel):
    content: str = Field(min_length=1)


class JournalEntryListFilter(BaseModel):
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=20, ge=1, le=100)


class HistoryQuery(BaseModel):
    days: Optional[int] = Field(default=None, ge=1, le=3650)


class QuestionRequest(BaseModel):
    question: str = Field(min_length=1, max_length=2000)

    @field_validator("question")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("question must not be blank")
        return value


# ---- annotation model output ----


class AnnotationResult(BaseModel):
    """Validated structure returned by the annotation model."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    mood: str = Field(min_length=1, max_length=100)
    subject: str = Field(min_length=1, max_length=255)
    summary: str = Field(min_length=1)
    color: str = Field(pattern=HEX_COLOR_PATTERN)
    negative: bool
    sentiment_score: int = Field(alias="sentimentScore", ge=SCORE_MIN, le=SCORE_MAX)

    @field_validator("sentiment_score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        if isinstance(value, bool) or value is None:
            raise ValueError("sentimentScore must be a number")
        try:
            rounded = Decimal(str(value).strip()).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise ValueError("sentimentScore must be a number") from exc
        return max(SCORE_MIN, min(SCORE_MAX, int(rounded)))


# ---- responses ----


class AnalysisResponse(BaseModel):
    mood: str
    subject: str
    summary: str
    color: str
    negative: bool
    sentiment_score: int


class JournalEntryResponse(BaseModel):
    id: int
    content: str
    created_at: str
    updated_at: str
    is_bookmarked: bool = False
    analysis: Optional[AnalysisResponse] = None


class SentimentRecordResponse(BaseModel):
    id: int
    entry_id: int
    entry_updated_at: str
    mood: str
    color: str
    score: int
    created_at: str
    updated_at: str


class ChartPoint(BaseModel):
    date: str
    score: int
    mood: str
    color: str


class SentimentStats(BaseModel):
    total: int = 0
    average: Optional[float] = None
    highest: Optional[int] = None
    lowest: Optional[int] = None
    most_common_mood: Optional[str] = Field(default=None, serialization_alias="mostCommonMood")


class DateRange(BaseModel):
    start: str
    end: str


class HistorySummary(BaseModel):
    chart_data: List[ChartPoint] = Field(serialization_alias="chartData")
    average: Optional[float] = None
    stats: SentimentStats
    date_range: DateRange = Field(serialization_alias="dateRange")


class StreakProgress(BaseModel):
    value: int
    max: int
    ratio: float
    tier: str


class BookmarkStats(BaseModel):
    total: int
    this_week: int
    top_mood: Optional[str] = None
