"""Journal JSON API."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from moodlog.core.utils.decorators import csrf_protected, identity_required
from moodlog.domains.journal.mappers import map_analysis, map_entry, map_sentiment_record
from moodlog.domains.journal.ml.annotation_client import AnnotationError
from moodlog.domains.journal.schemas.journal_schemas import (
    HistoryQuery,
    JournalEntryCreate,
    JournalEntryListFilter,
    JournalEntryUpdate,
    QuestionRequest,
)
from moodlog.domains.journal.services import (
    aggregation_service,
    bookmark_service,
    journal_service,
    question_service,
    sentiment_service,
    streak_service,
)
from moodlog.extensions import limiter

logger = logging.getLogger(__name__)

journal_api_bp = Blueprint("journal_api", __name__)


def _validation_error(exc: ValidationError):
    details = exc.errors(include_url=False, include_context=False, include_input=False)
    return jsonify({"ok": False, "error": "validation_error", "details": details}), 400


def _streak_payload(user_id: int) -> dict:
    streak = streak_service.get_current_streak(user_id)
    progress = streak_service.streak_progress(streak, current_app.config.get("STREAK_DISPLAY_MAX", 7))
    return {"streak": streak, "progress": progress.model_dump()}


@journal_api_bp.get("")
@identity_required
def list_journal(user):
    try:
        filters = JournalEntryListFilter.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return _validation_error(exc)
    entries, total = journal_service.list_entries(user.id, page=filters.page, per_page=filters.per_page)
    bookmarked = bookmark_service.list_bookmarked_ids(user.id)
    pages = (total + filters.per_page - 1) // filters.per_page
    return jsonify(
        {
            "ok": True,
            "items": [map_entry(e, is_bookmarked=e.id in bookmarked) for e in entries],
            "page": filters.page,
            "pages": pages,
            "total": total,
            **_streak_payload(user.id),
        }
    )


@journal_api_bp.post("")
@identity_required
@csrf_protected
def create_journal_entry(user):
    payload = request.get_json(silent=True) or {}
    try:
        data = JournalEntryCreate.model_validate(payload)
    except ValidationError as exc:
        return _validation_error(exc)
    entry, analysis = journal_service.create_entry(user.id, data.content)
    return jsonify({"ok": True, "entry": map_entry(entry), "analysis": map_analysis(analysis)}), 201


@journal_api_bp.get("/<int:entry_id>")
@identity_required
def get_journal_entry(user, entry_id: int):
    entry = journal_service.get_entry(user.id, entry_id)
    if not entry:
        return jsonify({"ok": False, "error": "not_found"}), 404
    record = sentiment_service.get_score(entry.id)
    is_bookmarked = entry.id in bookmark_service.list_bookmarked_ids(user.id)
    return jsonify(
        {
            "ok": True,
            "entry": map_entry(entry, is_bookmarked=is_bookmarked),
            "sentiment": map_sentiment_record(record) if record else None,
        }
    )


@journal_api_bp.patch("/<int:entry_id>")
@identity_required
@csrf_protected
def update_journal_entry(user, entry_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = JournalEntryUpdate.model_validate(payload)
    except ValidationError as exc:
        return _validation_error(exc)
    result = journal_service.update_entry(user.id, entry_id, data.content)
    if result is None:
        return jsonify({"ok": False, "error": "not_found"}), 404
    entry, analysis, changed = result
    return jsonify(
        {"ok": True, "entry": map_entry(entry), "analysis": map_analysis(analysis), "changed": changed}
    )


@journal_api_bp.delete("/<int:entry_id>")
@identity_required
@csrf_protected
def delete_journal_entry(user, entry_id: int):
    if not journal_service.delete_entry(user.id, entry_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@journal_api_bp.post("/<int:entry_id>/bookmark")
@identity_required
@csrf_protected
def bookmark_entry(user, entry_id: int):
    try:
        bookmark, created = bookmark_service.add_bookmark(user.id, entry_id)
    except ValueError:
        return jsonify({"ok": False, "error": "not_found"}), 404
    body = {
        "ok": True,
        "bookmark": {
            "id": bookmark.id,
            "entry_id": bookmark.entry_id,
            "created_at": bookmark.created_at.isoformat(),
        },
        "created": created,
    }
    return jsonify(body), 201 if created else 200


@journal_api_bp.delete("/<int:entry_id>/bookmark")
@identity_required
@csrf_protected
def unbookmark_entry(user, entry_id: int):
    if not bookmark_service.remove_bookmark(user.id, entry_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@journal_api_bp.get("/bookmarks")
@identity_required
def list_bookmarks(user):
    pairs = bookmark_service.list_bookmarked_entries(user.id)
    items = []
    for bookmark, entry in pairs:
        item = map_entry(entry, is_bookmarked=True)
        item["bookmarked_at"] = bookmark.created_at.isoformat()
        items.append(item)
    stats = bookmark_service.bookmark_stats(pairs)
    return jsonify({"ok": True, "items": items, "stats": stats.model_dump()})


@journal_api_bp.get("/history")
@identity_required
def sentiment_history(user):
    try:
        query = HistoryQuery.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return _validation_error(exc)
    summary = aggregation_service.build_history_summary(user.id, query.days)
    return jsonify({"ok": True, **summary.model_dump(by_alias=True)})


@journal_api_bp.get("/streak")
@identity_required
def current_streak(user):
    return jsonify({"ok": True, **_streak_payload(user.id)})


@journal_api_bp.post("/question")
@limiter.limit(lambda: current_app.config.get("QUESTION_RATE_LIMIT", "20 per minute"))
@identity_required
@csrf_protected
def ask_question(user):
    payload = request.get_json(silent=True) or {}
    try:
        data = QuestionRequest.model_validate(payload)
    except ValidationError as exc:
        return _validation_error(exc)
    try:
        answer = question_service.answer_question(user.id, data.question)
    except AnnotationError as exc:
        logger.error("Question answering failed for user %s: %s", user.id, exc)
        return jsonify({"ok": False, "error": "question_failed"}), 500
    return jsonify({"ok": True, "answer": answer})
