from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any


def _has_url(links: Any) -> bool:
    if not isinstance(links, list):
        return False
    for link in links:
        if isinstance(link, dict) and str(link.get("url") or "").strip():
            return True
    return False


def migrate_assignment_data(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Bring a possibly-legacy assignment payload into the canonical shape.

    Legacy rows only carry `youtubelinks`; the canonical list is `externalLinks`.
    Non-empty `externalLinks` always win. The input is never mutated and
    applying this twice gives the same result as applying it once.
    """
    data = copy.deepcopy(raw) if isinstance(raw, dict) else {}

    if not _has_url(data.get("externalLinks")) and _has_url(data.get("youtubelinks")):
        data["externalLinks"] = [
            {
                "url": link.get("url", ""),
                "title": link.get("title", ""),
                "type": "youtube",
            }
            for link in data["youtubelinks"]
            if isinstance(link, dict)
        ]

    if not isinstance(data.get("externalLinks"), list):
        data["externalLinks"] = []
    if not isinstance(data.get("youtubelinks"), list):
        data["youtubelinks"] = []

    return data


def normalize_feedback(raw: Any) -> list[dict[str, Any]]:
    """Accept the list format, the legacy single-object format, or garbage."""
    if isinstance(raw, list):
        items = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            items.append({**item, "question_comments": item.get("question_comments") or {}})
        return items

    if isinstance(raw, dict) and raw:
        return [{**raw, "question_comments": raw.get("question_comments") or {}}]

    return []


def _feedback_sort_key(item: dict[str, Any]) -> float:
    raw = item.get("date")
    if not raw:
        return 0.0
    try:
        dt = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def get_latest_feedback(raw: Any) -> dict[str, Any] | None:
    items = normalize_feedback(raw)
    if not items:
        return None
    return max(items, key=_feedback_sort_key)


def get_latest_question_comments(raw: Any) -> dict[str, Any]:
    latest = get_latest_feedback(raw)
    return latest["question_comments"] if latest else {}


def has_question_comments(raw: Any) -> bool:
    return bool(get_latest_question_comments(raw))


def create_feedback_item(
    *,
    teacher_id: str,
    text: str,
    selected_skills: list[str] | None = None,
    skills_justification: str = "",
    question_comments: dict[str, dict[str, Any]] | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    return {
        "text": text,
        "date": now.isoformat(),
        "teacher_id": teacher_id,
        "selected_skills": list(selected_skills or []),
        "skills_justification": skills_justification,
        "question_comments": dict(question_comments or {}),
    }
