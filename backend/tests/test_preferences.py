import uuid
from datetime import datetime, timezone

import pytest

from roampedia.services.recommendation.preferences import (
    apply_feedback,
    apply_learning_action,
    new_preference_record,
)
from roampedia.services.recommendation.scoring import PreferenceSnapshot


@pytest.fixture
def record():
    return new_preference_record(uuid.uuid4())


def test_liked_tag_added_once_but_history_grows(record):
    apply_feedback(record, "Thailand", True, ["Beach"])
    apply_feedback(record, "Thailand", True, ["Beach"])

    assert record.preferred_vibes == ["Beach"]
    assert len(record.feedback_history) == 2
    assert [e["country_name"] for e in record.liked_countries] == ["Thailand", "Thailand"]


def test_dislike_only_touches_disliked_list(record):
    apply_feedback(record, "Iceland", False, ["Remote"])

    assert record.preferred_vibes == []
    assert record.liked_countries == []
    assert record.disliked_countries[0]["country_name"] == "Iceland"
    assert record.feedback_history[0]["liked"] is False


def test_liked_tags_merge_into_vibes_unless_already_an_activity(record):
    record.preferred_activities = ["Hiking"]
    apply_feedback(record, "Peru", True, ["Hiking", "Historic"])
    assert record.preferred_vibes == ["Historic"]


def test_history_capped_to_most_recent(record):
    for i in range(51):
        apply_feedback(record, f"Country {i}", i % 2 == 0, [])

    history = record.feedback_history
    assert len(history) == 50
    assert history[0]["country_name"] == "Country 1"
    assert history[-1]["country_name"] == "Country 50"


def test_feedback_entries_carry_timestamp(record):
    now = datetime(2025, 1, 6, 12, 0, tzinfo=timezone.utc)
    apply_feedback(record, "Japan", True, ["Serene"], now=now)
    assert record.feedback_history[0] == {
        "country_name": "Japan",
        "liked": True,
        "tags": ["Serene"],
        "timestamp": now.isoformat(),
    }


def test_lists_are_reassigned_not_mutated(record):
    before = record.feedback_history
    apply_feedback(record, "Japan", True, ["Serene"])
    assert before == []
    assert record.feedback_history is not before


def test_learning_action_folds_tags_into_vibes(record):
    assert apply_learning_action(record, "view", ["Wild", "Wild", "Remote"]) is True
    assert record.preferred_vibes == ["Wild", "Remote"]


def test_unknown_learning_action_is_ignored(record):
    assert apply_learning_action(record, "share", ["Wild"]) is False
    assert record.preferred_vibes == []


def test_snapshot_reads_liked_country_names(record):
    apply_feedback(record, "Kenya", True, [])
    apply_feedback(record, "Kenya", True, [])
    snapshot = PreferenceSnapshot.from_record(record)
    assert snapshot.liked_countries == ["Kenya", "Kenya"]
