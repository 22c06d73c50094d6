from roampedia.services.recommendation.tag_matcher import (
    has_overlap,
    matched_tags,
    overlap_ratio,
    shared_tags,
    unique_tags,
)


def test_unique_tags_keeps_first_seen_order_and_drops_empties():
    assert unique_tags(["Beach", "", "Historic", "Beach", None]) == ["Beach", "Historic"]
    assert unique_tags(None) == []


def test_matched_tags_in_request_order():
    assert matched_tags(["Historic", "Beach", "Skiing"], ["Beach", "Historic"]) == ["Historic", "Beach"]


def test_matched_tags_is_case_sensitive():
    assert matched_tags(["beach"], ["Beach"]) == []


def test_overlap_ratio_counts_duplicated_request_once():
    assert overlap_ratio(["Beach", "Beach", "Skiing"], ["Beach"]) == 0.5


def test_overlap_ratio_empty_request_is_zero():
    assert overlap_ratio([], ["Beach"]) == 0.0


def test_shared_and_has_overlap():
    assert shared_tags(["Wild", "Remote"], ["Remote"]) == ["Remote"]
    assert has_overlap(["Wild"], ["Remote", "Wild"])
    assert not has_overlap(["Wild"], None)
