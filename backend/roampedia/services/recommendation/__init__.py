"""Recommendation engine — tag-based destination recommendations.

Modules:
    config       Weights, limits and filter vocabularies
    tag_matcher  Overlap helpers between requested and available tags
    scoring      Plain and personalised 0-100 match scores, similarity, explanations
    preferences  Preference aggregator (feedback and implicit learning)
    engine       Candidate retrieval, exclusion, ranking and catalogue stats

Pipeline:
    RecommendationRequest → candidates (tag overlap + filters) → exclusions
    → calculate_match_score / calculate_personalized_score → rank → top N
"""
