"""Matcher Module - profile/posting text and embedding similarity."""
from core.matcher.dto import ProfileDTO, PostingDTO, profile_from_orm, posting_from_orm
from core.matcher.similarity import SimilarityCalculator, cosine_similarity
from core.matcher.text_builder import build_profile_text, build_posting_text

__all__ = [
    'ProfileDTO', 'PostingDTO', 'profile_from_orm', 'posting_from_orm',
    'SimilarityCalculator', 'cosine_similarity',
    'build_profile_text', 'build_posting_text',
]
