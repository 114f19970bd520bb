#!/usr/bin/env python3
"""
Cover Letter Writer - LLM-generated cover letters for a profile/posting pair.

Supports tone and length presets, custom talking points, optional
variations (enthusiastic, concise), feedback-driven optimization and
per-posting writing tips.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from core.config_loader import WriterConfig
from core.errors import ExternalServiceError
from core.llm.interfaces import LLMProvider
from core.llm.system_prompts import (
    COVER_LETTER_SYSTEM_PROMPT, COVER_LETTER_USER_PROMPT,
    ENTHUSIASTIC_VARIATION_SYSTEM_PROMPT, ENTHUSIASTIC_VARIATION_USER_PROMPT,
    CONCISE_VARIATION_SYSTEM_PROMPT, CONCISE_VARIATION_USER_PROMPT,
    COVER_LETTER_OPTIMIZE_SYSTEM_PROMPT, COVER_LETTER_OPTIMIZE_USER_PROMPT,
    COVER_LETTER_TIPS_SYSTEM_PROMPT, COVER_LETTER_TIPS_USER_PROMPT,
)
from core.matcher.dto import ProfileDTO, PostingDTO
from core.matcher.text_builder import build_profile_text, build_posting_text

logger = logging.getLogger(__name__)

WORD_COUNTS = {
    "short": "200-300",
    "medium": "300-400",
    "long": "400-500",
}

REGISTERS = {
    "professional": "formal",
    "casual": "friendly but still professional",
    "enthusiastic": "enthusiastic and professional",
}

_EXTRA_BLANK_LINES_RE = re.compile(r"\n\s*\n\s*\n")
_LIST_PREFIX_RE = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")


@dataclass
class CoverLetterResult:
    cover_letter: str
    tone: str
    length: str
    variations: List[str] = field(default_factory=list)
    custom_points_count: int = 0

    @property
    def word_count(self) -> int:
        return count_words(self.cover_letter)


@dataclass
class OptimizedLetter:
    cover_letter: str
    improvements: List[str] = field(default_factory=list)

    @property
    def word_count(self) -> int:
        return count_words(self.cover_letter)


def count_words(text: str) -> int:
    return len(text.split())


def format_cover_letter(letter: str, applicant_name: str) -> str:
    """Trim, append the signature when the name is missing, collapse extra blank lines."""
    formatted = letter.strip()
    if applicant_name and applicant_name not in formatted:
        formatted += f"\n\n{applicant_name}"
    return _EXTRA_BLANK_LINES_RE.sub("\n\n", formatted)


def identify_improvements(original: str, optimized: str, feedback: str) -> List[str]:
    feedback_lower = (feedback or "").lower()
    improvements = []

    if "length" in feedback_lower:
        improvements.append("Optimized letter length based on feedback")
    if "tone" in feedback_lower:
        improvements.append("Adjusted tone to better match requirements")
    if "specific" in feedback_lower:
        improvements.append("Added more specific examples and details")
    if len(optimized) != len(original):
        improvements.append("Improved word choice and conciseness")

    return improvements


def split_tips(text: str) -> List[str]:
    """One tip per non-empty line, list markers stripped, consecutive duplicates dropped."""
    tips: List[str] = []
    for line in text.splitlines():
        tip = _LIST_PREFIX_RE.sub("", line).strip()
        if tip and (not tips or tips[-1] != tip):
            tips.append(tip)
    return tips


class CoverLetterWriter:
    """Writes and refines cover letters with an LLM provider."""

    def __init__(self, ai_service: LLMProvider, config: Optional[WriterConfig] = None):
        self.ai_service = ai_service
        self.config = config or WriterConfig()

    def _complete(self, system_prompt: str, user_prompt: str, temperature: float, max_tokens: int) -> str:
        text = self.ai_service.complete(
            system_prompt,
            user_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            model=self.config.model,
        )
        if not text or not text.strip():
            raise ExternalServiceError("llm", "Empty response from writer model")
        return text

    def generate(
        self,
        profile: ProfileDTO,
        posting: PostingDTO,
        tone: Optional[str] = None,
        length: Optional[str] = None,
        custom_points: Optional[Sequence[str]] = None,
        with_variations: Optional[bool] = None
    ) -> CoverLetterResult:
        """
        Generate a cover letter.

        Args:
            profile: Applicant profile
            posting: Target posting
            tone: professional, casual or enthusiastic (config default when None)
            length: short, medium or long (config default when None)
            custom_points: Extra points the letter must mention
            with_variations: Also produce enthusiastic and concise rewrites

        Raises:
            ValueError: unknown tone or length
            ExternalServiceError: the LLM call failed or returned nothing
        """
        tone = tone or self.config.default_tone
        length = length or self.config.default_length
        if tone not in REGISTERS:
            raise ValueError(f"Unknown tone: {tone!r} (expected one of {', '.join(REGISTERS)})")
        if length not in WORD_COUNTS:
            raise ValueError(f"Unknown length: {length!r} (expected one of {', '.join(WORD_COUNTS)})")

        points = [p for p in (custom_points or []) if p and p.strip()]

        prompt = COVER_LETTER_USER_PROMPT.format(
            profile_text=build_profile_text(profile),
            posting_text=build_posting_text(posting),
            tone=tone,
            word_count=WORD_COUNTS[length],
            custom_points=", ".join(points) if points else "None specified",
            register=REGISTERS[tone],
        )

        letter = self._complete(COVER_LETTER_SYSTEM_PROMPT, prompt, self.config.temperature, 2000)
        letter = format_cover_letter(letter, profile.name)

        if with_variations is None:
            with_variations = self.config.generate_variations

        variations = self.generate_variations(profile, posting, letter) if with_variations else []

        logger.info(
            f"Generated {tone}/{length} cover letter for '{posting.title}' at {posting.company} "
            f"({count_words(letter)} words, {len(variations)} variation(s))"
        )

        return CoverLetterResult(
            cover_letter=letter,
            tone=tone,
            length=length,
            variations=variations,
            custom_points_count=len(points),
        )

    def generate_variations(self, profile: ProfileDTO, posting: PostingDTO, letter: str) -> List[str]:
        """Enthusiastic and concise rewrites; a failed rewrite is left out."""
        rewrites = [
            (
                "enthusiastic",
                ENTHUSIASTIC_VARIATION_SYSTEM_PROMPT,
                ENTHUSIASTIC_VARIATION_USER_PROMPT.format(
                    letter=letter, name=profile.name, title=posting.title, company=posting.company
                ),
                0.8,
                2000,
            ),
            (
                "concise",
                CONCISE_VARIATION_SYSTEM_PROMPT,
                CONCISE_VARIATION_USER_PROMPT.format(letter=letter),
                0.6,
                1500,
            ),
        ]

        variations = []
        for label, system_prompt, user_prompt, temperature, max_tokens in rewrites:
            try:
                variations.append(self._complete(system_prompt, user_prompt, temperature, max_tokens).strip())
            except ExternalServiceError as e:
                logger.warning(f"Skipping {label} variation: {e}")

        return variations

    def optimize(
        self,
        profile: ProfileDTO,
        posting: PostingDTO,
        letter: str,
        feedback: str
    ) -> OptimizedLetter:
        """Rewrite a letter to address feedback."""
        prompt = COVER_LETTER_OPTIMIZE_USER_PROMPT.format(
            letter=letter,
            feedback=feedback,
            name=profile.name,
            title=posting.title,
            company=posting.company,
            description=posting.description or "No description provided",
        )
        optimized = self._complete(COVER_LETTER_OPTIMIZE_SYSTEM_PROMPT, prompt, 0.7, 2000).strip()

        return OptimizedLetter(
            cover_letter=optimized,
            improvements=identify_improvements(letter, optimized, feedback),
        )

    def tips(self, posting: PostingDTO) -> List[str]:
        """Writing tips for one posting."""
        prompt = COVER_LETTER_TIPS_USER_PROMPT.format(posting_text=build_posting_text(posting))
        return split_tips(self._complete(COVER_LETTER_TIPS_SYSTEM_PROMPT, prompt, 0.6, 1000))
