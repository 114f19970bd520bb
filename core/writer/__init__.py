"""Writer Module - cover letter generation."""
from core.writer.cover_letter import (
    CoverLetterWriter, CoverLetterResult, OptimizedLetter, format_cover_letter,
)

__all__ = ['CoverLetterWriter', 'CoverLetterResult', 'OptimizedLetter', 'format_cover_letter']
