"""Record types flowing from the extractor to the stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class VariantRecord:
    """One candidate answer and its score."""

    variant: str
    points: int

    def __post_init__(self) -> None:
        if self.points < 0:
            raise ValueError(f"points must be non-negative: {self.points}")

    def to_dict(self) -> dict[str, Any]:
        return {"variant": self.variant, "points": self.points}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "VariantRecord":
        return cls(variant=str(payload["variant"]), points=int(payload["points"]))


@dataclass(frozen=True, slots=True)
class QuestionRecord:
    """A question page reduced to its English question and ordered variants."""

    url: str
    question_en: str
    variants_en: tuple[VariantRecord, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.variants_en:
            raise ValueError(f"QuestionRecord requires at least one variant: {self.url}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "question_en": self.question_en,
            "variants_en": [variant.to_dict() for variant in self.variants_en],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "QuestionRecord":
        return cls(
            url=str(payload["url"]),
            question_en=str(payload["question_en"]),
            variants_en=tuple(VariantRecord.from_dict(item) for item in payload["variants_en"]),
        )


@dataclass(frozen=True, slots=True)
class TranslatedRecord:
    """Translated counterpart of a QuestionRecord, keyed by the same URL."""

    url: str
    question_en: str
    question: str
    variants: tuple[VariantRecord, ...]

    @property
    def question_key(self) -> str:
        return normalise_question(self.question)

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "question_en": self.question_en,
            "question": self.question,
            "variants": [variant.to_dict() for variant in self.variants],
        }


def normalise_question(text: str) -> str:
    """Dedup key for translated questions."""

    return text.strip().lower()


__all__ = ["QuestionRecord", "TranslatedRecord", "VariantRecord", "normalise_question"]
