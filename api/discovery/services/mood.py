"""Mood detection from explicit vocabulary and writing-style signals."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from discovery.models.discovery import Mood
from discovery.services.lexicon import DEFAULT_LEXICON, Lexicon, MoodProfile
from discovery.services.matching import contains, normalize

EMOJI_CONFIDENCE = 70
CAPS_CONFIDENCE = 50
EXCLAMATION_CONFIDENCE = 45
ELLIPSIS_CONFIDENCE = 35
REPEAT_HIT_BONUS = 10
BREVITY_BONUS = 5
MAX_CONFIDENCE = 100


@dataclass(frozen=True, slots=True)
class MoodSignal:
    mood: Mood
    confidence: int

    @property
    def acknowledged(self) -> bool:
        """Replies open with an empathetic line only for confident detections."""
        return self.confidence > 60


class MoodDetector:
    """Score each mood and keep the strongest one.

    Explicit vocabulary in any supported language starts at the lexicon's
    explicit confidence; implicit signals (emoji, shouting, "!!!", trailing
    "...") contribute weaker scores. Brevity alone never creates a mood but
    reinforces tired/bored readings.
    """

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON) -> None:
        self.lexicon = lexicon

    def detect(self, query: str) -> MoodSignal | None:
        text = normalize(query)
        scores: dict[Mood, int] = defaultdict(int)

        for per_language in self.lexicon.moods.values():
            for mood, phrases in per_language.items():
                hits = sum(1 for phrase in phrases if contains(text, phrase))
                if hits:
                    base = scores[mood] or self.lexicon.explicit_mood_confidence - REPEAT_HIT_BONUS
                    scores[mood] = base + REPEAT_HIT_BONUS * hits

        for emoji, mood in self.lexicon.mood_emoji.items():
            if emoji in query:
                scores[mood] = max(scores[mood], EMOJI_CONFIDENCE) + (REPEAT_HIT_BONUS if scores[mood] else 0)

        if _is_shouting(query):
            mood = Mood.ANGRY if scores.get(Mood.ANGRY) else Mood.EXCITED
            scores[mood] = max(scores[mood], CAPS_CONFIDENCE)
        if "!!!" in query:
            scores[Mood.EXCITED] = max(scores[Mood.EXCITED], EXCLAMATION_CONFIDENCE)
        if query.rstrip().endswith("..."):
            mood = Mood.TIRED if scores.get(Mood.TIRED) else Mood.SAD
            scores[mood] = max(scores[mood], ELLIPSIS_CONFIDENCE)

        if len(query.split()) <= 3:
            for mood in (Mood.TIRED, Mood.BORED):
                if scores.get(mood):
                    scores[mood] += BREVITY_BONUS

        candidates = [(score, mood) for mood, score in scores.items() if score > 0]
        if not candidates:
            return None
        # Stable tie-break on enum order keeps detection deterministic.
        order = list(Mood)
        score, mood = max(candidates, key=lambda pair: (pair[0], -order.index(pair[1])))
        return MoodSignal(mood=mood, confidence=min(score, MAX_CONFIDENCE))

    def profile(self, mood: Mood) -> MoodProfile:
        return self.lexicon.mood_profiles.get(mood, MoodProfile())


def _is_shouting(query: str) -> bool:
    letters = [char for char in query if char.isalpha()]
    if len(letters) < 6:
        return False
    upper = sum(1 for char in letters if char.isupper())
    return upper / len(letters) >= 0.8
