import random
from typing import Optional
from .models import LipSync, MouthCue

_rng = random.Random()

VISEMES = ["A", "B", "C", "D", "E", "F", "G", "H", "X"]

MIN_CUE_SECONDS = 0.08
MAX_CUE_SECONDS = 0.12
WORD_PAUSE_SECONDS = 0.1


def generate_lipsync(text: str, rng: Optional[random.Random] = None) -> LipSync:
    """
    Fabricate mouth cues for the avatar from the reply text.

    One cue per character with a random 80-120ms duration and a random viseme,
    plus a fixed pause after every word. There is no audio analysis behind this,
    so the timing is only an approximation of what the browser TTS will speak.
    """
    rng = rng or _rng
    cues = []
    current_time = 0.0

    for word in text.split(" "):
        for _ in word:
            duration = rng.uniform(MIN_CUE_SECONDS, MAX_CUE_SECONDS)
            cues.append(MouthCue(
                start=round(current_time, 2),
                end=round(current_time + duration, 2),
                value=rng.choice(VISEMES),
            ))
            current_time += duration
        current_time += WORD_PAUSE_SECONDS

    return LipSync(mouthCues=cues)
