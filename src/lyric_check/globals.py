from typing import Tuple


CROTCHET: int = 256  # Ticks per quarter note, all durations are scaled to this
MINIM: int = 2 * CROTCHET  # Rest length that always breaks a phrase
SEMIBREVE: int = 4 * CROTCHET

DEFAULT_VOICE: int = 1

# Barline children that affect playback order
REPEAT_DIRECTIONS: Tuple[str, ...] = ("forward", "backward")
ENDING_TYPES: Tuple[str, ...] = ("start", "stop", "discontinue")
