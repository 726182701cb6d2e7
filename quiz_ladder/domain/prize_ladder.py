"""Prize ladder lookups.

A level counts *completed* questions: level 0 means nothing answered yet and
level N (the ladder size) means every question was answered correctly.
Fireproof levels use the same numbering.
"""

DEFAULT_PRIZES = (
    100,
    200,
    300,
    500,
    1_000,
    2_000,
    4_000,
    8_000,
    16_000,
    32_000,
    64_000,
    125_000,
    250_000,
    500_000,
    1_000_000,
)
DEFAULT_FIREPROOF_LEVELS = (5, 10, 15)


def _parse_int_list(raw: str | None) -> list[int] | None:
    if raw is None or not raw.strip():
        return None
    return [int(item) for item in raw.split(",") if item.strip()]


class PrizeLadder:
    def __init__(self, prizes=DEFAULT_PRIZES, fireproof_levels=DEFAULT_FIREPROOF_LEVELS):
        prizes = tuple(int(prize) for prize in prizes)
        if not prizes:
            raise ValueError("Prize ladder must have at least one level")
        if prizes[0] <= 0 or any(b <= a for a, b in zip(prizes, prizes[1:])):
            raise ValueError("Prizes must be positive and strictly increasing")

        fireproof_levels = tuple(sorted(set(int(level) for level in fireproof_levels)))
        for level in fireproof_levels:
            if level < 1 or level > len(prizes):
                raise ValueError(f"Fireproof level {level} is outside 1..{len(prizes)}")

        self.prizes = prizes
        self.fireproof_levels = fireproof_levels

    @classmethod
    def from_settings(cls, prizes_text: str | None, fireproof_text: str | None) -> "PrizeLadder":
        """Build a ladder from comma-separated settings values; unset values use the defaults."""
        prizes = _parse_int_list(prizes_text)
        fireproof_levels = _parse_int_list(fireproof_text)
        return cls(
            prizes if prizes is not None else DEFAULT_PRIZES,
            fireproof_levels if fireproof_levels is not None else DEFAULT_FIREPROOF_LEVELS,
        )

    @property
    def size(self) -> int:
        return len(self.prizes)

    def prize_for(self, level: int) -> int:
        """Return the prize for having completed `level` questions."""
        if level < 0 or level > self.size:
            raise ValueError(f"Level {level} is outside 0..{self.size}")
        if level == 0:
            return 0
        return self.prizes[level - 1]

    def fireproof_prize_for(self, level: int) -> int:
        """Return the prize of the highest fireproof level at or below `level`, or 0."""
        for reached in range(min(level, self.size), 0, -1):
            if self.is_fireproof(reached):
                return self.prize_for(reached)
        return 0

    def is_fireproof(self, level: int) -> bool:
        return level in self.fireproof_levels
