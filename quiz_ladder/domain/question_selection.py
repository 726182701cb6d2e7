"""Question selection for a new game."""

from typing import Mapping, Sequence
from uuid import UUID

import numpy as np

from quiz_ladder.domain.errors import InsufficientQuestions


def select_question_ids(
    ids_by_level: Mapping[int, Sequence[UUID]],
    level_count: int,
    rng: np.random.Generator,
) -> list[UUID]:
    """Pick one question per level 0..level_count-1, uniformly among its candidates.

    A question is never used twice within one game.

    Raises:
        InsufficientQuestions: a level has no unused candidate left.
    """
    chosen: list[UUID] = []
    used: set[UUID] = set()
    for level in range(level_count):
        candidates = [
            question_id
            for question_id in ids_by_level.get(level, ())
            if question_id not in used
        ]
        if not candidates:
            raise InsufficientQuestions(level)
        question_id = candidates[int(rng.integers(len(candidates)))]
        used.add(question_id)
        chosen.append(question_id)
    return chosen
