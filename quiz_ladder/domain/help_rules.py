"""Effects of the one-time aids on a question's answer set.

Rule of thumb:
- Inputs are answer keys and the correct key; outputs are plain dict/list payloads.
- Randomness comes from the caller's generator so outcomes are reproducible.
"""

from typing import Sequence

import numpy as np

# Share of the vote given to the correct key before the rest is split.
AUDIENCE_MIN_SHARE = 40
AUDIENCE_MAX_SHARE = 85


def _check_keys(keys: Sequence[str], correct_key: str) -> list[str]:
    keys = list(keys)
    if correct_key not in keys:
        raise ValueError(f"Correct key {correct_key!r} is not among {keys}")
    if len(keys) < 2:
        raise ValueError("An aid needs at least two answer keys")
    return keys


def fifty_fifty(keys: Sequence[str], correct_key: str, rng: np.random.Generator) -> list[str]:
    """Keep the correct key plus one incorrect key picked at random.

    The result is sorted so its order does not give the correct key away.
    """
    keys = _check_keys(keys, correct_key)
    incorrect_keys = [key for key in keys if key != correct_key]
    kept = incorrect_keys[int(rng.integers(len(incorrect_keys)))]
    return sorted([correct_key, kept])


def audience_distribution(
    keys: Sequence[str], correct_key: str, rng: np.random.Generator
) -> dict[str, int]:
    """Simulate an audience vote as integer percentages over `keys`.

    Percentages sum to 100. The correct key always gets a strict plurality,
    never the whole vote.
    """
    keys = _check_keys(keys, correct_key)
    incorrect_keys = [key for key in keys if key != correct_key]

    share = int(rng.integers(AUDIENCE_MIN_SHARE, AUDIENCE_MAX_SHARE + 1))
    rest = 100 - share
    cuts = sorted(int(cut) for cut in rng.integers(0, rest + 1, size=len(incorrect_keys) - 1))
    bounds = [0, *cuts, rest]
    parts = [high - low for low, high in zip(bounds, bounds[1:])]

    top = max(range(len(parts)), key=parts.__getitem__)
    if parts[top] >= share:
        share, parts[top] = parts[top], share
        if share == parts[top]:
            share += 1
            parts[top] -= 1

    distribution = dict(zip(incorrect_keys, parts))
    distribution[correct_key] = share
    return {key: distribution[key] for key in keys}
