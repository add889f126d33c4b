"""Names handed out to computer opponents."""

from __future__ import annotations
import random

AI_NAMES: tuple[str, ...] = (
    "Aiko", "Ravi", "Lina", "Mateo", "Zara", "Hana", "Omar", "Sofia", "Diego", "Mira",
    "Anya", "Kaito", "Noor", "Ishan", "Nadia", "Luca", "Sana", "Kiran", "Elena", "Jiro",
    "Amir", "Priya", "Niko", "Aya", "Yara", "Tariq", "Mei", "Levi", "Ines", "Rhea",
    "Laila", "Hugo", "Zuri", "Kenji", "Asha", "Eli", "Fatima", "Jonas", "Lucia", "Soren",
    "Amina", "Kai", "Nina", "Arjun", "Selene", "Dara", "Ryo", "Adel", "Suri", "Milo",
)


def random_ai_names(count: int, rng: random.Random | None = None) -> list[str]:
    """Pick `count` distinct names."""
    rng = rng or random.Random()
    return rng.sample(AI_NAMES, count)
