"""Gem Hall Nobles - 10 noble tiles worth 3 points each."""

from __future__ import annotations

from ..engine_core.state import Gems, Noble


def _noble(noble_id: str, **requirement: int) -> Noble:
    return Noble(noble_id=noble_id, points=3, requirement=Gems.of(requirement))


NOBLES: list[Noble] = [
    _noble("N-01", red=5, blue=4),
    _noble("N-02", red=5, green=4),
    _noble("N-03", red=4, white=5),
    _noble("N-04", blue=5, green=4),
    _noble("N-05", blue=4, white=5),
    _noble("N-06", green=5, white=4),
    _noble("N-07", red=3, green=3, black=3),
    _noble("N-08", blue=3, white=3, black=3),
    _noble("N-09", red=3, blue=3, white=3),
    _noble("N-10", green=3, white=3, black=3),
]

_NOBLES_BY_ID = {noble.noble_id: noble for noble in NOBLES}


def get_noble_by_id(noble_id: str) -> Noble | None:
    return _NOBLES_BY_ID.get(noble_id)
