import logging
from typing import Optional

from ..models import Comparison, DuplicateGroup, RelocationDecision
from .compare import Comparator


class GroupReducer:
    def __init__(self, comparator: Optional[Comparator] = None):
        self.comparator = comparator if comparator is not None else Comparator()

    def reduce(self, group: DuplicateGroup) -> RelocationDecision:
        """
        Picks the single keeper of a group.

        A challenger only replaces the current keeper when strictly better, so
        among fully equal files the earliest member (path order) is kept.
        """
        keeper = group.members[0]
        for challenger in group.members[1:]:
            if self.comparator.compare(keeper, challenger) is Comparison.B_BETTER:
                keeper = challenger

        relocate = tuple(c for c in group.members if c is not keeper)
        logging.info(f"  Best quality: {keeper.path} ({self.comparator.quality_of(keeper)})")
        return RelocationDecision(group=group, keeper=keeper, relocate=relocate)
