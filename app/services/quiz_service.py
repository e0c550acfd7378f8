"""Quiz round construction and answer checking."""
import logging
import random
from typing import List, Optional, Sequence

from ..models import EntrySummary
from ..state import QuizRound

logger = logging.getLogger('pokedex.quiz')

DECOY_COUNT = 2


class QuizService:
    """Builds "who's that Pokémon?" rounds from a catalog.

    All randomness goes through *rng* so a seeded :class:`random.Random`
    gives reproducible rounds.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def new_round(self, catalog: Sequence[EntrySummary]) -> Optional[QuizRound]:
        """Pick a target and decoys from *catalog*.

        Returns ``None`` for an empty catalog.  With fewer than three
        distinct names the round simply carries fewer options.
        """
        if not catalog:
            return None

        target = self._rng.choice(list(catalog))

        others: List[str] = []
        for entry in catalog:
            if entry.name != target.name and entry.name not in others:
                others.append(entry.name)
        decoys = self._rng.sample(others, min(DECOY_COUNT, len(others)))

        options = decoys + [target.name]
        self._rng.shuffle(options)
        logger.debug("New quiz round: target=%s options=%s", target.name, options)
        return QuizRound(target=target, options=tuple(options))

    @staticmethod
    def is_correct(round_: QuizRound, answer: str) -> bool:
        return answer == round_.target.name
