"""Seeded base class for sample contract generators."""

from __future__ import annotations

import random
from abc import ABC

from faker import Faker


class BaseGenerator(ABC):
    """Base class for sample data generators.

    Owns the Faker instance and seeds both Faker and the ``random``
    module, so a generator built with the same seed replays the same
    contracts.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_IN``; amounts are in rupees).
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_IN",
    ) -> None:
        self.seed = seed
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)

    @staticmethod
    def _amount(low: int, high: int, step: int = 1) -> float:
        """Random amount in ``[low, high]`` rounded down to a multiple of ``step``."""
        return float(random.randint(low, high) // step * step)
