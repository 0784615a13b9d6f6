"""Base generator class for demo data generators."""

from __future__ import annotations

import random
from abc import ABC

from faker import Faker


class BaseGenerator(ABC):
    """Faker-backed base for demo generators.

    Seeding fixes both the Faker instance and the ``random`` module, so a
    seeded scenario yields the same loans and payment history every run.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale for borrower names and phone numbers.
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
    ) -> None:
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)

    def new_id(self) -> str:
        """Seeded UUID string for loans and borrowers."""
        return self.fake.uuid4()

    def borrower(self) -> tuple[str, str]:
        """A made-up borrower ``(name, phone)``."""
        return self.fake.name(), self.fake.phone_number()
