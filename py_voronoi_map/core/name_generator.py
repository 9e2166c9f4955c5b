"""
Settlement name generation from word pairs.

A name is a random prefix word, joined with a random suffix word some of
the time: "Ash", "Ashford", "Stonehaven". Word pools are plain
comma-separated lists so they can be swapped per map.
"""

from __future__ import annotations

from typing import List, Optional, Set

import structlog
from pydantic import BaseModel, Field

from .random_source import RandomSource

logger = structlog.get_logger()

DEFAULT_PREFIXES = (
    "Ash,Bright,Cold,Elder,Fair,Frost,Glen,Gold,Green,Grey,High,Iron,Kings,"
    "Lake,Long,Mill,North,Oak,Raven,Red,Rock,Salt,Shadow,Silver,Stone,"
    "Storm,Sun,Thorn,West,White,Wind,Wolf"
)
DEFAULT_SUFFIXES = (
    "bridge,brook,burg,dale,fall,field,ford,gate,hall,haven,hold,hollow,"
    "keep,marsh,mere,moor,port,reach,ridge,shire,stead,ton,vale,watch,wick,wood"
)


class NameParts(BaseModel):
    """Word pools for settlement names."""

    prefixes: str = Field(default=DEFAULT_PREFIXES, description="Prefix words (comma-separated)")
    suffixes: str = Field(default=DEFAULT_SUFFIXES, description="Suffix words (comma-separated)")
    separator: str = Field(default="", description="Text placed between prefix and suffix")

    def get_prefixes(self) -> List[str]:
        return [word.strip() for word in self.prefixes.split(",") if word.strip()]

    def get_suffixes(self) -> List[str]:
        return [word.strip() for word in self.suffixes.split(",") if word.strip()]

    @property
    def combinations(self) -> int:
        """Number of distinct names the pools can produce."""
        prefixes = len(self.get_prefixes())
        return prefixes + prefixes * len(self.get_suffixes())


class NameGenerator:
    """Combinatorial prefix/suffix name generator."""

    def __init__(
        self,
        rng: RandomSource,
        parts: Optional[NameParts] = None,
        suffix_chance: float = 0.5,
    ):
        self.rng = rng
        self.parts = parts or NameParts()
        self.suffix_chance = suffix_chance
        self._prefixes = self.parts.get_prefixes()
        self._suffixes = self.parts.get_suffixes()
        if not self._prefixes:
            raise ValueError("NameParts must contain at least one prefix")

    def generate(self) -> str:
        """Generate one name."""
        name = self.rng.choice(self._prefixes)
        if self._suffixes and self.rng.random() < self.suffix_chance:
            name = f"{name}{self.parts.separator}{self.rng.choice(self._suffixes)}"
        return name

    def generate_unique(self, count: int, max_attempts: int = 20) -> List[str]:
        """Generate ``count`` names, avoiding repeats while the pools allow.

        Args:
            count: Number of names to generate
            max_attempts: Draws per name before a repeat is accepted

        Returns:
            List of generated names
        """
        names: List[str] = []
        used: Set[str] = set()
        for _ in range(count):
            name = self.generate()
            attempts = 1
            while name in used and attempts < max_attempts:
                name = self.generate()
                attempts += 1
            if name in used:
                logger.debug("Accepting repeated name", name=name, attempts=attempts)
            used.add(name)
            names.append(name)
        return names
