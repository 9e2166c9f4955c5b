"""
Settlement placement.

Process:
1. place() - pick a random number of distinct cells with a centroid and
   name a settlement on each
2. validate_settlements() - drop settlements whose cell was classified as
   ocean in the main terrain pass
3. compute_ownership() - assign every cell to its nearest settlement
"""

from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog
from pydantic import BaseModel, Field
from sklearn.neighbors import KDTree

from ..config.map_config import SettlementOptions
from .name_generator import NameGenerator
from .random_source import RandomSource
from .terrain import TerrainType

logger = structlog.get_logger()


class Settlement(BaseModel):
    """Data structure for a named settlement."""

    id: int = Field(description="Unique settlement identifier")
    cell_id: int = Field(description="Seed index of the cell the settlement sits on")
    x: float = Field(description="X coordinate")
    y: float = Field(description="Y coordinate")
    name: str = Field(default="", description="Settlement name")

    @property
    def site(self) -> np.ndarray:
        return np.array([self.x, self.y])


class SettlementPlacer:
    """Chooses settlement sites among cell centroids."""

    def __init__(
        self,
        rng: RandomSource,
        options: Optional[SettlementOptions] = None,
        name_generator: Optional[NameGenerator] = None,
    ):
        self.rng = rng
        self.options = options or SettlementOptions()
        self.name_generator = name_generator or NameGenerator(
            rng, suffix_chance=self.options.suffix_chance
        )

    def place(self, centroids: Sequence[Optional[np.ndarray]]) -> List[Settlement]:
        """
        Place settlements on distinct cells.

        Cells without a centroid are never picked. When the pool holds fewer
        cells than the drawn target, every cell in the pool gets a settlement.

        Args:
            centroids: Per-seed centroids, None for empty cells

        Returns:
            Placed settlements, not yet checked against terrain
        """
        remaining = [i for i, centroid in enumerate(centroids) if centroid is not None]
        target = self.rng.randint(self.options.min_count, self.options.max_count)

        chosen: List[int] = []
        while len(chosen) < target and remaining:
            slot = int(self.rng.random() * len(remaining))
            remaining[slot], remaining[-1] = remaining[-1], remaining[slot]
            chosen.append(remaining.pop())

        names = self.name_generator.generate_unique(len(chosen))
        settlements = [
            Settlement(
                id=settlement_id,
                cell_id=cell_id,
                x=float(centroids[cell_id][0]),
                y=float(centroids[cell_id][1]),
                name=name,
            )
            for settlement_id, (cell_id, name) in enumerate(zip(chosen, names))
        ]

        logger.info("Settlements placed", target=target, placed=len(settlements))
        return settlements


def validate_settlements(
    settlements: Sequence[Settlement],
    terrain_by_cell: Dict[int, TerrainType],
) -> List[Settlement]:
    """
    Keep settlements that sit on land.

    Uses the terrain computed for each cell in the main pass, so a
    settlement is accepted exactly when its cell is drawn as land.
    """
    valid = [
        settlement for settlement in settlements
        if terrain_by_cell.get(settlement.cell_id, TerrainType.OCEAN) != TerrainType.OCEAN
    ]
    rejected = len(settlements) - len(valid)
    if rejected:
        logger.info("Settlements rejected on ocean cells", rejected=rejected, kept=len(valid))
    return valid


def compute_ownership(
    centroids: Sequence[Optional[np.ndarray]],
    settlements: Sequence[Settlement],
) -> np.ndarray:
    """
    Nearest settlement for every cell.

    Args:
        centroids: Per-seed centroids, None for empty cells
        settlements: Settlements to assign cells to

    Returns:
        Array with the position in ``settlements`` of the nearest settlement
        for each seed index; -1 for cells without a centroid or when there
        are no settlements
    """
    owners = np.full(len(centroids), -1, dtype=np.int64)
    valid = [i for i, centroid in enumerate(centroids) if centroid is not None]
    if not settlements or not valid:
        return owners

    sites = np.array([[s.x, s.y] for s in settlements], dtype=np.float64)
    tree = KDTree(sites)
    query = np.array([centroids[i] for i in valid], dtype=np.float64)
    _, nearest = tree.query(query, k=1)
    owners[valid] = nearest[:, 0]
    return owners
