#!/usr/bin/env python3
"""
Simple demo script showing island map generation.
"""

import numpy as np
from py_voronoi_map import MapConfig, SeedMode, configure_logging, generate_map
from py_voronoi_map.core import TerrainType


def main():
    """Demonstrate island generation for each seed mode."""
    configure_logging("WARNING")

    print("Voronoi Island Generation Demo")
    print("=" * 40)

    for mode in SeedMode:
        config = MapConfig(
            seed_count=2000,
            width=800,
            height=600,
            seed_mode=mode,
            poisson_radius=10,
            lloyd_iterations=2,
            seed="demo123",
        )

        print(f"\n{mode.value.upper()} seeds:")
        print("-" * 30)
        result = generate_map(config)

        print(f"  Seeds: {len(result.seeds)}")
        print(f"  Cells: {result.cell_count}")

        # Terrain distribution
        counts = {kind: 0 for kind in TerrainType}
        for kind in result.terrain_with_settlements().values():
            counts[kind] += 1
        largest = max(counts.values()) or 1
        for kind, count in counts.items():
            bar = '#' * int(count / largest * 20)
            print(f"    {kind.value:>9}: {bar} ({count})")

        elevations = np.array(list(result.elevation_by_cell.values()))
        if len(elevations):
            print(f"  Elevation range: {elevations.min():.2f}-{elevations.max():.2f}")

        print("  Settlements:")
        for position, settlement in enumerate(result.settlements):
            owned = int(np.sum(result.ownership == position))
            print(f"    - {settlement.name} at ({settlement.x:.0f}, {settlement.y:.0f}), "
                  f"{owned} cells")


if __name__ == "__main__":
    main()
