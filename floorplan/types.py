from __future__ import annotations

# =============================================================================
# TILE-BASED COORDINATE SYSTEMS (Always integers)
# =============================================================================


TileCoord = int  # Always integer tile position

# Layout coordinates - absolute positions on the generated grid
WorldTileCoord = TileCoord  # Example: x=5, y=3
WorldTilePos = tuple[
    WorldTileCoord, WorldTileCoord
]  # Example: (5, 3) = tile 5,3 on the grid

# =============================================================================
# IDENTIFIERS
# =============================================================================

RoomId = int  # Index into MapLayout.rooms, assigned in partition tree order
CorridorId = int  # Index into MapLayout.corridors, assigned in carve order
NodeIndex = int  # Index into a PartitionTree arena; -1 means "no node"

# =============================================================================
# RANDOMNESS
# =============================================================================

# Seed accepted by the RNG layer: int or str for deterministic output,
# None for system entropy.
RandomSeed = int | str | None
