"""
Settings
========
Central place for the constants the voxel core and the viewer share.

The chunk size and the generation thresholds have no single canonical
value, so every algorithm takes them as parameters and falls back to the
defaults below.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

# World layout
CHUNK_SIZE: int = 16
WORLD_EXTENT: Tuple[int, int, int] = (2, 1, 2)

# Chunk generation: one sample in [0, SAMPLE_RANGE) per local coordinate
SAMPLE_RANGE: int = 10
GRASS_THRESHOLD: int = 3
STONE_THRESHOLD: int = 4

# Picking
MAX_RAY_STEPS: int = 100

# Viewer
WINDOW_SIZE: Tuple[int, int] = (1600, 900)
FOV_DEGREES: float = 70.0
NEAR_PLANE: float = 0.1
FAR_PLANE: float = 1000.0

PROJECT_ROOT: Path = Path(__file__).resolve().parent
SHADER_DIR: Path = PROJECT_ROOT / "shaders"
ASSETS_DIR: Path = PROJECT_ROOT / "assets"
ATLAS_PATH: Path = ASSETS_DIR / "blockatlas.png"


@dataclass(frozen=True)
class WorldSettings:
    chunk_size: int = CHUNK_SIZE
    grass_threshold: int = GRASS_THRESHOLD
    stone_threshold: int = STONE_THRESHOLD
    sample_range: int = SAMPLE_RANGE
    extent: Tuple[int, int, int] = WORLD_EXTENT
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if not 0 <= self.grass_threshold <= self.stone_threshold <= self.sample_range:
            raise ValueError(
                "thresholds must satisfy 0 <= grass <= stone <= sample_range, got "
                f"{self.grass_threshold}, {self.stone_threshold}, {self.sample_range}"
            )
        if len(self.extent) != 3 or any(e < 0 for e in self.extent):
            raise ValueError(f"extent must be three non-negative ints, got {self.extent}")

    @classmethod
    def from_env(cls) -> "WorldSettings":
        """Build settings, letting VOXEL_SEED and VOXEL_CHUNK_SIZE override the defaults."""
        seed = os.environ.get("VOXEL_SEED")
        chunk_size = os.environ.get("VOXEL_CHUNK_SIZE")
        return cls(
            chunk_size=int(chunk_size) if chunk_size else CHUNK_SIZE,
            seed=int(seed) if seed else None,
        )
