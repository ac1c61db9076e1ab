import logging
from enum import Enum

import numpy as np

from settings import CHUNK_SIZE, GRASS_THRESHOLD, SAMPLE_RANGE, STONE_THRESHOLD
from voxel_coords import is_local

logger = logging.getLogger(__name__)


class BlockType(Enum):
    GRASS = "Grass"
    DIRT = "Dirt"
    STONE = "Stone"


class Chunk:
    """Sparse cubic block storage; a missing key is air."""

    def __init__(self, size=CHUNK_SIZE):
        if size <= 0:
            raise ValueError(f"chunk size must be positive, got {size}")
        self.size = size
        self.blocks = {}

    def _check_local(self, pos):
        if not is_local(pos, self.size):
            raise ValueError(f"local coordinate {pos} outside chunk of size {self.size}")

    def get_block(self, pos):
        return self.blocks.get(tuple(pos))

    def set_block(self, pos, block_type):
        self._check_local(pos)
        self.blocks[tuple(pos)] = block_type

    def remove_block(self, pos):
        return self.blocks.pop(tuple(pos), None) is not None

    def items(self):
        return self.blocks.items()

    def count(self, block_type=None):
        if block_type is None:
            return len(self.blocks)
        return sum(1 for t in self.blocks.values() if t == block_type)

    def __len__(self):
        return len(self.blocks)

    def __contains__(self, pos):
        return tuple(pos) in self.blocks


def generate_chunk(chunk_pos, rng, size=CHUNK_SIZE, grass_threshold=GRASS_THRESHOLD,
                   stone_threshold=STONE_THRESHOLD, sample_range=SAMPLE_RANGE):
    """
    Fill the chunk at chunk_pos with randomly placed grass and stone.

    One independent integer in [0, sample_range) is drawn per local
    coordinate: below grass_threshold gives grass, below stone_threshold
    gives stone, anything else stays air. The samples do not depend on
    chunk_pos; it only labels the chunk in the log.

    Args:
        chunk_pos: chunk coordinate the result will be stored at.
        rng: numpy Generator, e.g. np.random.default_rng(seed).
    """
    chunk = Chunk(size)
    samples = rng.integers(0, sample_range, size=(size, size, size))
    for x, y, z in np.ndindex(size, size, size):
        val = samples[x, y, z]
        if val < grass_threshold:
            chunk.blocks[(x, y, z)] = BlockType.GRASS
        elif val < stone_threshold:
            chunk.blocks[(x, y, z)] = BlockType.STONE
    logger.debug("Generated chunk %s of size %d with %d blocks", tuple(chunk_pos), size, len(chunk))
    return chunk
