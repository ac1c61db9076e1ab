import itertools
import logging

from settings import CHUNK_SIZE, WorldSettings
from voxel_chunk import Chunk, generate_chunk
from voxel_coords import chunk_to_global, global_to_chunk

logger = logging.getLogger(__name__)


class World:
    """
    Sparse map of chunk coordinate -> Chunk.

    Chunks that were never inserted read as air. Every mutation bumps
    `generation` so anything derived from the world (meshes) can tell it
    is stale.
    """

    def __init__(self, chunk_size=CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size
        self.chunks = {}
        self.generation = 0

    def insert_chunk(self, chunk_pos, chunk):
        """Store a chunk, replacing whatever was at chunk_pos."""
        if chunk.size != self.chunk_size:
            raise ValueError(
                f"chunk of size {chunk.size} does not fit a world of chunk size {self.chunk_size}"
            )
        self.chunks[tuple(chunk_pos)] = chunk
        self.generation += 1

    def get_chunk(self, chunk_pos):
        return self.chunks.get(tuple(chunk_pos))

    def lookup(self, world_pos):
        """Block type at a global coordinate, or None for air (including ungenerated chunks)."""
        chunk_pos, local_pos = global_to_chunk(world_pos, self.chunk_size)
        chunk = self.chunks.get(chunk_pos)
        if chunk is None:
            return None
        return chunk.get_block(local_pos)

    def set_block(self, world_pos, block_type):
        chunk_pos, local_pos = global_to_chunk(world_pos, self.chunk_size)
        chunk = self.chunks.get(chunk_pos)
        if chunk is None:
            chunk = Chunk(self.chunk_size)
            self.chunks[chunk_pos] = chunk
        chunk.set_block(local_pos, block_type)
        self.generation += 1

    def remove_block(self, world_pos):
        """Remove the block at world_pos; returns False if it was already air."""
        chunk_pos, local_pos = global_to_chunk(world_pos, self.chunk_size)
        chunk = self.chunks.get(chunk_pos)
        if chunk is None or not chunk.remove_block(local_pos):
            return False
        self.generation += 1
        return True

    def iter_blocks(self):
        """Yield (global coordinate, block type) for every stored block."""
        for chunk_pos, chunk in self.chunks.items():
            for local_pos, block_type in chunk.items():
                yield chunk_to_global(chunk_pos, local_pos, self.chunk_size), block_type

    def block_count(self, block_type=None):
        return sum(chunk.count(block_type) for chunk in self.chunks.values())

    def generate(self, rng, settings=None):
        """Fill the settings.extent grid of chunks, starting at chunk (0, 0, 0)."""
        settings = settings or WorldSettings(chunk_size=self.chunk_size)
        if settings.chunk_size != self.chunk_size:
            raise ValueError("settings.chunk_size does not match the world")
        ex, ey, ez = settings.extent
        for chunk_pos in itertools.product(range(ex), range(ey), range(ez)):
            chunk = generate_chunk(
                chunk_pos,
                rng,
                size=self.chunk_size,
                grass_threshold=settings.grass_threshold,
                stone_threshold=settings.stone_threshold,
                sample_range=settings.sample_range,
            )
            self.insert_chunk(chunk_pos, chunk)
        logger.info("Generated %d chunks with %d blocks", len(self.chunks), self.block_count())
        return self
