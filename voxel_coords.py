import math
from typing import Sequence, Tuple

from settings import CHUNK_SIZE

Coord = Tuple[int, int, int]


def global_to_chunk(pos: Sequence[float], chunk_size: int = CHUNK_SIZE) -> Tuple[Coord, Coord]:
    """Split a global block coordinate into (chunk coordinate, local coordinate).

    Components are floored first and // and % floor as well, so (-1, -1, -1)
    and (-0.5, 0, 0) both land in chunk -1 on x, never in chunk 0 with a
    negative local.
    """
    cx, lx = divmod(math.floor(pos[0]), chunk_size)
    cy, ly = divmod(math.floor(pos[1]), chunk_size)
    cz, lz = divmod(math.floor(pos[2]), chunk_size)
    return (cx, cy, cz), (lx, ly, lz)


def chunk_to_global(chunk_pos: Sequence[int], local_pos: Sequence[int],
                    chunk_size: int = CHUNK_SIZE) -> Coord:
    return (
        chunk_pos[0] * chunk_size + local_pos[0],
        chunk_pos[1] * chunk_size + local_pos[1],
        chunk_pos[2] * chunk_size + local_pos[2],
    )


def is_local(local_pos: Sequence[int], chunk_size: int = CHUNK_SIZE) -> bool:
    return all(0 <= v < chunk_size for v in local_pos)


def floor_coord(point: Sequence[float]) -> Coord:
    """Voxel containing a float point; a point on a boundary belongs to the voxel above it."""
    return (math.floor(point[0]), math.floor(point[1]), math.floor(point[2]))
