import logging
from dataclasses import dataclass
from enum import Enum, IntEnum

import glm
import numpy as np

from voxel_chunk import BlockType

logger = logging.getLogger(__name__)


class FaceCategory(Enum):
    GRASS_TOP = "grass_top"
    GRASS_SIDE = "grass_side"
    DIRT = "dirt"
    STONE = "stone"


class UV(IntEnum):
    MIN = 0
    MAX = 1


# Normalized atlas rectangles: category -> ((u_min, u_max), (v_min, v_max))
ATLAS_TABLE = {
    FaceCategory.GRASS_TOP: ((0.125, 0.1875), (0.375, 0.4375)),
    FaceCategory.GRASS_SIDE: ((0.1875, 0.25), (0.9375, 1.0)),
    FaceCategory.DIRT: ((0.125, 0.1875), (0.9375, 1.0)),
    FaceCategory.STONE: ((0.0, 0.0625), (0.875, 0.9375)),
}
assert set(ATLAS_TABLE) == set(FaceCategory), "atlas table must cover every face category"

# Which atlas category each face slot of a block type uses
FACE_CATEGORIES = {
    BlockType.GRASS: {"top": FaceCategory.GRASS_TOP, "bottom": FaceCategory.DIRT, "side": FaceCategory.GRASS_SIDE},
    BlockType.DIRT: {"top": FaceCategory.DIRT, "bottom": FaceCategory.DIRT, "side": FaceCategory.DIRT},
    BlockType.STONE: {"top": FaceCategory.STONE, "bottom": FaceCategory.STONE, "side": FaceCategory.STONE},
}

# Four corners per face, counter-clockwise seen from outside, starting bottom-left of the texture
CUBE_FACES = [
    ("front", "side", [(0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1)]),
    ("back", "side", [(1, 0, 0), (0, 0, 0), (0, 1, 0), (1, 1, 0)]),
    ("left", "side", [(0, 0, 0), (0, 0, 1), (0, 1, 1), (0, 1, 0)]),
    ("right", "side", [(1, 0, 1), (1, 0, 0), (1, 1, 0), (1, 1, 1)]),
    ("top", "top", [(0, 1, 1), (1, 1, 1), (1, 1, 0), (0, 1, 0)]),
    ("bottom", "bottom", [(0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1)]),
]
CORNER_ROLES = [(UV.MIN, UV.MIN), (UV.MAX, UV.MIN), (UV.MAX, UV.MAX), (UV.MIN, UV.MAX)]

CUBE_INDICES = np.array([
    0, 1, 2, 2, 3, 0,        # front
    4, 5, 6, 6, 7, 4,        # back
    8, 9, 10, 10, 11, 8,     # left
    12, 13, 14, 14, 15, 12,  # right
    16, 17, 18, 18, 19, 16,  # top
    20, 21, 22, 22, 23, 20,  # bottom
], dtype='i4')

VERTEX_FORMAT = "3f 2f"
INSTANCE_FORMAT = "3f/i"


def atlas_uv(category, u_role, v_role):
    """Texture coordinate for one corner of a face, with V flipped for the top-left atlas origin."""
    u_range, v_range = ATLAS_TABLE[category]
    return u_range[u_role], 1.0 - v_range[v_role]


def create_cube_vertices(block_type):
    """
    Unit cube for one block type as a (24, 5) float32 array of x, y, z, u, v.

    An unknown block type yields an empty array instead of raising.
    """
    categories = FACE_CATEGORIES.get(block_type)
    if categories is None:
        logger.warning("No face categories for block type %r, emitting no geometry", block_type)
        return np.zeros((0, 5), dtype='f4')

    verts = []
    for _name, slot, corners in CUBE_FACES:
        category = categories[slot]
        for (vx, vy, vz), (u_role, v_role) in zip(corners, CORNER_ROLES):
            u, v = atlas_uv(category, u_role, v_role)
            verts.append([vx, vy, vz, u, v])
    return np.array(verts, dtype='f4')


def build_instances(world, block_type):
    """Translations (global coordinate as float) of every block of block_type, shape (N, 3)."""
    positions = [pos for pos, t in world.iter_blocks() if t == block_type]
    return np.array(positions, dtype='f4').reshape(-1, 3)


@dataclass
class MeshBatch:
    """Shared cube geometry for one block type plus one translation per instance."""
    block_type: BlockType
    vertices: np.ndarray
    indices: np.ndarray
    instances: np.ndarray

    @property
    def num_elements(self):
        return len(self.indices)

    @property
    def num_instances(self):
        return len(self.instances)

    def instance_matrices(self):
        return [glm.translate(glm.mat4(1.0), glm.vec3(*pos)) for pos in self.instances]


def build_mesh_batch(world, block_type):
    """MeshBatch for block_type, or None when the world holds none of it or it has no geometry."""
    vertices = create_cube_vertices(block_type)
    if len(vertices) == 0:
        return None
    instances = build_instances(world, block_type)
    if len(instances) == 0:
        return None
    return MeshBatch(block_type, vertices, CUBE_INDICES.copy(), instances)


def build_meshes(world):
    """One MeshBatch per block type present in the world."""
    unknown = {t for _, t in world.iter_blocks() if not isinstance(t, BlockType)}
    batches = []
    for block_type in list(BlockType) + sorted(unknown, key=repr):
        batch = build_mesh_batch(world, block_type)
        if batch is not None:
            batches.append(batch)
    logger.info(
        "Built %d mesh batches (%s)",
        len(batches),
        ", ".join(f"{b.block_type.value}: {b.num_instances}" for b in batches),
    )
    return batches
