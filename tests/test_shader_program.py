import numpy as np

from mesh_builder import ATLAS_TABLE, FaceCategory
from shader_program import PLACEHOLDER_COLORS, make_placeholder_atlas


def test_placeholder_atlas_colours_each_category_where_meshes_sample():
    size = 256
    pixels = make_placeholder_atlas(size)
    assert pixels.shape == (size, size, 4)
    for category in FaceCategory:
        (u_min, u_max), (v_min, v_max) = ATLAS_TABLE[category]
        # Centre of the rectangle in flipped texture space
        u = (u_min + u_max) / 2
        v = 1.0 - (v_min + v_max) / 2
        row, col = int(v * size), int(u * size)
        assert tuple(pixels[row, col]) == PLACEHOLDER_COLORS[category.value]
