import logging

import moderngl
import numpy as np
import pygame

from mesh_builder import ATLAS_TABLE, INSTANCE_FORMAT, VERTEX_FORMAT
from settings import ATLAS_PATH, SHADER_DIR

logger = logging.getLogger(__name__)

# Placeholder colours used when the atlas image is missing
PLACEHOLDER_COLORS = {
    "grass_top": (95, 159, 53, 255),
    "grass_side": (121, 134, 60, 255),
    "dirt": (134, 96, 67, 255),
    "stone": (125, 125, 125, 255),
}


class GpuBatch:
    """GPU buffers of one MeshBatch."""

    def __init__(self, vao, buffers, num_instances):
        self.vao = vao
        self.buffers = buffers
        self.num_instances = num_instances

    def render(self):
        self.vao.render(mode=moderngl.TRIANGLES, instances=self.num_instances)

    def release(self):
        self.vao.release()
        for buf in self.buffers:
            buf.release()


class ShaderProgram:
    def __init__(self, ctx: moderngl.Context):
        self.ctx = ctx
        self.main_prog = self._create_main_program()
        self.outline_prog = self._create_outline_program()
        self.atlas = self._create_atlas_texture()
        self._setup_outline_buffer()

    def _read_shader_file(self, name: str) -> str:
        with open(SHADER_DIR / name, 'r') as f:
            return f.read()

    def _create_main_program(self):
        prog = self.ctx.program(
            vertex_shader=self._read_shader_file('block.vert'),
            fragment_shader=self._read_shader_file('block.frag')
        )
        prog["atlas"].value = 0
        return prog

    def _create_outline_program(self):
        return self.ctx.program(
            vertex_shader=self._read_shader_file('outline.vert'),
            fragment_shader=self._read_shader_file('outline.frag')
        )

    def _create_atlas_texture(self):
        if ATLAS_PATH.exists():
            surface = pygame.image.load(str(ATLAS_PATH))
            size = surface.get_size()
            # Rows stay top-first; the mesh UVs already flip V
            data = pygame.image.tobytes(surface, "RGBA")
        else:
            logger.warning("Atlas image %s not found, using placeholder colours", ATLAS_PATH)
            pixels = make_placeholder_atlas()
            size = (pixels.shape[1], pixels.shape[0])
            data = pixels.tobytes()
        texture = self.ctx.texture(size, 4, data)
        texture.filter = (moderngl.NEAREST, moderngl.NEAREST)
        return texture

    def _setup_outline_buffer(self):
        outline_vertices = np.array([
            0, 0, 0, 1, 0, 0, 1, 1, 0, 0, 1, 0,
            0, 0, 1, 1, 0, 1, 1, 1, 1, 0, 1, 1,
        ], dtype='f4')
        outline_indices = np.array([
            0, 1, 1, 2, 2, 3, 3, 0,  # back
            4, 5, 5, 6, 6, 7, 7, 4,  # front
            0, 4, 1, 5, 2, 6, 3, 7,  # edges
        ], dtype='i4')
        outline_vbo = self.ctx.buffer(outline_vertices.tobytes())
        outline_ibo = self.ctx.buffer(outline_indices.tobytes())
        self.outline_vao = self.ctx.vertex_array(
            self.outline_prog,
            [(outline_vbo, '3f', 'in_position')],
            outline_ibo
        )

    def create_batch(self, batch):
        """Upload a MeshBatch: shared cube vertices and indices plus one offset per instance."""
        vbo = self.ctx.buffer(batch.vertices.astype('f4').tobytes())
        ibo = self.ctx.buffer(batch.indices.astype('i4').tobytes())
        instance_vbo = self.ctx.buffer(batch.instances.astype('f4').tobytes())
        vao = self.ctx.vertex_array(
            self.main_prog,
            [
                (vbo, VERTEX_FORMAT, "in_position", "in_texcoord"),
                (instance_vbo, INSTANCE_FORMAT, "in_offset"),
            ],
            ibo
        )
        return GpuBatch(vao, [vbo, ibo, instance_vbo], batch.num_instances)


def make_placeholder_atlas(size=256):
    """RGBA atlas with each face category's rectangle filled by a flat colour."""
    pixels = np.full((size, size, 4), (255, 0, 255, 255), dtype=np.uint8)
    for category, ((u_min, u_max), (v_min, v_max)) in ATLAS_TABLE.items():
        # Texture row r samples at v = r / size, and meshes sample at 1 - v_lookup
        row_start, row_end = int((1.0 - v_max) * size), int((1.0 - v_min) * size)
        col_start, col_end = int(u_min * size), int(u_max * size)
        pixels[row_start:row_end, col_start:col_end] = PLACEHOLDER_COLORS[category.value]
    return pixels
