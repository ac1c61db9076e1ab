import logging

import moderngl
import numpy as np
import pygame
from pygame.locals import (DOUBLEBUF, K_ESCAPE, KEYDOWN, MOUSEBUTTONDOWN, MOUSEBUTTONUP,
                           MOUSEMOTION, OPENGL, QUIT)

from logging_config import setup_logging
from mesh_builder import build_meshes
from player import Player
from raycast import cast_mouse_ray
from settings import WINDOW_SIZE, WorldSettings
from shader_program import ShaderProgram
from voxel_chunk import BlockType
from world import World

logger = logging.getLogger(__name__)


class VoxelEngine:
    def __init__(self, width=WINDOW_SIZE[0], height=WINDOW_SIZE[1], settings=None):
        self.width = width
        self.height = height
        self.settings = settings or WorldSettings.from_env()
        self.init_pygame()
        self.init_opengl()
        self.shader_program = ShaderProgram(self.ctx)
        self.init_game_objects()

    def init_pygame(self):
        pygame.init()
        pygame.display.set_mode((self.width, self.height), DOUBLEBUF | OPENGL)
        self.clock = pygame.time.Clock()
        self.looking = False  # right button held: mouse motion turns the camera

    def init_opengl(self):
        self.ctx = moderngl.create_context()
        self.ctx.enable(moderngl.DEPTH_TEST)
        self.ctx.enable(moderngl.CULL_FACE)
        self.ctx.front_face = 'ccw'

    def init_game_objects(self):
        rng = np.random.default_rng(self.settings.seed)
        self.world = World(self.settings.chunk_size).generate(rng, self.settings)
        self.player = Player()
        self.gpu_batches = []
        self.built_generation = None
        self.looked_at_voxel = None
        self.rebuild_meshes()

    def rebuild_meshes(self):
        for gpu_batch in self.gpu_batches:
            gpu_batch.release()
        self.gpu_batches = [self.shader_program.create_batch(b) for b in build_meshes(self.world)]
        self.built_generation = self.world.generation

    def get_view_projection(self):
        view = self.player.get_view_matrix()
        proj = self.player.get_projection_matrix(self.width / self.height)
        return view, proj

    def pick(self, mouse_pos):
        view, proj = self.get_view_projection()
        return cast_mouse_ray(
            (self.width, self.height), mouse_pos, self.player.position, view, proj, self.world
        )

    def process_events(self, dt):
        for event in pygame.event.get():
            if event.type == QUIT or (event.type == KEYDOWN and event.key == K_ESCAPE):
                return False
            elif event.type == MOUSEMOTION and self.looking:
                dx, dy = event.rel
                self.player.process_mouse(dx, dy)
            elif event.type == MOUSEBUTTONDOWN:
                if event.button == 3:
                    self.looking = True
                    continue
                hit_voxel, hit_normal = self.pick(event.pos)
                if hit_voxel is None:
                    continue
                if event.button == 1:  # Left click: remove block
                    if self.world.remove_block(hit_voxel):
                        logger.info("Removed block at %s", hit_voxel)
                elif event.button == 2:  # Middle click: place stone against the struck face
                    new_pos = tuple(h + n for h, n in zip(hit_voxel, hit_normal))
                    self.world.set_block(new_pos, BlockType.STONE)
                    logger.info("Placed stone at %s", new_pos)
            elif event.type == MOUSEBUTTONUP and event.button == 3:
                self.looking = False
        keys = pygame.key.get_pressed()
        self.player.process_keyboard(keys, dt)
        return True

    def update(self, dt):
        view, proj = self.get_view_projection()
        mvp = np.array(proj * view, dtype='f4').transpose()
        self.shader_program.main_prog["mvp"].write(mvp.tobytes())

        if self.world.generation != self.built_generation:
            self.rebuild_meshes()

        self.looked_at_voxel, _ = self.pick(pygame.mouse.get_pos())

    def render(self):
        self.ctx.clear(0.2, 0.3, 0.4)
        self.shader_program.atlas.use(location=0)
        for gpu_batch in self.gpu_batches:
            gpu_batch.render()
        if self.looked_at_voxel is not None:
            self.ctx.depth_func = '<='
            self.shader_program.outline_prog["mvp"].write(
                self.shader_program.main_prog["mvp"].read()
            )
            self.shader_program.outline_prog["voxel_pos"].value = self.looked_at_voxel
            self.shader_program.outline_vao.render(moderngl.LINES)
            self.ctx.depth_func = '<'

    def display_fps(self):
        pygame.display.set_caption(
            "Voxel Picker - FPS: {:.2f} - Pos: {:.2f}, {:.2f}, {:.2f} - Block: {}".format(
                self.clock.get_fps(), self.player.position.x, self.player.position.y,
                self.player.position.z, self.looked_at_voxel
            )
        )

    def run(self):
        running = True
        while running:
            dt = self.clock.tick() / 1000.0
            running = self.process_events(dt)
            self.update(dt)
            self.render()
            self.display_fps()
            pygame.display.flip()
        for gpu_batch in self.gpu_batches:
            gpu_batch.release()
        pygame.quit()


def main():
    setup_logging()
    engine = VoxelEngine()
    engine.run()


if __name__ == "__main__":
    main()
