import math

import glm
import pygame as pg

from settings import FAR_PLANE, FOV_DEGREES, NEAR_PLANE


class Player:
    """First-person camera: yaw/pitch look, free flight."""

    def __init__(self, position=(8.0, 20.0, -12.0), yaw=90.0, pitch=-30.0):
        self.position = glm.vec3(*position)
        self.yaw = yaw
        self.pitch = pitch
        self.speed = 10.0
        self.sensitivity = 0.1

    def get_direction(self):
        rad_yaw = math.radians(self.yaw)
        rad_pitch = math.radians(self.pitch)
        x = math.cos(rad_yaw) * math.cos(rad_pitch)
        y = math.sin(rad_pitch)
        z = math.sin(rad_yaw) * math.cos(rad_pitch)
        return glm.normalize(glm.vec3(x, y, z))

    def get_right(self):
        return glm.normalize(glm.cross(self.get_direction(), glm.vec3(0, 1, 0)))

    def get_view_matrix(self):
        return glm.lookAt(
            self.position,
            self.position + self.get_direction(),
            glm.vec3(0.0, 1.0, 0.0)
        )

    @staticmethod
    def get_projection_matrix(aspect, fov=FOV_DEGREES, near=NEAR_PLANE, far=FAR_PLANE):
        return glm.perspective(glm.radians(fov), aspect, near, far)

    def process_mouse(self, dx, dy):
        self.yaw += dx * self.sensitivity
        self.pitch -= dy * self.sensitivity
        self.pitch = max(-89.0, min(89.0, self.pitch))

    def process_keyboard(self, keys, dt):
        forward = self.get_direction()
        right = self.get_right()
        up = glm.vec3(0, 1, 0)
        if keys[pg.K_w]:
            self.position += forward * (self.speed * dt)
        if keys[pg.K_s]:
            self.position -= forward * (self.speed * dt)
        if keys[pg.K_a]:
            self.position -= right * (self.speed * dt)
        if keys[pg.K_d]:
            self.position += right * (self.speed * dt)
        if keys[pg.K_SPACE]:
            self.position += up * (self.speed * dt)
        if keys[pg.K_LSHIFT]:
            self.position -= up * (self.speed * dt)
