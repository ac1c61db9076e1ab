import logging
import math

import glm

from settings import MAX_RAY_STEPS
from voxel_coords import floor_coord

logger = logging.getLogger(__name__)


def screen_to_ndc(window_size, mouse_pos):
    """Pixel position (origin top-left, y down) to normalized device coordinates (y up)."""
    width, height = window_size
    ndc_x = 2.0 * mouse_pos[0] / width - 1.0
    ndc_y = 1.0 - 2.0 * mouse_pos[1] / height
    return ndc_x, ndc_y


def screen_to_world_ray(window_size, mouse_pos, view, projection):
    """Unit world-space direction of the ray under the mouse cursor."""
    ndc_x, ndc_y = screen_to_ndc(window_size, mouse_pos)
    ray_clip = glm.vec4(ndc_x, ndc_y, -1.0, 1.0)

    ray_eye = glm.inverse(projection) * ray_clip
    # Point on the near plane turned into a forward direction
    ray_eye = glm.vec4(ray_eye.x, ray_eye.y, -1.0, 0.0)

    ray_world = glm.vec3(glm.inverse(view) * ray_eye)
    return glm.normalize(ray_world)


def _axis_setup(origin, voxel, direction):
    """Step sign, initial t_max and t_delta along one axis."""
    step = 1 if direction >= 0 else -1
    if direction == 0:
        return step, math.inf, math.inf
    t_delta = 1.0 / abs(direction)
    if step > 0:
        t_max = (voxel + 1 - origin) * t_delta
    else:
        t_max = (origin - voxel) * t_delta
    return step, t_max, t_delta


def ray_voxel_traversal(ray_origin, ray_direction, world, max_steps=MAX_RAY_STEPS):
    """
    Walk the voxel grid along a ray (Amanatides & Woo) until a solid block is entered.

    The voxel containing the origin is not tested. Each iteration advances
    into the neighbouring voxel across the nearest boundary and asks
    `world.lookup` about it, for at most max_steps iterations.

    Returns:
        (hit, normal): global coordinate of the struck voxel and the outward
        normal of the face the ray entered through, or (None, None).
    """
    direction = [float(c) for c in ray_direction]
    if not any(direction):
        raise ValueError("ray direction must be non-zero")
    origin = [float(c) for c in ray_origin]
    voxel = list(floor_coord(origin))

    steps, t_max, t_delta = [], [], []
    for axis in range(3):
        s, tm, td = _axis_setup(origin[axis], voxel[axis], direction[axis])
        steps.append(s)
        t_max.append(tm)
        t_delta.append(td)

    for _ in range(max_steps):
        axis = min(range(3), key=lambda a: t_max[a])
        voxel[axis] += steps[axis]
        t_max[axis] += t_delta[axis]

        pos = tuple(voxel)
        if world.lookup(pos) is not None:
            normal = [0, 0, 0]
            normal[axis] = -steps[axis]
            return pos, tuple(normal)

    return None, None


def cast_mouse_ray(window_size, mouse_pos, camera_position, view, projection, world,
                   max_steps=MAX_RAY_STEPS):
    """(hit, normal) for the first solid voxel under the mouse cursor."""
    direction = screen_to_world_ray(window_size, mouse_pos, view, projection)
    hit, normal = ray_voxel_traversal(camera_position, direction, world, max_steps)
    logger.debug("Mouse ray from %s towards %s hit %s", tuple(camera_position), tuple(direction), hit)
    return hit, normal


def pick_voxel(window_size, mouse_pos, camera_position, view, projection, world,
               max_steps=MAX_RAY_STEPS):
    """Global coordinate of the first solid voxel under the mouse cursor, or None."""
    hit, _ = cast_mouse_ray(window_size, mouse_pos, camera_position, view, projection, world, max_steps)
    return hit
