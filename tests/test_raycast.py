
import glm
import pytest

from raycast import pick_voxel, ray_voxel_traversal, screen_to_ndc, screen_to_world_ray
from voxel_chunk import BlockType, Chunk
from world import World


class CountingWorld(World):
    def __init__(self, chunk_size=3):
        super().__init__(chunk_size)
        self.lookups = []

    def lookup(self, world_pos):
        self.lookups.append(world_pos)
        return super().lookup(world_pos)


def _camera(position, target, width=800, height=600):
    view = glm.lookAt(glm.vec3(*position), glm.vec3(*target), glm.vec3(0, 1, 0))
    proj = glm.perspective(glm.radians(70.0), width / height, 0.1, 100.0)
    return view, proj


def test_screen_to_ndc_flips_y():
    assert screen_to_ndc((800, 600), (400, 300)) == (0.0, 0.0)
    assert screen_to_ndc((800, 600), (0, 0)) == (-1.0, 1.0)
    assert screen_to_ndc((800, 600), (800, 600)) == (1.0, -1.0)


def test_center_ray_matches_view_direction():
    view, proj = _camera((0, 0, 0), (0, 0, 1))
    direction = screen_to_world_ray((800, 600), (400, 300), view, proj)
    assert direction.z == pytest.approx(1.0)
    assert direction.x == pytest.approx(0.0, abs=1e-6)
    assert direction.y == pytest.approx(0.0, abs=1e-6)


def test_cursor_above_center_points_up():
    view, proj = _camera((0, 0, 0), (0, 0, 1))
    direction = screen_to_world_ray((800, 600), (400, 100), view, proj)
    assert direction.y > 0
    assert glm.length(direction) == pytest.approx(1.0)


@pytest.mark.parametrize("distance", [1, 2, 5, 17])
def test_axis_aligned_ray_hits_after_distance_steps(distance):
    world = CountingWorld(3)
    world.set_block((distance, 0, 0), BlockType.STONE)

    hit, normal = ray_voxel_traversal((0.5, 0.5, 0.5), (1.0, 0.0, 0.0), world)

    assert hit == (distance, 0, 0)
    assert normal == (-1, 0, 0)
    assert len(world.lookups) == distance
    assert world.lookups == [(i, 0, 0) for i in range(1, distance + 1)]


def test_negative_direction_steps_backwards():
    world = CountingWorld(3)
    world.set_block((0, -4, 0), BlockType.GRASS)
    hit, normal = ray_voxel_traversal((0.5, 0.5, 0.5), (0.0, -1.0, 0.0), world)
    assert hit == (0, -4, 0)
    assert normal == (0, 1, 0)
    assert len(world.lookups) == 4


def test_all_air_world_exhausts_step_budget():
    world = CountingWorld(3)
    hit, normal = ray_voxel_traversal((0.2, 0.3, 0.4), (0.3, -0.5, 0.8), world)
    assert hit is None and normal is None
    assert len(world.lookups) == 100


def test_custom_step_budget():
    world = CountingWorld(3)
    world.set_block((10, 0, 0), BlockType.STONE)
    hit, _ = ray_voxel_traversal((0.5, 0.5, 0.5), (1.0, 0.0, 0.0), world, max_steps=9)
    assert hit is None
    assert len(world.lookups) == 9


def test_zero_components_never_step():
    world = CountingWorld(3)
    ray_voxel_traversal((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), world, max_steps=20)
    assert all(x == 0 and y == 0 for x, y, _ in world.lookups)
    assert [z for _, _, z in world.lookups] == list(range(-1, -21, -1))


def test_origin_voxel_is_not_tested():
    world = CountingWorld(3)
    world.set_block((0, 0, 0), BlockType.STONE)
    world.set_block((0, 0, 3), BlockType.DIRT)
    hit, _ = ray_voxel_traversal((0.5, 0.5, 0.5), (0.0, 0.0, 1.0), world)
    assert hit == (0, 0, 3)


def test_diagonal_ray_visits_face_adjacent_voxels():
    world = CountingWorld(3)
    direction = glm.normalize(glm.vec3(1.0, 0.4, 0.0))
    ray_voxel_traversal((0.5, 0.5, 0.5), direction, world, max_steps=30)
    previous = (0, 0, 0)
    for pos in world.lookups:
        assert sum(abs(a - b) for a, b in zip(pos, previous)) == 1
        previous = pos


def test_zero_direction_is_rejected():
    with pytest.raises(ValueError):
        ray_voxel_traversal((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), World(3))


def test_pick_single_stone_block_from_camera():
    world = World(3)
    chunk = Chunk(3)
    chunk.set_block((1, 1, 1), BlockType.STONE)
    world.insert_chunk((0, 0, 0), chunk)

    camera = (1.0, 1.0, -5.0)
    view, proj = _camera(camera, (1.0, 1.0, 0.0))
    assert pick_voxel((800, 600), (400, 300), glm.vec3(*camera), view, proj, world) == (1, 1, 1)


def test_pick_misses_returns_none():
    world = World(3)
    world.set_block((1, 1, 1), BlockType.STONE)
    camera = (1.5, 1.5, -5.0)
    # Looking away from the block
    view, proj = _camera(camera, (1.5, 1.5, -10.0))
    assert pick_voxel((800, 600), (400, 300), camera, view, proj, world) is None


def test_pick_off_center_cursor():
    world = World(16)
    world.set_block((-3, 0, 10), BlockType.GRASS)
    camera = (0.5, 0.5, 0.5)
    view, proj = _camera(camera, (0.5, 0.5, 10.0))
    # Aim through the block's centre, projected with the same matrices
    clip = proj * view * glm.vec4(-2.5, 0.5, 10.5, 1.0)
    ndc_x, ndc_y = clip.x / clip.w, clip.y / clip.w
    mouse = ((ndc_x + 1.0) / 2.0 * 800, (1.0 - ndc_y) / 2.0 * 600)
    assert pick_voxel((800, 600), mouse, camera, view, proj, world) == (-3, 0, 10)
