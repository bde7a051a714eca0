import numpy as np

from vcxengine.camera import Camera
from vcxengine.formats import R8, RGBA8
from vcxengine.mesh import FLOAT_MAX, FLOAT_MIN, SurfaceMesh
from vcxengine.scene import (
    BlendMode,
    Light,
    LightType,
    Material,
    Model,
    ReflectionType,
    Scene,
    Skybox,
)


def test_scene_defaults():
    scene = Scene()
    assert scene.reflection is ReflectionType.EMPIRICAL
    assert np.allclose(scene.ambient_intensity, [0.1, 0.1, 0.1])
    assert len(scene.cameras) == 1
    assert scene.cameras[0].fovy == Camera().fovy
    assert scene.lights == [] and scene.models == []


def test_light_defaults():
    light = Light()
    assert light.type is LightType.POINT
    assert np.allclose(light.intensity, [1, 1, 1])
    assert np.allclose(light.direction, [1, 0, 0])
    assert light.cut_off == 0.0


def test_enum_values_match_scene_names():
    assert LightType("Directional") is LightType.DIRECTIONAL
    assert BlendMode("Transparent") is BlendMode.TRANSPARENT
    assert ReflectionType("PhysicalMetallic") is ReflectionType.PHYSICAL_METALLIC


def test_material_textures_are_single_texel():
    material = Material()
    assert material.albedo.size == (1, 1)
    assert material.albedo.format == RGBA8
    assert material.height.format == R8
    assert material.meta_spec.size == (1, 1)


def test_material_instances_do_not_share_textures():
    a, b = Material(), Material()
    a.albedo.fill((1, 1, 1, 1))
    assert b.albedo[0, 0] == (0.0, 0.0, 0.0, 0.0)


def test_model_default_material_index():
    model = Model()
    assert model.material_index == 0
    assert model.mesh.vertex_count == 0


def test_skybox_positions_form_a_unit_cube():
    data = Skybox.POSITION_DATA
    assert data.shape == (36, 3)
    assert np.all(np.abs(data) == 1.0)
    assert len(Skybox().images) == 6


def test_bounding_box_covers_all_models():
    a = SurfaceMesh(positions=[[1, 2, 3], [2, 3, 4]])
    b = SurfaceMesh(positions=[[0.5, 5, 3.5], [1.5, 2.5, 6]])
    scene = Scene(models=[Model(a), Model(b)])
    lo, hi = scene.bounding_box()
    every = np.vstack([a.positions, b.positions])
    assert np.allclose(lo, every.min(axis=0))
    assert np.allclose(hi, every.max(axis=0))


def test_bounding_box_of_empty_scene():
    lo, hi = Scene().bounding_box()
    assert [float(v) for v in lo] == [FLOAT_MAX] * 3
    assert [float(v) for v in hi] == [FLOAT_MIN] * 3