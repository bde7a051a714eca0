import numpy as np
import pytest
from PIL import Image

from vcxengine.scene import BlendMode, LightType, ReflectionType
from vcxengine.scene_loader import load_complex_models, load_scene, parse_scene

TRIANGLE_OBJ = """\
v 0 0 0
v 1 0 0
v 0 1 0
vn 0 1 0
f 1//1 2//1 3//1
"""

COMPLEX_OBJ = """\
mtllib scene.mtl
v 0 0 0
v 1 0 0
v 0 1 0
usemtl red
f 1 2 3
"""

COMPLEX_MTL = """\
newmtl blue
Kd 0 0 1
newmtl red
Kd 1 0 0
Ks 0 0 0
Ns 128
d 1
"""

TOL = 1.0 / 255.0


@pytest.fixture
def assets(tmp_path):
    (tmp_path / "tri.obj").write_text(TRIANGLE_OBJ)
    (tmp_path / "complex.obj").write_text(COMPLEX_OBJ)
    (tmp_path / "scene.mtl").write_text(COMPLEX_MTL)
    return tmp_path


def test_empty_document_gives_defaults_without_cameras():
    scene = parse_scene(None, ".")
    assert scene.reflection is ReflectionType.EMPIRICAL
    assert np.allclose(scene.ambient_intensity, [0.1, 0.1, 0.1])
    assert scene.cameras == []
    assert scene.lights == [] and scene.models == [] and scene.materials == []


def test_reflection_and_ambient():
    scene = parse_scene({"Reflection": "PhysicalMetallic", "AmbientIntensity": [0.2, 0.3, 0.4]})
    assert scene.reflection is ReflectionType.PHYSICAL_METALLIC
    assert np.allclose(scene.ambient_intensity, [0.2, 0.3, 0.4])


def test_short_vector_fills_remaining_components_with_one():
    scene = parse_scene({"AmbientIntensity": [0.5]})
    assert np.allclose(scene.ambient_intensity, [0.5, 1.0, 1.0])


def test_too_long_vector_is_rejected():
    with pytest.raises(ValueError):
        parse_scene({"AmbientIntensity": [1, 2, 3, 4]})


def test_unknown_enum_is_rejected():
    with pytest.raises(ValueError):
        parse_scene({"Reflection": "Cartoon"})


def test_cameras_are_parsed():
    scene = parse_scene({"Cameras": [{"Fovy": 45, "Eye": [1, 2, 3]}, {}]})
    assert len(scene.cameras) == 2
    first, second = scene.cameras
    assert first.fovy == 45.0
    assert np.allclose(first.eye, [1, 2, 3])
    assert second.fovy == 60.0
    assert np.allclose(second.eye, [0, 0, 1])


def test_light_direction_is_normalized():
    scene = parse_scene({"Lights": [{"Type": "Spot", "Direction": [0, 0, 2], "CutOff": 0.5}]})
    light = scene.lights[0]
    assert light.type is LightType.SPOT
    assert np.allclose(light.direction, [0, 0, 1])
    assert light.cut_off == 0.5


def test_material_factors():
    scene = parse_scene(
        {
            "Materials": [
                {
                    "Blend": "Transparent",
                    "Diffuse": [1, 0, 0, 1],
                    "Specular": [0, 0, 0],
                    "Shininess": 256,
                }
            ]
        }
    )
    material = scene.materials[0]
    assert material.blend is BlendMode.TRANSPARENT
    assert material.albedo[0, 0] == pytest.approx((1.0, 0.0, 0.0, 1.0))
    assert material.meta_spec[0, 0] == pytest.approx((0.0, 0.0, 0.0, 1.0))
    assert material.height[0, 0] == 0.0


def test_material_defaults():
    material = parse_scene({"Materials": [{}]}).materials[0]
    assert material.albedo[0, 0] == pytest.approx((1.0, 1.0, 1.0, 1.0))
    assert material.meta_spec[0, 0] == pytest.approx((0.0, 0.0, 0.0, 0.0))


def test_height_map_is_loaded(tmp_path):
    Image.new("L", (3, 2), 255).save(tmp_path / "h.png")
    material = parse_scene({"Materials": [{"HeightMap": "h.png"}]}, tmp_path).materials[0]
    assert material.height.size == (3, 2)
    assert material.height[2, 1] == pytest.approx(1.0)


def test_model_transform_and_material_name(assets):
    document = {
        "Materials": [{"Name": "a"}, {"Name": "b"}],
        "Models": [{"Mesh": "tri.obj", "Material": "b", "Translation": [1, 0, 0], "Scale": [2, 2, 2]}],
    }
    scene = parse_scene(document, assets)
    model = scene.models[0]
    assert model.material_index == 1
    assert np.allclose(model.mesh.positions, [[1, 0, 0], [3, 0, 0], [1, 2, 0]])
    assert np.allclose(np.linalg.norm(model.mesh.normals, axis=1), 1.0)
    assert np.allclose(model.mesh.normals[0], [0, 1, 0])


def test_unknown_material_name_maps_to_zero_and_missing_mesh_is_skipped(assets):
    document = {
        "Materials": [{"Name": "a"}, {"Name": "b"}],
        "Models": [{"Material": "b"}, {"Mesh": "tri.obj", "Material": "nope"}],
    }
    scene = parse_scene(document, assets)
    assert len(scene.models) == 1
    assert scene.models[0].material_index == 0


def test_identity_rotation_keeps_positions(assets):
    document = {"Models": [{"Mesh": "tri.obj", "Rotation": [[1, 0, 0], [0, 1, 0], [0, 0, 1]]}]}
    scene = parse_scene(document, assets)
    assert np.allclose(scene.models[0].mesh.positions, [[0, 0, 0], [1, 0, 0], [0, 1, 0]])


def test_load_complex_models_keeps_only_used_materials(assets):
    materials, models = load_complex_models(assets / "complex.obj")
    assert len(materials) == 1 and len(models) == 1
    assert models[0].material_index == 0
    assert materials[0].blend is BlendMode.OPAQUE
    assert materials[0].albedo[0, 0] == pytest.approx((1.0, 0.0, 0.0, 1.0))
    assert materials[0].meta_spec[0, 0][3] == pytest.approx(0.5, abs=TOL)
    assert models[0].mesh.vertex_count == 3


def test_complex_model_indices_are_offset(assets):
    scene = parse_scene({"Materials": [{}], "ComplexModels": [{"Mesh": "complex.obj"}]}, assets)
    assert len(scene.materials) == 2
    assert scene.models[-1].material_index == 1


def test_load_complex_models_errors(assets):
    with pytest.raises(ValueError):
        load_complex_models(assets / "scene.mtl")
    with pytest.raises(FileNotFoundError):
        load_complex_models(assets / "missing.obj")


def test_skyboxes(tmp_path):
    names = [f"f{i}.png" for i in range(6)]
    for name in names:
        Image.new("RGB", (2, 1), (255, 0, 0)).save(tmp_path / name)
    scene = parse_scene({"Skyboxes": [names]}, tmp_path)
    images = scene.skyboxes[0].images
    assert len(images) == 6
    assert all(image.size == (2, 1) for image in images)
    assert images[5][1, 0] == pytest.approx((1.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        parse_scene({"Skyboxes": [names[:5]]}, tmp_path)


def test_load_scene_from_file(assets):
    (assets / "scene.yaml").write_text(
        "Reflection: PhysicalSpecular\n"
        "Lights:\n"
        "  - Type: Directional\n"
        "Models:\n"
        "  - Mesh: tri.obj\n"
    )
    scene = load_scene(assets / "scene.yaml")
    assert scene.reflection is ReflectionType.PHYSICAL_SPECULAR
    assert scene.lights[0].type is LightType.DIRECTIONAL
    assert scene.models[0].mesh.vertex_count == 3


def test_load_scene_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_scene(tmp_path / "absent.yaml")