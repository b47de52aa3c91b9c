"""Tests for the example scripts' helpers and end-to-end rendering."""

import math

import numpy as np


class TestOrbitHelpers:
    """Tests for examples.render_orbit helpers."""

    def test_readable_aspect_ratio(self):
        from examples.render_orbit import readable_aspect_ratio

        assert readable_aspect_ratio(1200, 675) == "1.7778"
        assert readable_aspect_ratio(800, 400) == "2"
        assert readable_aspect_ratio(300, 200) == "1.5"

    def test_orbit_starts_at_classic_viewpoint(self):
        from examples.render_orbit import orbit_position

        x, y, z = orbit_position(0, 300)
        assert math.isclose(x, 13.0, abs_tol=1e-9)
        assert y == 2.0
        assert math.isclose(z, 3.0, abs_tol=1e-9)

    def test_orbit_keeps_radius(self):
        from examples.render_orbit import ORBIT_RADIUS, orbit_position

        for frame in (0, 37, 150, 299):
            x, _, z = orbit_position(frame, 300)
            assert math.isclose(math.hypot(x, z), ORBIT_RADIUS)


class TestExampleRenders:
    """Small end-to-end runs of the example entry points."""

    def test_render_spheres(self, tmp_path):
        from examples.render_spheres import render_spheres
        from spheretrace.preview.export import load_png

        output = render_spheres(
            width=24,
            height=12,
            num_samples=1,
            max_depth=3,
            output_path=str(tmp_path / "spheres.png"),
            quiet=True,
        )
        assert load_png(output).shape == (12, 24, 3)

    def test_render_spheres_from_json(self, tmp_path):
        import json

        from examples.render_spheres import render_spheres
        from spheretrace.preview.export import load_png
        from spheretrace.scene.manager import Scene

        scene = Scene()
        scene.add_dielectric_sphere((0.0, 0.0, 0.0), 1.0)
        scene_file = tmp_path / "scene.json"
        scene_file.write_text(json.dumps(scene.to_dict()), encoding="utf-8")

        output = render_spheres(
            width=8,
            height=8,
            num_samples=1,
            scene_path=str(scene_file),
            output_path=str(tmp_path / "glass.png"),
            quiet=True,
        )
        assert load_png(output).dtype == np.uint8

    def test_render_orbit_frames(self, tmp_path):
        from examples.render_orbit import render_orbit

        out_dir = render_orbit(
            width=8,
            height=6,
            num_samples=1,
            num_frames=2,
            output_dir=str(tmp_path / "frames"),
            quiet=True,
        )
        assert sorted(p.name for p in out_dir.iterdir()) == ["frame_1.png", "frame_2.png"]
