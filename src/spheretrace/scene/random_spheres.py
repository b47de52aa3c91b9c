"""Random spheres showcase scene.

A large gray ground sphere covered by a grid of small randomly colored
spheres, plus three large feature spheres (glass, diffuse brown and polished
metal) in the middle. Looks best from look_from=(13, 2, 3) toward the origin
with a narrow field of view.

The small spheres are placed on a 22x22 grid, one per cell, jittered within
the cell. Material choice per small sphere:
    - 80% Lambertian with a random saturated color
    - 15% fuzzy metal with a bright albedo
    - 5% glass

Example:
    >>> from spheretrace.scene.random_spheres import create_random_spheres_scene
    >>> scene = create_random_spheres_scene(seed=42)
    >>> scene.upload()
"""

import colorsys
import math

import numpy as np

from spheretrace.scene.manager import Scene

# =============================================================================
# Scene Constants
# =============================================================================

GROUND_CENTER = (0.0, -1000.0, 0.0)
GROUND_RADIUS = 1000.0
GROUND_ALBEDO = (0.5, 0.5, 0.5)

# Grid cells span [-GRID_EXTENT, GRID_EXTENT) on both the x and z axes
GRID_EXTENT = 11
SMALL_RADIUS = 0.2

# Small spheres closer than this to the clearing are skipped
CLEARING_CENTER = (4.0, 0.2, 0.0)
CLEARING_RADIUS = 0.9

# Cumulative material probabilities for the small spheres
LAMBERTIAN_PROBABILITY = 0.8
METAL_PROBABILITY = 0.95

GLASS_IOR = 1.5


def random_color(rng: np.random.Generator) -> tuple[float, float, float]:
    """Draw a random, reasonably saturated color.

    The color is picked in HSL space with hue in [0, 360), saturation in
    [0.5, 1] and lightness in [0.2, 0.8], so it is never washed out, nearly
    black or nearly white.

    Args:
        rng: The NumPy generator to draw from.

    Returns:
        An RGB tuple with components in [0, 1].
    """
    hue = rng.uniform(0.0, 360.0)
    saturation = rng.uniform(0.5, 1.0)
    lightness = rng.uniform(0.2, 0.8)
    # colorsys takes hue as a fraction of a turn and orders the arguments H, L, S
    r, g, b = colorsys.hls_to_rgb(hue / 360.0, lightness, saturation)
    return (
        min(max(r, 0.0), 1.0),
        min(max(g, 0.0), 1.0),
        min(max(b, 0.0), 1.0),
    )


def create_random_spheres_scene(seed: int | None = None) -> Scene:
    """Create the random spheres scene.

    Args:
        seed: Seed for the NumPy generator that places and colors the small
            spheres. The same seed always produces the same scene; None
            draws fresh entropy.

    Returns:
        A Scene with the ground, the small spheres and three feature spheres.
    """
    rng = np.random.default_rng(seed)
    scene = Scene()

    scene.add_lambertian_sphere(GROUND_CENTER, GROUND_RADIUS, GROUND_ALBEDO)

    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            choose_mat = rng.random()
            center = (
                a + 0.9 * rng.random(),
                SMALL_RADIUS,
                b + 0.9 * rng.random(),
            )

            if math.dist(center, CLEARING_CENTER) <= CLEARING_RADIUS:
                continue

            if choose_mat < LAMBERTIAN_PROBABILITY:
                scene.add_lambertian_sphere(center, SMALL_RADIUS, random_color(rng))
            elif choose_mat < METAL_PROBABILITY:
                albedo = (
                    0.5 * rng.random() + 0.5,
                    0.5 * rng.random() + 0.5,
                    0.5 * rng.random() + 0.5,
                )
                fuzz = 0.5 * rng.random() + 0.5
                scene.add_metal_sphere(center, SMALL_RADIUS, albedo, fuzz=fuzz)
            else:
                scene.add_dielectric_sphere(center, SMALL_RADIUS, ior=GLASS_IOR)

    scene.add_dielectric_sphere((0.0, 1.0, 0.0), 1.0, ior=GLASS_IOR)
    scene.add_lambertian_sphere((-4.0, 1.0, 0.0), 1.0, (0.4, 0.2, 0.1))
    scene.add_metal_sphere((4.0, 1.0, 0.0), 1.0, (0.7, 0.6, 0.5), fuzz=0.0)

    return scene
