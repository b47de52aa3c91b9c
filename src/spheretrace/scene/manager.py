"""Host-side scene builder.

The Scene class is an ordered collection of sphere definitions. It is
assembled in Python, serialized to and from plain dictionaries, and copied
into the Taichi scene storage by ``upload()`` right before a render. The
storage is read-only while kernels run.

Example:
    >>> from spheretrace.scene.manager import Scene
    >>> from spheretrace.materials import make_dielectric, make_lambertian
    >>> scene = Scene()
    >>> scene.add_lambertian_sphere((0, -100.5, -1), 100.0, albedo=(0.8, 0.8, 0.0))
    >>> scene.add_sphere((0, 0, -1), 0.5, make_dielectric(1.5))
    >>> len(scene)
    2
"""

from dataclasses import dataclass, field
from typing import Any

from spheretrace.materials.base import (
    MaterialInfo,
    make_dielectric,
    make_lambertian,
    make_metal,
    material_from_dict,
)
from spheretrace.scene.intersection import MAX_SPHERES, add_sphere, clear_scene


@dataclass(frozen=True)
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere.
        material: The material of the sphere.
    """

    center: tuple[float, float, float]
    radius: float
    material: MaterialInfo


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        spheres: List of sphere configurations, each with center, radius
            and an inline material dictionary.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)


class Scene:
    """Ordered collection of spheres.

    Spheres are validated when added and kept in insertion order, which is
    also the order in which the nearest-hit query tests them.

    Attributes:
        spheres: List of SphereInfo for all spheres in the scene.

    Example:
        >>> scene = Scene()
        >>> scene.add_lambertian_sphere((0, 0, -1), 0.5, (0.8, 0.1, 0.1))
        >>> scene.add_metal_sphere((1, 0, -1), 0.5, (0.8, 0.6, 0.2), fuzz=0.3)
        >>> scene.add_dielectric_sphere((-1, 0, -1), 0.5, ior=1.5)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereInfo] = []

    def __len__(self) -> int:
        return len(self.spheres)

    def __repr__(self) -> str:
        return f"Scene(spheres={len(self.spheres)})"

    def clear(self) -> None:
        """Remove all spheres."""
        self.spheres.clear()

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: MaterialInfo,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material: The sphere's material, from one of the make_* factories.

        Returns:
            The index of the added sphere.

        Raises:
            ValueError: If the radius is not positive or center is not 3-D.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        if len(center) != 3:
            raise ValueError(f"Sphere center must have 3 components, got {len(center)}")
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        if len(self.spheres) >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

        info = SphereInfo(
            center=(float(center[0]), float(center[1]), float(center[2])),
            radius=float(radius),
            material=material,
        )
        self.spheres.append(info)
        return len(self.spheres) - 1

    def add_lambertian_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
    ) -> int:
        """Add a sphere with a new Lambertian material.

        Returns:
            The index of the added sphere.
        """
        return self.add_sphere(center, radius, make_lambertian(albedo))

    def add_metal_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
        fuzz: float = 0.0,
    ) -> int:
        """Add a sphere with a new metal material.

        Returns:
            The index of the added sphere.
        """
        return self.add_sphere(center, radius, make_metal(albedo, fuzz))

    def add_dielectric_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        ior: float = 1.5,
        tint: tuple[float, float, float] = (1.0, 1.0, 1.0),
    ) -> int:
        """Add a sphere with a new dielectric material.

        Returns:
            The index of the added sphere.
        """
        return self.add_sphere(center, radius, make_dielectric(ior, tint))

    # =========================================================================
    # GPU Upload
    # =========================================================================

    def upload(self) -> None:
        """Copy the scene into the Taichi scene storage.

        Replaces whatever the storage held before. Must be called from
        Python (not from within a Taichi kernel).
        """
        clear_scene()
        for sphere in self.spheres:
            add_sphere(sphere.center, sphere.radius, sphere.material)

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()
        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material": sphere.material.to_dict(),
                }
            )
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        for sphere_config in config.spheres:
            center_list = sphere_config.get("center", [0.0, 0.0, 0.0])
            center: tuple[float, float, float] = (
                center_list[0],
                center_list[1],
                center_list[2],
            )
            radius = sphere_config.get("radius", 1.0)
            material = material_from_dict(sphere_config.get("material", {"type": "lambertian"}))
            self.add_sphere(center, radius, material)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {"spheres": self.to_config().spheres}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Build a scene from a dictionary with a 'spheres' key."""
        scene = cls()
        scene.from_config(SceneConfig(spheres=data.get("spheres", [])))
        return scene
