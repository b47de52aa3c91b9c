"""Material variant shared by the scene storage and the integrator.

Materials form a closed set of three variants. On the GPU side every
material is one tagged ``Material`` struct whose ``kind`` selects which
scattering function the integrator dispatches to; on the Python side the
same data is carried by the frozen ``MaterialInfo`` dataclass, built through
the validating ``make_*`` factories.

Field usage per kind:
    LAMBERTIAN: albedo
    METAL: albedo, fuzz
    DIELECTRIC: ior, albedo (used as the transmission tint)

Example:
    >>> glass = make_dielectric(1.5)
    >>> gold = make_metal((0.8, 0.6, 0.2), fuzz=0.3)
    >>> gold.to_dict()
    {'type': 'metal', 'albedo': [0.8, 0.6, 0.2], 'fuzz': 0.3}
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray
from spheretrace.materials.dielectric import validate_ior
from spheretrace.materials.lambertian import validate_albedo
from spheretrace.materials.metal import validate_fuzz

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the integrator to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@ti.dataclass
class Material:
    """GPU-side tagged material.

    Attributes:
        kind: The MaterialType value selecting the scattering model.
        albedo: Reflectance (Lambertian, Metal) or tint (Dielectric).
        fuzz: Metal fuzziness in [0, 1].
        ior: Dielectric index of refraction.
    """

    kind: ti.i32
    albedo: vec3
    fuzz: ti.f32
    ior: ti.f32


@ti.dataclass
class Scattered:
    """Outcome of a single scattering event.

    Attributes:
        did_scatter: 1 if the material produced an outgoing ray, 0 if the
            incoming ray was absorbed.
        attenuation: Per-channel weight applied to the radiance gathered
            along scatter_ray. Only valid if did_scatter == 1.
        scatter_ray: The outgoing ray. Only valid if did_scatter == 1.
    """

    did_scatter: ti.i32
    attenuation: vec3
    scatter_ray: Ray


@dataclass(frozen=True)
class MaterialInfo:
    """Host-side description of a material.

    Prefer the make_lambertian / make_metal / make_dielectric factories,
    which validate their parameters.

    Attributes:
        material_type: The material variant.
        albedo: Reflectance color, or tint for dielectrics.
        fuzz: Metal fuzziness (ignored by other variants).
        ior: Index of refraction (ignored by non-dielectrics).
    """

    material_type: MaterialType
    albedo: tuple[float, float, float] = (1.0, 1.0, 1.0)
    fuzz: float = 0.0
    ior: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        """Export the material to a JSON-compatible dictionary."""
        data: dict[str, Any] = {"type": self.material_type.name.lower()}
        if self.material_type == MaterialType.LAMBERTIAN:
            data["albedo"] = list(self.albedo)
        elif self.material_type == MaterialType.METAL:
            data["albedo"] = list(self.albedo)
            data["fuzz"] = self.fuzz
        else:
            data["ior"] = self.ior
            data["tint"] = list(self.albedo)
        return data


def _as_color(values: Any) -> tuple[float, float, float]:
    """Convert a 3-element sequence to a float RGB tuple."""
    if len(values) != 3:
        raise ValueError(f"Color must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


def make_lambertian(albedo: tuple[float, float, float]) -> MaterialInfo:
    """Create a Lambertian (diffuse) material.

    Args:
        albedo: The diffuse reflectance color as (R, G, B), each in [0, 1].

    Raises:
        ValueError: If any albedo component is outside [0, 1].
    """
    validate_albedo(albedo)
    return MaterialInfo(MaterialType.LAMBERTIAN, albedo=_as_color(albedo))


def make_metal(albedo: tuple[float, float, float], fuzz: float = 0.0) -> MaterialInfo:
    """Create a metal (specular reflective) material.

    Args:
        albedo: The reflective color as (R, G, B), each in [0, 1].
        fuzz: The fuzziness in [0, 1]. Default is 0 (perfect mirror).

    Raises:
        ValueError: If any albedo component or the fuzz is outside [0, 1].
    """
    validate_albedo(albedo)
    validate_fuzz(fuzz)
    return MaterialInfo(MaterialType.METAL, albedo=_as_color(albedo), fuzz=float(fuzz))


def make_dielectric(
    ior: float = 1.5,
    tint: tuple[float, float, float] = (1.0, 1.0, 1.0),
) -> MaterialInfo:
    """Create a dielectric (glass/water) material.

    Args:
        ior: Index of refraction. Default is 1.5 (typical glass).
            Common values: Air=1.0, Water=1.33, Glass=1.5, Diamond=2.4
        tint: Transmission color as (R, G, B). Default is white (no tint).

    Raises:
        ValueError: If ior is not positive or a tint component is outside [0, 1].
    """
    validate_ior(ior)
    validate_albedo(tint, name="Tint")
    return MaterialInfo(MaterialType.DIELECTRIC, albedo=_as_color(tint), ior=float(ior))


def material_from_dict(data: dict[str, Any]) -> MaterialInfo:
    """Load a material from a dictionary produced by MaterialInfo.to_dict().

    Missing parameters fall back to the factory defaults.

    Raises:
        ValueError: If the material type is unknown or parameters are invalid.
    """
    mat_type = str(data.get("type", "")).lower()
    if mat_type == "lambertian":
        return make_lambertian(_as_color(data.get("albedo", [0.5, 0.5, 0.5])))
    if mat_type == "metal":
        albedo = _as_color(data.get("albedo", [0.8, 0.8, 0.8]))
        return make_metal(albedo, data.get("fuzz", 0.0))
    if mat_type == "dielectric":
        tint = _as_color(data.get("tint", [1.0, 1.0, 1.0]))
        return make_dielectric(data.get("ior", 1.5), tint)
    raise ValueError(f"Unknown material type: {mat_type}")
