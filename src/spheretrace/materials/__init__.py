"""Materials module for light scattering models.

This module implements the three material variants:

Components:
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like refraction with total internal reflection
    base: Tagged GPU material struct, scatter result, host-side factories

Each scatter function returns the outgoing direction and an attenuation
color, plus an absorption flag where the material can absorb. Dispatch on
the material kind happens in the integrator.
"""

from .base import (
    Material,
    MaterialInfo,
    MaterialType,
    Scattered,
    make_dielectric,
    make_lambertian,
    make_metal,
    material_from_dict,
)
from .dielectric import (
    refraction_ratio,
    scatter_dielectric,
    validate_ior,
    will_reflect,
)
from .lambertian import scatter_lambertian, validate_albedo
from .metal import scatter_metal, validate_fuzz

__all__ = [
    "Material",
    "MaterialInfo",
    "MaterialType",
    "Scattered",
    "make_lambertian",
    "make_metal",
    "make_dielectric",
    "material_from_dict",
    "scatter_lambertian",
    "validate_albedo",
    "scatter_metal",
    "validate_fuzz",
    "scatter_dielectric",
    "refraction_ratio",
    "will_reflect",
    "validate_ior",
]
