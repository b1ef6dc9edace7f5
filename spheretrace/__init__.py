"""
spheretrace - one ray per pixel, spheres only, local Phong shading.
"""

from .utils import vec, normalize, reflect
from .materials import Material
from .geometry import Hit, Sphere, no_hit
from .ray import (Ray, Camera, PointLight, DirectionalLight, Scene, shade,
                  render_pixel, render_image, render_parallel, render_gradient)
from .ImLite import Image

__version__ = "0.1.0"

__all__ = [
    "vec",
    "normalize",
    "reflect",
    "Material",
    "Hit",
    "Sphere",
    "no_hit",
    "Ray",
    "Camera",
    "PointLight",
    "DirectionalLight",
    "Scene",
    "shade",
    "render_pixel",
    "render_image",
    "render_parallel",
    "render_gradient",
    "Image",
]
