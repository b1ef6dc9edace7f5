from spheretrace.utils import *
from spheretrace.ray import *
from spheretrace.cli import render


ivory      = Material(vec([0.4, 0.4, 0.3]), albedo=(0.6, 0.3), specular_exponent=50.)
red_rubber = Material(vec([0.3, 0.1, 0.1]), albedo=(0.9, 0.1), specular_exponent=10.)

scene = Scene([
    Sphere(vec([-3, 0, -16]), 2, ivory),
    Sphere(vec([-1.0, -1.5, -12]), 2, red_rubber),
    Sphere(vec([1.5, -0.5, -18]), 3, red_rubber),
    Sphere(vec([7, 5, -18]), 4, ivory),
], lights=[
    PointLight(vec([-20, 20, 20]), 1.5),
    PointLight(vec([30, 50, -25]), 1.8),
    PointLight(vec([30, 20, 30]), 1.7),
])

camera = Camera(fov=np.pi / 2)

render(camera, scene, "four_spheres.ppm")
