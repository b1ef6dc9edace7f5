from spheretrace.utils import *
from spheretrace.ray import *
from spheretrace.cli import render


ivory = Material(vec([0.4, 0.4, 0.3]), albedo=(0.6, 0.3), specular_exponent=50.)

# One sphere and no lights: a black disc on the background
scene = Scene([
    Sphere(vec([-3, 0, -16]), 2, ivory),
])

camera = Camera(fov=np.pi / 2)

render(camera, scene, "one_sphere.ppm")
