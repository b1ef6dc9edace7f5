from . import ray
from .ImLite import *
from .utils import *

class ExampleSceneDef(object):
    def __init__(self, camera, scene):
        self.camera = camera;
        self.scene = scene;

    def render(self, output_path=None, output_shape=None, workers=None, verbose=False):
        if(output_shape is None):
            output_shape=[ray.HEIGHT, ray.WIDTH];
        if(workers is not None and workers > 1):
            pix = ray.render_parallel(self.camera, self.scene, output_shape[1], output_shape[0],
                                      workers=workers, verbose=verbose);
        else:
            pix = ray.render_image(self.camera, self.scene, output_shape[1], output_shape[0],
                                   verbose=verbose);
        im = Image(pixels=pix);
        if(output_path is None):
            return im;
        else:
            im.writeToFile(output_path);
            return im;


ivory = ray.Material(vec([0.4, 0.4, 0.3]), albedo=(0.6, 0.3), specular_exponent=50.)
red_rubber = ray.Material(vec([0.3, 0.1, 0.1]), albedo=(0.9, 0.1), specular_exponent=10.)


def SingleSphereExample(fov=ray.FOV):
    scene = ray.Scene([
        ray.Sphere(vec([-3, 0, -16]), 2, ivory),
    ])
    camera = ray.Camera(fov=fov)
    return ExampleSceneDef(camera=camera, scene=scene);


def FourSpheresExample(fov=ray.FOV):
    scene = ray.Scene([
        ray.Sphere(vec([-3, 0, -16]), 2, ivory),
        ray.Sphere(vec([-1.0, -1.5, -12]), 2, red_rubber),
        ray.Sphere(vec([1.5, -0.5, -18]), 3, red_rubber),
        ray.Sphere(vec([7, 5, -18]), 4, ivory),
    ], lights=[
        ray.PointLight(vec([-20, 20, 20]), 1.5),
        ray.PointLight(vec([30, 50, -25]), 1.8),
        ray.PointLight(vec([30, 20, 30]), 1.7),
    ])
    camera = ray.Camera(fov=fov)
    return ExampleSceneDef(camera=camera, scene=scene);


SCENES = {
    'single-sphere': SingleSphereExample,
    'four-spheres': FourSpheresExample,
}
