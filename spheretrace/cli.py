import argparse
import sys
import time

import numpy as np

from . import ray
from .ExampleSceneDef import ExampleSceneDef, SCENES
from .ImLite import Image


def render(camera, scene, output_path='out.ppm', output_shape=None, workers=None, verbose=True):
    """Render a scene and write it to output_path. Used by the scene scripts."""
    if output_shape is None:
        output_shape = [ray.HEIGHT, ray.WIDTH]
    start_time = time.time()
    im = ExampleSceneDef(camera, scene).render(output_path, output_shape,
                                               workers=workers, verbose=verbose)
    if verbose:
        print(f"Wrote {output_path} in {time.time() - start_time:.2f} seconds")
    return im


def build_parser():
    parser = argparse.ArgumentParser(prog='spheretrace', description='Sphere ray tracer')
    parser.add_argument('scene', nargs='?', default='four-spheres',
                        choices=sorted(SCENES) + ['gradient'], help='Scene to render')
    parser.add_argument('output_image', nargs='?', default='out.ppm',
                        help='Output image file; the format follows the extension')
    parser.add_argument('--width', type=int, default=ray.WIDTH, help='Image width')
    parser.add_argument('--height', type=int, default=ray.HEIGHT, help='Image height')
    parser.add_argument('--fov', type=float, default=ray.FOV,
                        help='Vertical field of view in radians')
    parser.add_argument('--workers', type=int, default=None,
                        help='Number of worker processes (default: render in this process)')
    parser.add_argument('--show', action='store_true', help='Display the image when done')
    parser.add_argument('--quiet', action='store_true', help='Do not print progress')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.width <= 0 or args.height <= 0:
        parser.error(f"image size must be positive, got {args.width}x{args.height}")
    if not 0 < args.fov < np.pi:
        parser.error(f"field of view must be in (0, pi) radians, got {args.fov}")
    verbose = not args.quiet

    try:
        if args.scene == 'gradient':
            im = Image(pixels=ray.render_gradient(args.width, args.height))
            im.writeToFile(args.output_image)
            if verbose:
                print(f"Wrote {args.output_image}")
        else:
            example = SCENES[args.scene](fov=args.fov)
            if verbose:
                print(f"Scene loaded: {len(example.scene.spheres)} spheres, "
                      f"{len(example.scene.lights)} lights")
                print(f"Rendering {args.width}x{args.height} image...")
            im = render(example.camera, example.scene, args.output_image,
                        [args.height, args.width], workers=args.workers, verbose=verbose)
    except OSError as e:
        print(f"spheretrace: cannot write {args.output_image}: {e}", file=sys.stderr)
        return 1

    if args.show:
        im.show()
    return 0


if __name__ == '__main__':
    sys.exit(main())
