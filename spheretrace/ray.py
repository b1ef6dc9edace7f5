import multiprocessing as mp

import numpy as np
from .materials import Material
from .geometry import Sphere, no_hit, Hit
from .utils import *

"""
Core implementation of the ray tracer. One primary ray per pixel is
resolved against a list of spheres and shaded with a local Phong model.
No shadow rays, no secondary bounces.
"""

WIDTH = 1024
HEIGHT = 768
FOV = np.pi / 2. # vertical, radians

BACKGROUND = vec([0.2, 0.7, 0.8])
WHITE = vec([1., 1., 1.])


class Ray:

    def __init__(self, origin, direction):
        """Create a ray with the given origin and direction.

        Parameters:
          origin : (3,) -- the start point of the ray, a 3D point
          direction : (3,) -- the direction of the ray, expected to be unit length
        """
        # double precision for the intersection math
        self.origin = np.array(origin, np.float64)
        self.direction = np.array(direction, np.float64)

    def at(self, t):
        return self.origin + self.direction * t


class Camera:

    def __init__(self, eye=vec([0,0,0]), target=vec([0,0,-1]), up=vec([0,1,0]),
                 fov=FOV, aspect=None):
        """Create a camera with given viewing parameters.

        Parameters:
          eye : (3,) -- the camera's location, also the origin of every ray
          target : (3,) -- the point the camera looks at
          up : (3,) -- the up direction, need not be orthogonal to the view
          fov : float -- the vertical field of view, in radians
          aspect : float -- width / height; None means take it from the image
        """
        if not 0 < fov < np.pi:
            raise ValueError(f"field of view must be in (0, pi) radians, got {fov!r}")
        self.eye = vec(eye)
        self.aspect = aspect
        self.fov = fov

        self.w = normalize(self.eye - vec(target))
        self.u = normalize(np.cross(up, self.w))
        self.v = np.cross(self.w, self.u)

        self.img_h_half = np.tan(fov / 2.0)

    def generate_ray(self, img_point, aspect=None):
        """Compute the ray corresponding to a point in the image.

        Parameters:
          img_point : (2,) -- (u, v) in [0,1]^2, with (0, 0) the upper left corner
          aspect : float -- used when the camera does not fix its own aspect ratio
        """
        if self.aspect is not None:
            aspect = self.aspect
        elif aspect is None:
            aspect = 1.0
        img_w_half = aspect * self.img_h_half

        alpha = img_w_half * (img_point[0] * 2.0 - 1.0)
        beta = self.img_h_half * (1.0 - img_point[1] * 2.0)

        direction = (alpha * self.u) + (beta * self.v) - self.w

        return Ray(self.eye, normalize(direction))

    def pixel_ray(self, i, j, nx, ny):
        """Ray through the center of pixel (i, j) of an nx by ny image."""
        return self.generate_ray(((i + 0.5) / nx, (j + 0.5) / ny), aspect=nx / ny)


def phong_terms(light_dir, intensity, ray, hit):
    """(diffuse, specular) response at a hit to a light arriving along light_dir."""
    normal = hit.normal
    diffuse = intensity * max(0.0, np.dot(light_dir, normal))
    mirrored = -reflect(-light_dir, normal)
    specular = intensity * max(0.0, np.dot(mirrored, ray.direction)) ** hit.material.specular_exponent
    return diffuse, specular


class PointLight:
    def __init__(self, position, intensity):
        """Create a point light at given position and with given intensity"""
        self.position = vec(position)
        self.intensity = intensity

    def illuminate(self, ray, hit):
        """Compute the (diffuse, specular) intensity this light adds at a hit."""
        light_dir = normalize(self.position - hit.point)
        return phong_terms(light_dir, self.intensity, ray, hit)


class DirectionalLight:
    def __init__(self, direction, intensity):
        """Create a light shining from the given direction, as seen from the
        world origin. The light direction is the same at every hit point.
        """
        self.direction = vec(direction)
        self.intensity = intensity

    def illuminate(self, ray, hit):
        return phong_terms(normalize(self.direction), self.intensity, ray, hit)


class Scene:

    def __init__(self, spheres, lights=(), bg_color=BACKGROUND, truncate_distances=False):
        """Create a scene containing the given objects.

        Parameters:
          spheres : list of Sphere -- order decides ties between equal distances
          lights : list of PointLight
          bg_color : (3,) -- color of rays that hit nothing
          truncate_distances : bool -- compare distances as integers, like the
            reference renderer does, instead of as floats
        """
        self.spheres = tuple(spheres)
        self.lights = tuple(lights)
        self.bg_color = vec(bg_color)
        self.bg_color.setflags(write=False)
        self.truncate_distances = truncate_distances

    def _key(self, t):
        return int(t) if self.truncate_distances else t

    def intersect(self, ray):
        """Computes the first (smallest t) intersection between a ray and the scene.

        Spheres are scanned in order and the first one wins a tie.
        """
        nearest = None
        nearest_t = np.inf
        for sphere in self.spheres:
            t = sphere.intersect(ray)
            if t is None:
                continue
            if nearest is None or self._key(t) < self._key(nearest_t):
                nearest = sphere
                nearest_t = t

        if nearest is None:
            return no_hit

        point = ray.at(nearest_t)
        return Hit(nearest_t, point, nearest.normal_at(point), nearest)


def shade(ray, hit, scene):
    """Compute the color seen along a ray given its nearest hit.

    The result is not clamped; that is left to the image encoder.
    """
    if hit.t == np.inf:
        return scene.bg_color.copy()

    diffuse = 0.0
    specular = 0.0
    for light in scene.lights:
        d, s = light.illuminate(ray, hit)
        diffuse += d
        specular += s

    mat = hit.material
    return (mat.diffuse_color * diffuse * mat.albedo[0]
            + WHITE * specular * mat.albedo[1])


def render_pixel(camera, scene, i, j, nx, ny):
    """Color of pixel (i, j). Depends on nothing but its arguments."""
    ray = camera.pixel_ray(i, j, nx, ny)
    return shade(ray, scene.intersect(ray), scene)


def _check_shape(nx, ny):
    if nx <= 0 or ny <= 0:
        raise ValueError(f"image size must be positive, got {nx}x{ny}")


def _render_rows(camera, scene, nx, ny, rows, verbose=False):
    block = np.zeros((len(rows), nx, 3), np.float32)
    for k, j in enumerate(rows):
        if verbose:
            print(f"rendering row {j+1}/{ny}...")
        for i in range(nx):
            block[k, i] = render_pixel(camera, scene, i, j, nx, ny)
    return block


def render_image(camera, scene, nx=WIDTH, ny=HEIGHT, verbose=False):
    """
    render a ray traced image.

    Returns an (ny, nx, 3) float32 framebuffer, so pixel (i, j) is also
    entry i + j*nx of framebuffer.reshape(-1, 3).
    """
    _check_shape(nx, ny)
    return _render_rows(camera, scene, nx, ny, range(ny), verbose=verbose)


def _render_row_chunk(args):
    camera, scene, nx, ny, rows = args
    return rows, _render_rows(camera, scene, nx, ny, rows)


def render_parallel(camera, scene, nx=WIDTH, ny=HEIGHT, workers=None, verbose=False):
    """
    Render the image with a pool of worker processes, one chunk of rows
    at a time. Chunks are disjoint, so the result matches render_image.
    """
    _check_shape(nx, ny)
    if workers is None:
        workers = mp.cpu_count()
    if workers < 1:
        raise ValueError(f"need at least one worker, got {workers}")

    rows_per_chunk = max(1, ny // (workers * 4))
    chunks = [range(start, min(start + rows_per_chunk, ny))
              for start in range(0, ny, rows_per_chunk)]
    if verbose:
        print(f"rendering {nx}x{ny} in {len(chunks)} chunks on {workers} workers...")

    output_image = np.zeros((ny, nx, 3), np.float32)
    with mp.Pool(workers) as pool:
        for rows, block in pool.imap_unordered(
                _render_row_chunk, [(camera, scene, nx, ny, rows) for rows in chunks]):
            output_image[rows.start:rows.stop] = block
            if verbose:
                print(f"rendered rows {rows.start+1}-{rows.stop}/{ny}")
    return output_image


def render_gradient(nx=WIDTH, ny=HEIGHT):
    """Test pattern: red ramps down the rows, green across the columns."""
    _check_shape(nx, ny)
    output_image = np.zeros((ny, nx, 3), np.float32)
    output_image[:, :, 0] = (np.arange(ny, dtype=np.float32) / ny)[:, None]
    output_image[:, :, 1] = (np.arange(nx, dtype=np.float32) / nx)[None, :]
    return output_image
