import unittest
import numpy as np
from spheretrace.ray import *
from spheretrace.utils import normalize, vec
from spheretrace.ExampleSceneDef import SingleSphereExample, FourSpheresExample

def assert_direction_matches(v, w):
    np.testing.assert_almost_equal(normalize(v), normalize(w))


def flipy_vec(vect):
    v = vec(vect);
    v[1] = 1-v[1];
    return v;

gray = Material(vec([0.5, 0.5, 0.5]))


class TestSphereIntersect(unittest.TestCase):

    def confirm_hit(self, sphere, ray):
        # make sure hit is on the surface, then return the distance
        t = sphere.intersect(ray)
        self.assertIsNotNone(t)
        self.assertGreaterEqual(t, 0)
        point = ray.origin + t * ray.direction
        self.assertAlmostEqual(np.linalg.norm(point - sphere.center), sphere.radius, places=5)
        return t

    def test_unitsphere_hits(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, gray)
        # dead center hit
        t = self.confirm_hit(unit_sphere, Ray(vec([2.0,0.0,0.0]), vec([-1.0,0.0,0.0])))
        self.assertAlmostEqual(t, 1.0)
        # off center hit
        t = self.confirm_hit(unit_sphere, Ray(vec([1.0,0.5,0.0]), vec([-1.0,0.0,0.0])))
        self.assertAlmostEqual(t, 1 - np.sin(np.pi/3))
        # center hit from off axis
        t = self.confirm_hit(unit_sphere, Ray(vec([2.0,3.0,4.0]), normalize(vec([-2.0,-3.0,-4.0]))))
        self.assertAlmostEqual(t, np.sqrt(29) - 1, places=5)

    def test_unitsphere_misses(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, gray)
        # on axis miss
        self.assertIsNone(unit_sphere.intersect(Ray(vec([2.0,3.0,0.0]), vec([-1.0,0.0,0.0]))))
        # sphere entirely behind the origin
        self.assertIsNone(unit_sphere.intersect(Ray(vec([2.0,0.0,0.0]), vec([1.0,0.0,0.0]))))

    def test_misses_beyond_radius(self):
        rng = np.random.default_rng(7)
        sphere = Sphere(vec([1,-2,-9]), 2.5, gray)
        for _ in range(50):
            direction = normalize(rng.normal(size=3))
            side = normalize(np.cross(direction, rng.normal(size=3)))
            # closest approach to the center is strictly more than the radius
            offset = sphere.radius * (1.01 + rng.random())
            origin = sphere.center + side * offset - direction * (10 * rng.random())
            self.assertIsNone(sphere.intersect(Ray(origin, direction)))

    def test_inside_returns_exit(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, gray)
        t = self.confirm_hit(unit_sphere, Ray(vec([0,0,0]), vec([0,0,-1])))
        self.assertAlmostEqual(t, 1.0)

        sphere = Sphere(vec([-1,-5,-7]), 3.0, gray)
        origin = vec([-0.2,-4.1,-6.5])
        direction = normalize(vec([1,1,1]))
        t = self.confirm_hit(sphere, Ray(origin, direction))
        self.assertGreater(t, 0)
        # the exit point lies ahead of the origin
        self.assertGreater(np.dot(Ray(origin, direction).at(t) - origin, direction), 0)

    def test_tangent(self):
        sphere = Sphere(vec([0,0,-5]), 1.0, gray)
        t = sphere.intersect(Ray(vec([1,0,0]), vec([0,0,-1])))
        self.assertIsNotNone(t)
        self.assertTrue(np.isfinite(t))
        self.assertAlmostEqual(t, 5.0)

    def test_nonunit_hits(self):
        # the first case scaled by 3 and shifted by (-1, -5, -7)
        sphere = Sphere(vec([-1,-5,-7]), 3.0, gray)
        t = self.confirm_hit(sphere, Ray(vec([5.0,-5.0,-7.0]), vec([-1.0,0.0,0.0])))
        self.assertAlmostEqual(t, 3.0)
        t = self.confirm_hit(sphere, Ray(vec([2.0,-3.5,-7.0]), vec([-1.0,0.0,0.0])))
        self.assertAlmostEqual(t, 3 * (1 - np.sin(np.pi/3)), places=5)

    def test_bad_radius(self):
        with self.assertRaises(ValueError):
            Sphere(vec([0,0,0]), 0.0, gray)


class TestSceneIntersect(unittest.TestCase):

    def test_nearest(self):
        far = Sphere(vec([0,0,-10]), 1.0, gray)
        near = Sphere(vec([0,0,-5]), 1.0, gray)
        scene = Scene([far, near])
        hit = scene.intersect(Ray(vec([0,0,0]), vec([0,0,-1])))
        self.assertIs(hit.sphere, near)
        self.assertIs(hit.material, gray)
        self.assertAlmostEqual(hit.t, 4.0)
        np.testing.assert_almost_equal(hit.point, [0,0,-4])
        np.testing.assert_almost_equal(hit.normal, [0,0,1])

    def test_miss(self):
        scene = Scene([Sphere(vec([0,0,-5]), 1.0, gray)])
        hit = scene.intersect(Ray(vec([0,0,0]), vec([0,0,1])))
        self.assertIs(hit, no_hit)
        self.assertEqual(hit.t, np.inf)
        self.assertIs(Scene([]).intersect(Ray(vec([0,0,0]), vec([0,0,-1]))), no_hit)

    def test_tie_goes_to_first(self):
        red = Material(vec([1,0,0]))
        blue = Material(vec([0,0,1]))
        a = Sphere(vec([0,0,-5]), 1.0, red)
        b = Sphere(vec([0,0,-5]), 1.0, blue)
        ray = Ray(vec([0,0,0]), vec([0,0,-1]))
        self.assertIs(Scene([a, b]).intersect(ray).sphere, a)
        self.assertIs(Scene([b, a]).intersect(ray).sphere, b)

    def test_truncated_distances(self):
        further = Sphere(vec([0,0,-5.2]), 1.0, gray)
        nearer = Sphere(vec([0,0,-5.0]), 1.0, gray)
        ray = Ray(vec([0,0,0]), vec([0,0,-1]))

        hit = Scene([further, nearer]).intersect(ray)
        self.assertIs(hit.sphere, nearer)

        # 4.2 and 4.0 both truncate to 4, so scene order decides
        hit = Scene([further, nearer], truncate_distances=True).intersect(ray)
        self.assertIs(hit.sphere, further)
        self.assertAlmostEqual(hit.t, 4.2, places=5)

    def test_deterministic(self):
        scene = FourSpheresExample().scene
        ray = Camera().pixel_ray(400, 380, 1024, 768)
        first = scene.intersect(ray)
        self.assertLess(first.t, np.inf)
        for _ in range(5):
            again = scene.intersect(ray)
            self.assertIs(again.sphere, first.sphere)
            self.assertEqual(again.t, first.t)

    def test_normals(self):
        scene = FourSpheresExample().scene
        camera = Camera()
        hits = 0
        for i in range(0, 1024, 64):
            for j in range(0, 768, 64):
                hit = scene.intersect(camera.pixel_ray(i, j, 1024, 768))
                if hit.t == np.inf:
                    continue
                hits += 1
                s = hit.sphere
                self.assertAlmostEqual(np.linalg.norm(hit.point - s.center), s.radius, places=4)
                np.testing.assert_almost_equal(hit.normal, normalize(hit.point - s.center))
                self.assertAlmostEqual(np.linalg.norm(hit.normal), 1.0)
        self.assertGreater(hits, 0)


class TestCamera(unittest.TestCase):

    def test_default_camera(self):
        # A camera located at the origin facing the -z direction
        cam = Camera()
        # Center ray is straight down the axis
        ray = cam.generate_ray(flipy_vec([0.5, 0.5]))
        np.testing.assert_almost_equal(ray.origin, vec([0,0,0]))
        assert_direction_matches(ray.direction, vec([0,0,-1]))
        self.assertAlmostEqual(np.linalg.norm(ray.direction), 1.0)
        # FOV is 90 degrees, so corner rays are centered in octants
        ray = cam.generate_ray(flipy_vec([0, 0]))
        assert_direction_matches(ray.direction, vec([-1,-1,-1]))
        ray = cam.generate_ray(flipy_vec([1, 0]))
        assert_direction_matches(ray.direction, vec([ 1,-1,-1]))
        ray = cam.generate_ray(flipy_vec([0, 1]))
        assert_direction_matches(ray.direction, vec([-1, 1,-1]))

    def test_fov(self):
        # A camera with a different fov: rays should be scaled in x and y
        fov = np.pi / 3
        cam = Camera(fov=fov)
        s = np.tan(fov/2)
        ray = cam.generate_ray(flipy_vec([0.5, 0.5]))
        assert_direction_matches(ray.direction, vec([0,0,-1]))
        ray = cam.generate_ray(flipy_vec([1, 1]))
        assert_direction_matches(ray.direction, vec([s, s, -1]))

    def test_aspect(self):
        # A camera with a different aspect ratio: rays should be scaled in x
        cam = Camera(aspect=1.5)
        ray = cam.generate_ray(flipy_vec([1, 1]))
        assert_direction_matches(ray.direction, vec([1.5, 1, -1]))
        # the image aspect is only a fallback
        ray = cam.generate_ray(flipy_vec([1, 1]), aspect=3.0)
        assert_direction_matches(ray.direction, vec([1.5, 1, -1]))
        ray = Camera().generate_ray(flipy_vec([1, 1]), aspect=3.0)
        assert_direction_matches(ray.direction, vec([3.0, 1, -1]))

    def test_pixel_ray(self):
        nx, ny, fov = 1024, 768, np.pi / 2
        cam = Camera(fov=fov)
        for i, j in [(0, 0), (10, 20), (512, 384), (1023, 767)]:
            x = (2 * (i + 0.5) / nx - 1) * np.tan(fov / 2) * nx / ny
            y = -(2 * (j + 0.5) / ny - 1) * np.tan(fov / 2)
            ray = cam.pixel_ray(i, j, nx, ny)
            np.testing.assert_almost_equal(ray.origin, [0, 0, 0])
            np.testing.assert_almost_equal(ray.direction, normalize(np.array([x, y, -1.0])), decimal=6)

    def test_square_frame(self):
        # A camera with a frame where up is equal to v
        cam = Camera(eye=vec([1,2,2]), target=vec([1,4,2]), up=vec([0,0,1]))
        ray = cam.generate_ray(flipy_vec([0.5, 0.5]))
        np.testing.assert_almost_equal(ray.origin, vec([1,2,2]))
        assert_direction_matches(ray.direction, vec([0,1,0]))
        # corners are like default camera but (x,y) is (x, z)
        ray = cam.generate_ray(flipy_vec([0, 0]))
        assert_direction_matches(ray.direction, vec([-1, 1,-1]))
        ray = cam.generate_ray(flipy_vec([1, 0]))
        assert_direction_matches(ray.direction, vec([ 1, 1,-1]))

    def test_bad_fov(self):
        with self.assertRaises(ValueError):
            Camera(fov=0)
        with self.assertRaises(ValueError):
            Camera(fov=np.pi)


class TestShade(unittest.TestCase):

    def setUp(self):
        self.diffuse = Material(vec([0.2,0.4,0.6]), albedo=(1., 0.))
        self.shiny = Material(vec([0.2,0.4,0.6]), albedo=(0., 1.), specular_exponent=10.)

    def hit_at(self, material, p=vec([0,0,0]), n=vec([0,1,0])):
        # a hit at p with normal n, seen by a ray coming straight down
        sphere = Sphere(p - n, 1.0, material)
        ray = Ray(p + 2.3 * n, -n)
        return ray, Hit(2.3, np.array(p, np.float64), np.array(n, np.float64), sphere)

    def test_background(self):
        scene = Scene([Sphere(vec([0,0,-5]), 1.0, gray)], [PointLight(vec([0,5,0]), 1.0)])
        ray = Ray(vec([0,0,0]), vec([0,1,0]))
        color = shade(ray, scene.intersect(ray), scene)
        np.testing.assert_array_equal(color, vec([0.2, 0.7, 0.8]))
        # the caller owns the returned color
        color *= 0.5
        np.testing.assert_array_equal(scene.bg_color, vec([0.2, 0.7, 0.8]))
        np.testing.assert_array_equal(shade(ray, scene.intersect(ray), scene), vec([0.2, 0.7, 0.8]))

    def test_diffuse(self):
        ray, hit = self.hit_at(self.diffuse)
        # light directly overhead, unit intensity
        scene = Scene([hit.sphere], [PointLight(vec([0,5,0]), 1.0)])
        np.testing.assert_allclose(shade(ray, hit, scene), [0.2,0.4,0.6], rtol=1e-6)
        # light at 60 degrees
        scene = Scene([hit.sphere], [PointLight(3 * normalize(vec([0,1,np.sqrt(3)])), 1.0)])
        np.testing.assert_allclose(shade(ray, hit, scene), 0.5 * vec([0.2,0.4,0.6]), rtol=1e-5)
        # light below the surface
        scene = Scene([hit.sphere], [PointLight(vec([0,-5,0]), 1.0)])
        np.testing.assert_allclose(shade(ray, hit, scene), [0,0,0])

    def test_specular(self):
        ray, hit = self.hit_at(self.shiny)
        # mirror direction points straight back at the viewer; not clamped
        scene = Scene([hit.sphere], [PointLight(vec([0,5,0]), 1.5)])
        np.testing.assert_allclose(shade(ray, hit, scene), [1.5,1.5,1.5], rtol=1e-6)
        # light at 60 degrees: cosine to the mirror direction is 0.5
        scene = Scene([hit.sphere], [PointLight(3 * normalize(vec([0,1,np.sqrt(3)])), 1.0)])
        np.testing.assert_allclose(shade(ray, hit, scene), [0.5**10] * 3, rtol=1e-4)

    def test_no_lights_is_black(self):
        mat = Material(vec([0.4,0.4,0.3]), albedo=(0.6, 0.3), specular_exponent=50.)
        ray, hit = self.hit_at(mat)
        np.testing.assert_array_equal(shade(ray, hit, Scene([hit.sphere])), [0,0,0])

    def test_two_lights_add(self):
        mat = Material(vec([0.4,0.4,0.3]), albedo=(0.6, 0.3), specular_exponent=50.)
        sphere = Sphere(vec([-3,0,-16]), 2, mat)
        a = PointLight(vec([-20,20,20]), 1.5)
        b = PointLight(vec([30,50,-25]), 1.8)
        ray = Ray(vec([0,0,0]), normalize(vec([-2.5,0.8,-14])))

        both = Scene([sphere], [a, b])
        hit = both.intersect(ray)
        self.assertLess(hit.t, np.inf)
        total = shade(ray, hit, both)
        separate = shade(ray, hit, Scene([sphere], [a])) + shade(ray, hit, Scene([sphere], [b]))
        np.testing.assert_allclose(total, separate, rtol=1e-5)
        # order of lights does not matter
        np.testing.assert_allclose(shade(ray, hit, Scene([sphere], [b, a])), total, rtol=1e-6)

        # diffuse sum is the per light max(0, l.n) weighted by intensity
        plain = Material(vec([0.4,0.4,0.3]), albedo=(1., 0.))
        hit.sphere = Sphere(sphere.center, sphere.radius, plain)
        expected = sum(L.intensity * max(0., np.dot(normalize(L.position - hit.point), hit.normal))
                       for L in (a, b))
        np.testing.assert_allclose(shade(ray, hit, both), plain.diffuse_color * expected, rtol=1e-5)

    def test_directional_light(self):
        # the same light direction wherever the hit is
        for p in (vec([0,0,0]), vec([3,0,0]), vec([-7,0,2])):
            ray, hit = self.hit_at(self.diffuse, p=p)
            scene = Scene([hit.sphere], [DirectionalLight(vec([0,1,np.sqrt(3)]), 1.0)])
            np.testing.assert_allclose(shade(ray, hit, scene), 0.5 * vec([0.2,0.4,0.6]), rtol=1e-5)

        # a point light at that position sees a different direction from (3,0,0)
        ray, hit = self.hit_at(self.diffuse, p=vec([3,0,0]))
        scene = Scene([hit.sphere], [PointLight(vec([0,1,np.sqrt(3)]), 1.0)])
        np.testing.assert_allclose(shade(ray, hit, scene), vec([0.2,0.4,0.6]) / np.sqrt(13), rtol=1e-5)


class TestRender(unittest.TestCase):

    def test_single_sphere_no_lights(self):
        example = SingleSphereExample()
        camera, scene = example.camera, example.scene
        bg = vec([0.2, 0.7, 0.8])
        # pixel over the projected center of the sphere
        self.assertLess(scene.intersect(camera.pixel_ray(439, 384, 1024, 768)).t, np.inf)
        np.testing.assert_array_equal(render_pixel(camera, scene, 439, 384, 1024, 768), [0,0,0])
        # the exact image center passes beside the sphere
        np.testing.assert_array_equal(render_pixel(camera, scene, 512, 384, 1024, 768), bg)
        np.testing.assert_array_equal(render_pixel(camera, scene, 0, 0, 1024, 768), bg)
        np.testing.assert_array_equal(render_pixel(camera, scene, 1023, 767, 1024, 768), bg)

    def test_framebuffer_layout(self):
        example = SingleSphereExample()
        nx, ny = 32, 24
        fb = render_image(example.camera, example.scene, nx, ny)
        self.assertEqual(fb.shape, (ny, nx, 3))
        self.assertEqual(fb.dtype, np.float32)
        flat = fb.reshape(-1, 3)
        for i, j in [(0, 0), (13, 12), (31, 23), (5, 17)]:
            np.testing.assert_array_equal(
                flat[i + j * nx], render_pixel(example.camera, example.scene, i, j, nx, ny))
        black = np.all(flat == 0, axis=1)
        background = np.all(flat == vec([0.2, 0.7, 0.8]), axis=1)
        self.assertTrue(np.any(black))
        self.assertTrue(np.all(black | background))

    def test_parallel_matches(self):
        example = FourSpheresExample()
        nx, ny = 16, 12
        sequential = render_image(example.camera, example.scene, nx, ny)
        parallel = render_parallel(example.camera, example.scene, nx, ny, workers=2)
        np.testing.assert_array_equal(parallel, sequential)
        self.assertGreater(sequential.max(), 0)

    def test_gradient(self):
        fb = render_gradient(8, 4)
        self.assertEqual(fb.shape, (4, 8, 3))
        for i, j in [(0, 0), (7, 3), (2, 1)]:
            np.testing.assert_allclose(fb[j, i], [j / 4, i / 8, 0])

    def test_bad_size(self):
        with self.assertRaises(ValueError):
            render_image(Camera(), Scene([]), 0, 10)
        with self.assertRaises(ValueError):
            render_gradient(10, -1)

    def test_bad_workers(self):
        with self.assertRaises(ValueError):
            render_parallel(Camera(), Scene([]), 4, 4, workers=0)
        with self.assertRaises(ValueError):
            render_parallel(Camera(), Scene([]), 4, 4, workers=-2)


if __name__ == '__main__':
    unittest.main()
