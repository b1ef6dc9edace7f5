import os
import tempfile
import unittest
import numpy as np
from PIL import Image as PIM

from spheretrace.ImLite import Image
from spheretrace.utils import vec
from spheretrace import cli


class TestEncode(unittest.TestCase):

    def test_white(self):
        im = Image(pixels=np.ones((3, 4, 3), np.float32))
        self.assertEqual(im.ipixels.dtype, np.uint8)
        self.assertTrue(np.all(im.ipixels == 255))

    def test_clamp(self):
        pix = np.zeros((2, 2, 3), np.float32)
        pix[:] = vec([-1.0, 0.5, 2.0])
        ip = Image(pixels=pix).ipixels
        self.assertTrue(np.all(ip[:, :, 0] == 0))
        self.assertTrue(np.all(np.abs(ip[:, :, 1].astype(int) - 128) <= 1))
        self.assertTrue(np.all(ip[:, :, 2] == 255))

    def test_integer_samples_clamp(self):
        # integers are linear samples too, so anything above 1 saturates
        ip = Image(pixels=np.full((1, 1, 3), 300, np.int32)).ipixels
        self.assertTrue(np.all(ip == 255))
        ip = Image(pixels=np.full((1, 1, 3), -4, np.int32)).ipixels
        self.assertTrue(np.all(ip == 0))

    def test_ppm_bytes(self):
        pix = np.array([[[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]],
                        [[0.0, 0.0, 1.0], [2.0, -3.0, 1.0]]], np.float32)
        data = Image(pixels=pix).encode()
        header = b"P6\n2 2\n255\n"
        self.assertEqual(data[:len(header)], header)
        self.assertEqual(data[len(header):], bytes([255, 0, 0, 0, 255, 0,
                                                   0, 0, 255, 255, 0, 255]))

    def test_from_framebuffer(self):
        width, height = 3, 2
        flat = [[i / 10, j / 10, 0.0] for j in range(height) for i in range(width)]
        im = Image.FromFramebuffer(flat, width, height)
        self.assertEqual(im.width, width)
        self.assertEqual(im.height, height)
        np.testing.assert_allclose(im.pixels[1, 2], flat[2 + 1 * width])
        with self.assertRaises(ValueError):
            Image.FromFramebuffer(flat[:-1], width, height)


class TestWrite(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.pix = np.zeros((5, 7, 3), np.float32)
        self.pix[:, :, 1] = 1.0

    def test_write_ppm(self):
        path = os.path.join(self.tmp.name, "out.ppm")
        Image(pixels=self.pix).writeToFile(path)
        with open(path, 'rb') as f:
            data = f.read()
        self.assertTrue(data.startswith(b"P6\n7 5\n255\n"))
        self.assertEqual(len(data), len(b"P6\n7 5\n255\n") + 7 * 5 * 3)

    def test_write_png(self):
        path = os.path.join(self.tmp.name, "out.png")
        Image(pixels=self.pix).writeToFile(path)
        with PIM.open(path) as pim:
            self.assertEqual(pim.format, 'PNG')
            self.assertEqual(pim.size, (7, 5))
            self.assertEqual(pim.getpixel((3, 2)), (0, 255, 0))

    def test_failed_write(self):
        path = os.path.join(self.tmp.name, "missing", "out.ppm")
        with self.assertRaises(OSError):
            Image(pixels=self.pix).writeToFile(path)
        self.assertFalse(os.path.exists(path))


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def test_gradient(self):
        path = os.path.join(self.tmp.name, "gradient.ppm")
        self.assertEqual(cli.main(['gradient', path, '--width', '4', '--height', '3', '--quiet']), 0)
        with open(path, 'rb') as f:
            data = f.read()
        self.assertTrue(data.startswith(b"P6\n4 3\n255\n"))
        self.assertEqual(len(data), len(b"P6\n4 3\n255\n") + 4 * 3 * 3)

    def test_scene(self):
        path = os.path.join(self.tmp.name, "spheres.ppm")
        self.assertEqual(cli.main(['four-spheres', path, '--width', '8', '--height', '6', '--quiet']), 0)
        with PIM.open(path) as pim:
            self.assertEqual(pim.size, (8, 6))

    def test_unwritable(self):
        path = os.path.join(self.tmp.name, "missing", "out.ppm")
        self.assertEqual(cli.main(['gradient', path, '--width', '2', '--height', '2', '--quiet']), 1)

    def test_bad_arguments(self):
        with self.assertRaises(SystemExit):
            cli.main(['gradient', 'x.ppm', '--width', '0'])
        with self.assertRaises(SystemExit):
            cli.main(['nonsense'])


if __name__ == '__main__':
    unittest.main()
