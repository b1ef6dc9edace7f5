import numpy as np
from .utils import vec, normalize

class Hit:
    def __init__(self, t, point=None, normal=None, sphere=None):
        """Create a Hit with the given data.

        Parameters:
          t : float -- the t value of the intersection along the ray
          point : (3,) -- the 3D point where the intersection happens
          normal : (3,) -- the 3D outward-facing unit normal to the surface at the hit point
          sphere : (Sphere) -- the surface that was hit
        """
        self.t = t
        self.point = point
        self.normal = normal
        self.sphere = sphere

    @property
    def material(self):
        return self.sphere.material if self.sphere is not None else None

# Value to represent absence of an intersection
no_hit = Hit(np.inf)


class Sphere:

    def __init__(self, center, radius, material):
        """Create a sphere with the given center and radius.

        Parameters:
          center : (3,) -- a 3D point specifying the sphere's center
          radius : float -- a Python float specifying the sphere's radius
          material : Material -- the material of the surface
        """
        if radius <= 0:
            raise ValueError(f"sphere radius must be positive, got {radius!r}")
        self.center = vec(center)
        self.center.setflags(write=False)
        self.radius = float(radius)
        self.material = material

    def intersect(self, ray):
        """Computes the distance along the ray to the first visible point of this sphere.

        The ray direction is expected to be unit length, so that the
        returned value is a distance. If the ray starts inside the sphere
        the exit point is returned.

        Parameters:
          ray : Ray -- the ray to intersect with the sphere
        Return:
          float or None -- the distance, or None on a miss
        """
        L = self.center - ray.origin
        tca = np.dot(L, ray.direction)
        d2 = np.dot(L, L) - tca * tca
        r2 = self.radius * self.radius
        if d2 > r2:
            return None

        thc = np.sqrt(r2 - d2)
        t0 = tca - thc
        t1 = tca + thc
        if t0 < 0 and t1 < 0:
            # entirely behind the origin
            return None
        if t0 < 0:
            return float(t1)
        if t1 < 0:
            return float(t0)
        return float(min(t0, t1))

    def normal_at(self, point):
        """Outward unit normal at a point on the surface."""
        return normalize(point - self.center)

    def __repr__(self):
        return f"Sphere({self.center.tolist()}, {self.radius}, {self.material!r})"
