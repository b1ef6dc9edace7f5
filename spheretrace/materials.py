import numpy as np
from .utils import vec

class Material:

    def __init__(self, diffuse_color, albedo=(1., 0.), specular_exponent=1.):
        """
        Create a new material with the given parameters.

        Parameters:
          diffuse_color : (3,) -- base color, channels nominally in [0,1]
          albedo : (2,) -- weights of the (diffuse, specular) terms
          specular_exponent : float -- Phong exponent (shininess)

        The arrays are copied and made read-only, so materials shared
        between spheres never alias mutable state.
        """
        self.diffuse_color = vec(diffuse_color)
        self.albedo = np.array(albedo, dtype=np.float64)
        self.specular_exponent = float(specular_exponent)

        if self.albedo.shape != (2,):
            raise ValueError(f"albedo needs (diffuse, specular) weights, got {albedo!r}")
        if self.specular_exponent <= 0:
            raise ValueError(f"specular exponent must be positive, got {specular_exponent!r}")

        self.diffuse_color.setflags(write=False)
        self.albedo.setflags(write=False)

    def __repr__(self):
        return (f"Material({self.diffuse_color.tolist()}, "
                f"albedo={self.albedo.tolist()}, p={self.specular_exponent})")
