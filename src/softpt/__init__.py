"""Software path tracer over analytic sphere scenes.

This package provides a Monte Carlo path tracer with two interchangeable
backends:
- A reference renderer in plain Python that follows the recursive estimator
  one pixel and one sample at a time
- A Taichi backend that evaluates the same estimator in parallel across pixels

Subpackages:
    core: Vector algebra, sampling, integrators and rendering loops
    geometry: Sphere primitive and ray-sphere intersection
    materials: Diffuse + emissive material model
    scene: Scene container, scene builder and GPU scene storage
    camera: Camera basis and primary ray generation
    preview: Pixel sinks, image export and preview display
"""

__version__ = "0.1.0"
