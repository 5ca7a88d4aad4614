"""Offline path tracer built on Taichi.

This package renders scenes of spheres, quads and prisms by Monte Carlo
path tracing, with support for:
- Diffuse, metal, dielectric and light materials
- A thin-lens camera with optional depth of field
- A render worker thread that streams integer progress to the caller

Subpackages:
    core: Ray utilities, orientation math, the integrator and render driver
    geometry: Sphere, quad and prism primitives
    materials: Scattering and emission per material kind
    scene: World construction, scene files and preset scenes
    camera: Viewport derivation and primary ray generation
    preview: PNG export, matplotlib preview and the denoiser hook
"""

__version__ = "0.1.0"
