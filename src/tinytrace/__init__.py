"""Interactive Whitted-style ray tracer built on Taichi.

This package renders a small scene of reflective and refractive spheres over
a checkerboard floor every frame, with support for:
- Recursive reflection and refraction up to a bounded depth
- Lambert diffuse and Phong specular lighting with hard shadows
- Reduced-resolution rendering with run-length compaction into rectangles
- Interactive (Taichi GGUI) and headless (numpy canvas) displays

Subpackages:
    core: Ray utilities, render configuration, shading and the frame renderer
    geometry: Sphere and checkerboard primitives with intersection tests
    materials: Phong-style material model and presets
    scene: Scene description, GPU scene storage and the default scene
    camera: Pinhole camera with per-cell ray generation
    preview: Displays, the application loop and PNG export
"""

__version__ = "0.1.0"
