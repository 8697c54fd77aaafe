"""Runtime image description and Dockerfile rendering."""

from .dockerfile import render_dockerfile, write_dockerfile
from .recipe import HealthCheck, ImageRecipe, Labels, RuntimeUser

__all__ = [
    "HealthCheck",
    "ImageRecipe",
    "Labels",
    "RuntimeUser",
    "render_dockerfile",
    "write_dockerfile",
]
