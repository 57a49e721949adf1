"""REST data backend infrastructure package."""

from .rest_backend import RESOURCE_PATHS, RestDataBackend

__all__ = ["RESOURCE_PATHS", "RestDataBackend"]
