"""Optical detector geometry and wire-plane projections."""

from .base import Geometry, WirePlane
from .factories import geo_factory

__all__ = ["Geometry", "WirePlane", "geo_factory"]
