"""Terrain generation: noise, heightfield and classification."""

from .classification import classify, classify_grid
from .heightfield import FlatSite, HeightfieldGenerator
from .noise import ConstantNoise, NoiseChannel, NoiseSource, SimplexNoise

__all__ = [
    "ConstantNoise",
    "FlatSite",
    "HeightfieldGenerator",
    "NoiseChannel",
    "NoiseSource",
    "SimplexNoise",
    "classify",
    "classify_grid",
]
