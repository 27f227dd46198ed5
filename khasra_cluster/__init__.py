"""Khasra clustering wizard backend.

Extracts typed placemark features from uploaded KMZ archives, tags them
into thematic layers, and groups nearby khasras (cadastral land parcels)
into spatially coherent clusters for land-suitability analysis.
"""

__version__ = "0.1.0"
