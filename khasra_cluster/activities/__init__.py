"""Wizard activities: feature extraction, layer selection, clustering."""
