"""Free-text layer classification.

A placemark's name and description are joined, lower-cased, and tested
against an ordered rule chain. The first rule whose keyword appears as a
substring wins; when none match the layer is ``Other``. Rule order is
fixed: text mentioning both "building" and "water" is ``Buildings``.
"""

from __future__ import annotations

from typing import NamedTuple

from khasra_cluster.activities.extract_features._constants import CLASSIFICATION_SEPARATOR
from khasra_cluster.models.feature import Layer


class LayerRule(NamedTuple):
    """Assign *layer* when any of *keywords* occurs in the text."""

    layer: Layer
    keywords: tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


LAYER_RULES: tuple[LayerRule, ...] = (
    LayerRule(Layer.BUILDINGS, ("building",)),
    LayerRule(Layer.SETTLEMENTS, ("settlement", "city", "town")),
    LayerRule(Layer.CROPS, ("crop", "agriculture", "farm")),
    LayerRule(Layer.WATER, ("water", "river", "lake")),
    LayerRule(Layer.SLOPES, ("slope", "elevation", "terrain")),
)


def classification_text(name: str, description: str) -> str:
    """The lower-cased string the rules are matched against."""
    return f"{name}{CLASSIFICATION_SEPARATOR}{description}".lower()


def classify_layer(
    name: str,
    description: str,
    rules: tuple[LayerRule, ...] = LAYER_RULES,
) -> Layer:
    """Return the layer of the first matching rule, or ``Layer.OTHER``."""
    text = classification_text(name, description)
    for rule in rules:
        if rule.matches(text):
            return rule.layer
    return Layer.OTHER
