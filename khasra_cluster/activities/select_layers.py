"""Layer selection activity.

The wizard's second step lets the user choose which thematic layers to
carry forward. These helpers count features per layer and filter a
feature sequence down to the selected layers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from khasra_cluster.models.feature import Layer

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from khasra_cluster.models.feature import Feature

logger = logging.getLogger("khasra_cluster.activities.select_layers")


def parse_layer_names(names: Iterable[str]) -> list[Layer]:
    """Convert layer display names (``"Buildings"``, ...) to ``Layer`` members.

    Duplicates are collapsed; the result follows wizard layer order.

    Raises:
        ValueError: If a name is not a known layer.
    """
    requested = set()
    for name in names:
        try:
            requested.add(Layer(name))
        except ValueError:
            valid = ", ".join(layer.value for layer in Layer)
            msg = f"Unknown layer {name!r} (expected one of: {valid})"
            raise ValueError(msg) from None
    return [layer for layer in Layer if layer in requested]


def count_layers(features: Iterable[Feature]) -> dict[str, int]:
    """Feature count per layer, every layer present, in wizard order."""
    counts = {layer.value: 0 for layer in Layer}
    for feature in features:
        counts[feature.layer.value] += 1
    return counts


def filter_by_layers(features: Sequence[Feature], selected_layers: Iterable[Layer]) -> list[Feature]:
    """Keep features whose layer is selected, preserving input order."""
    selected = frozenset(selected_layers)
    kept = [f for f in features if f.layer in selected]
    logger.info(
        "Layer selection | layers=%s | kept=%d | dropped=%d",
        ",".join(layer.value for layer in Layer if layer in selected) or "-",
        len(kept),
        len(features) - len(kept),
    )
    return kept
