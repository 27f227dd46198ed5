"""Tests for free-text layer classification.

Rules are matched against ``"<name> <description>"`` lower-cased, in a
fixed order, first match wins.
"""

from __future__ import annotations

import pytest

from khasra_cluster.activities.extract_features import (
    LAYER_RULES,
    LayerRule,
    classification_text,
    classify_layer,
)
from khasra_cluster.models.feature import Layer


class TestRuleChain:
    """Each keyword maps to its layer."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("School Building", Layer.BUILDINGS),
            ("Old settlement", Layer.SETTLEMENTS),
            ("City limits", Layer.SETTLEMENTS),
            ("Town hall", Layer.SETTLEMENTS),
            ("Crop circle", Layer.CROPS),
            ("Agriculture plot", Layer.CROPS),
            ("FARM 12", Layer.CROPS),
            ("Water tank", Layer.WATER),
            ("River bank", Layer.WATER),
            ("Lake", Layer.WATER),
            ("Steep slope", Layer.SLOPES),
            ("Elevation marker", Layer.SLOPES),
            ("Rough terrain", Layer.SLOPES),
            ("Khasra 42", Layer.OTHER),
        ],
    )
    def test_keyword(self, text: str, expected: Layer) -> None:
        assert classify_layer(text, "") is expected

    def test_description_participates(self) -> None:
        assert classify_layer("Khasra 7", "next to the lake") is Layer.WATER

    def test_substring_match(self) -> None:
        """Keywords match inside longer words ("farmhouse", "township")."""
        assert classify_layer("Farmhouse", "") is Layer.CROPS
        assert classify_layer("Township road", "") is Layer.SETTLEMENTS


class TestPriority:
    """Earlier rules win over later ones."""

    def test_building_beats_water(self) -> None:
        assert classify_layer("Old Building near River", "") is Layer.BUILDINGS

    def test_building_in_description_beats_water_in_name(self) -> None:
        assert classify_layer("Water works", "pump building") is Layer.BUILDINGS

    def test_settlement_beats_crops(self) -> None:
        assert classify_layer("Farm town", "") is Layer.SETTLEMENTS

    def test_crops_beats_slopes(self) -> None:
        assert classify_layer("Terraced farm on a slope", "") is Layer.CROPS

    def test_rule_order(self) -> None:
        assert [rule.layer for rule in LAYER_RULES] == [
            Layer.BUILDINGS,
            Layer.SETTLEMENTS,
            Layer.CROPS,
            Layer.WATER,
            Layer.SLOPES,
        ]


class TestCustomRules:
    """The chain is data: callers can pass their own rules."""

    def test_custom_rules(self) -> None:
        rules = (LayerRule(Layer.WATER, ("canal",)),)
        assert classify_layer("Canal", "", rules) is Layer.WATER
        assert classify_layer("Building", "", rules) is Layer.OTHER

    def test_rule_matches(self) -> None:
        assert LayerRule(Layer.SLOPES, ("ridge", "hill")).matches("a hill top")

    def test_classification_text_joins_with_space(self) -> None:
        assert classification_text("Khasra", "Lake SIDE") == "khasra lake side"

    def test_join_does_not_create_keyword(self) -> None:
        """Name and description are separated, so "ci" + "ty" is not "city"."""
        assert classify_layer("ci", "ty") is Layer.OTHER
