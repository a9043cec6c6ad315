"""
tests/test_metrics.py
──────────────────────
Tests for métrage / rendement / disponibilité derivation.
"""
import math

import pytest

from src.analytics.metrics import derive_metrics, rederive, touches_inputs
from src.errors import ValidationError


class TestDeriveMetrics:
    def test_no_running_hours(self):
        m = derive_metrics(0, 0, 100)
        assert (m.metrage, m.rendement, m.disponibilite) == (40, 0, 0)

    def test_full_availability(self):
        m = derive_metrics(10, 0, 100)
        assert (m.metrage, m.rendement, m.disponibilite) == (40, 4, 100)

    def test_partial_availability(self):
        m = derive_metrics(6, 2, 250)
        assert m.metrage == 100
        assert m.rendement == 17  # 100 / 6 = 16.67
        assert m.disponibilite == 75

    def test_all_zero(self):
        m = derive_metrics(0, 0, 0)
        assert (m.metrage, m.rendement, m.disponibilite) == (0, 0, 0)

    def test_downtime_only(self):
        m = derive_metrics(0, 8, 0)
        assert m.disponibilite == 0
        assert m.rendement == 0

    def test_rounds_half_up(self):
        # 1.25 × 0.4 = 0.5 → 1
        assert derive_metrics(1, 0, 1.25).metrage == 1
        # 1 / 8 × 100 = 12.5 → 13
        assert derive_metrics(1, 7, 0).disponibilite == 13

    def test_custom_factor(self):
        assert derive_metrics(1, 0, 100, factor=0.5).metrage == 50

    @pytest.mark.parametrize("h,d,v", [(3, 5, 0), (7.5, 0.5, 1234.5), (0.1, 23.9, 5), (24, 0, 99999)])
    def test_availability_in_range(self, h, d, v):
        assert 0 <= derive_metrics(h, d, v).disponibilite <= 100

    def test_idempotent(self):
        assert derive_metrics(6.3, 1.7, 412.9) == derive_metrics(6.3, 1.7, 412.9)

    @pytest.mark.parametrize(
        "h,d,v",
        [(-1, 0, 100), (1, -0.5, 100), (1, 0, -10), (math.nan, 0, 1), (1, math.inf, 1), ("6", 0, 1), (True, 0, 1), (None, 0, 1)],
    )
    def test_invalid_inputs_rejected(self, h, d, v):
        with pytest.raises(ValidationError):
            derive_metrics(h, d, v)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            derive_metrics(-1, 0, 0)


class TestRederive:
    def test_input_change_recomputes(self):
        current = {"heures_marche": 10, "duree_arret": 0, "volume_saute": 100,
                   "metrage": 40, "rendement": 4, "disponibilite": 100}
        merged = rederive(current, {"duree_arret": 10})
        assert merged["disponibilite"] == 50
        assert merged["metrage"] == 40

    def test_caller_derived_values_ignored(self):
        current = {"heures_marche": 10, "duree_arret": 0, "volume_saute": 100,
                   "metrage": 40, "rendement": 4, "disponibilite": 100}
        merged = rederive(current, {"metrage": 9999, "disponibilite": 3})
        assert merged["metrage"] == 40
        assert merged["disponibilite"] == 100

    def test_non_input_change_keeps_derived(self):
        current = {"heures_marche": 10, "duree_arret": 0, "volume_saute": 100,
                   "metrage": 40, "rendement": 4, "disponibilite": 100, "observation": None}
        merged = rederive(current, {"observation": "RAS"})
        assert merged["observation"] == "RAS"
        assert (merged["metrage"], merged["rendement"], merged["disponibilite"]) == (40, 4, 100)

    def test_missing_derived_values_filled(self):
        current = {"heures_marche": 10, "duree_arret": 0, "volume_saute": 100,
                   "metrage": None, "rendement": None, "disponibilite": None}
        merged = rederive(current, {})
        assert merged["metrage"] == 40

    def test_touches_inputs(self):
        assert touches_inputs({"volume_saute": 1})
        assert not touches_inputs({"panneau": "P2", "metrage": 5})
