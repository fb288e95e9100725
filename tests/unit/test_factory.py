"""Tests for AdUnitFactory."""

import pytest

from vpaid_adapter.ad_unit_factory import AdUnitFactory, create_ad_unit
from vpaid_adapter.config import AdUnitConfig
from vpaid_adapter.exceptions import VpaidConfigValidationError
from vpaid_adapter.linear_ad_unit import LinearAdUnit
from vpaid_adapter.non_linear_ad_unit import NonLinearAdUnit
from vpaid_adapter.scheduler import AsyncioScheduler, SimulatedScheduler
from vpaid_adapter.settings import Settings


class TestAdUnitFactory:
    """Test variant dispatch."""

    def test_create_linear(self, renderer, scheduler):
        ad = AdUnitFactory.create("linear", renderer=renderer, scheduler=scheduler)

        assert isinstance(ad, LinearAdUnit)
        assert ad.renderer is renderer
        assert ad.scheduler is scheduler

    def test_create_non_linear(self, renderer, scheduler):
        ad = create_ad_unit("non_linear", renderer, scheduler=scheduler)

        assert isinstance(ad, NonLinearAdUnit)
        assert ad.get_ad_volume() == 50.0

    def test_typed_helpers(self, renderer, scheduler):
        assert isinstance(AdUnitFactory.create_linear(renderer, scheduler=scheduler), LinearAdUnit)
        assert isinstance(
            AdUnitFactory.create_non_linear(renderer, scheduler=scheduler), NonLinearAdUnit
        )

    def test_unknown_variant(self, renderer):
        with pytest.raises(ValueError):
            AdUnitFactory.create("interstitial", renderer=renderer)

    def test_mismatched_config_rejected(self, renderer, scheduler):
        with pytest.raises(VpaidConfigValidationError):
            AdUnitFactory.create(
                "linear", renderer=renderer, config=AdUnitConfig.non_linear(), scheduler=scheduler
            )

    def test_default_scheduler_is_real(self, renderer):
        ad = AdUnitFactory.create("linear", renderer=renderer)

        assert isinstance(ad.scheduler, AsyncioScheduler)


class TestFromSettings:
    """Test creation from Settings."""

    def test_simulated_scheduler_from_settings(self, renderer):
        settings = Settings(scheduler_mode="simulated")

        ad = AdUnitFactory.from_settings("linear", settings, renderer=renderer)

        assert isinstance(ad.scheduler, SimulatedScheduler)

    def test_explicit_scheduler_wins(self, renderer, scheduler):
        settings = Settings(scheduler_mode="real")

        ad = AdUnitFactory.from_settings("linear", settings, renderer=renderer, scheduler=scheduler)

        assert ad.scheduler is scheduler

    def test_config_from_settings(self, renderer, scheduler):
        settings = Settings(variants={"non_linear": {"defaults": {"volume": 20.0}}})

        ad = AdUnitFactory.from_settings(
            "non_linear", settings, renderer=renderer, scheduler=scheduler
        )

        assert ad.get_ad_volume() == 20.0
        assert ad.config.volume_scale.maximum == 100.0
