"""
Ad Unit Factory

Provides factory functions for creating the appropriate ad unit for a
variant, optionally resolving its configuration and scheduler from Settings.
"""

from .base_ad_unit import BaseAdUnit
from .config import AdUnitConfig, AdVariant
from .linear_ad_unit import LinearAdUnit
from .metrics import MetricsCollector
from .non_linear_ad_unit import NonLinearAdUnit
from .renderer import Renderer
from .scheduler import Scheduler, create_scheduler
from .settings import Settings


class AdUnitFactory:
    """
    Factory for creating VPAID ad unit instances.

    Examples:
        Create a linear ad unit explicitly:
        >>> ad = AdUnitFactory.create("linear", renderer=renderer)
        >>> isinstance(ad, LinearAdUnit)
        True

        Create an ad unit configured from settings:
        >>> ad = AdUnitFactory.from_settings("non_linear", get_settings(), renderer=renderer)
        >>> ad.get_ad_volume()
        50.0
    """

    _registry: dict[AdVariant, type[BaseAdUnit]] = {
        AdVariant.LINEAR: LinearAdUnit,
        AdVariant.NON_LINEAR: NonLinearAdUnit,
    }

    @staticmethod
    def create(
        variant: AdVariant | str = AdVariant.LINEAR,
        renderer: Renderer | None = None,
        config: AdUnitConfig | None = None,
        scheduler: Scheduler | None = None,
        metrics: MetricsCollector | None = None,
    ) -> BaseAdUnit:
        """
        Create the ad unit for a variant.

        Args:
            variant: 'linear' or 'non_linear'
            renderer: Presentation collaborator
            config: AdUnitConfig (variant preset if None)
            scheduler: Clock and timer source
            metrics: Metrics collector

        Returns:
            BaseAdUnit: LinearAdUnit or NonLinearAdUnit

        Raises:
            ValueError: For an unknown variant
        """
        ad_unit_cls = AdUnitFactory._registry[AdVariant(variant)]
        return ad_unit_cls(renderer=renderer, config=config, scheduler=scheduler, metrics=metrics)

    @staticmethod
    def from_settings(
        variant: AdVariant | str,
        settings: Settings,
        renderer: Renderer | None = None,
        scheduler: Scheduler | None = None,
        metrics: MetricsCollector | None = None,
    ) -> BaseAdUnit:
        """
        Create an ad unit whose config and scheduler come from Settings.

        An explicit scheduler wins over settings.scheduler_mode.
        """
        return AdUnitFactory.create(
            variant,
            renderer=renderer,
            config=settings.ad_unit_config(variant),
            scheduler=scheduler or create_scheduler(settings.scheduler_mode),
            metrics=metrics,
        )

    @staticmethod
    def create_linear(
        renderer: Renderer | None = None,
        config: AdUnitConfig | None = None,
        scheduler: Scheduler | None = None,
        metrics: MetricsCollector | None = None,
    ) -> LinearAdUnit:
        return LinearAdUnit(renderer=renderer, config=config, scheduler=scheduler, metrics=metrics)

    @staticmethod
    def create_non_linear(
        renderer: Renderer | None = None,
        config: AdUnitConfig | None = None,
        scheduler: Scheduler | None = None,
        metrics: MetricsCollector | None = None,
    ) -> NonLinearAdUnit:
        return NonLinearAdUnit(
            renderer=renderer, config=config, scheduler=scheduler, metrics=metrics
        )


def create_ad_unit(
    variant: AdVariant | str = AdVariant.LINEAR,
    renderer: Renderer | None = None,
    config: AdUnitConfig | None = None,
    scheduler: Scheduler | None = None,
    metrics: MetricsCollector | None = None,
) -> BaseAdUnit:
    """
    Convenience function to create an ad unit.

    Equivalent to AdUnitFactory.create(...).

    Examples:
        >>> scheduler = SimulatedScheduler()
        >>> ad = create_ad_unit("non_linear", HeadlessRenderer(scheduler), scheduler=scheduler)
    """
    return AdUnitFactory.create(
        variant, renderer=renderer, config=config, scheduler=scheduler, metrics=metrics
    )


__all__ = ["AdUnitFactory", "create_ad_unit"]
