#!/usr/bin/env python3
"""Example walking a linear and a non-linear ad unit through their lifecycle.

Runs on a SimulatedScheduler, so the whole session completes instantly.
"""

import json

from vpaid_adapter import (
    AdEvent,
    HeadlessRenderer,
    SimulatedScheduler,
    configure_logging,
    create_ad_unit,
)


CREATIVE = {
    "AdParameters": json.dumps(
        {
            "ads": [{"thumbnailUrl": "thumb.jpg", "title": "Ten things", "sourceName": "News"}],
            "videos": [{"url": "https://cdn.example.com/ad.mp4", "mimetype": "video/mp4"}],
            "overlays": ["overlay.png"],
        }
    )
}


def subscribe_all(ad, label: str) -> None:
    for event in AdEvent:
        ad.subscribe(
            event.value,
            lambda *args, name=event.value: print(f"[{label}] {name} {args if args else ''}"),
        )


def linear_demo() -> None:
    scheduler = SimulatedScheduler()
    renderer = HeadlessRenderer(scheduler, media_duration=8.0)
    ad = create_ad_unit("linear", renderer, scheduler=scheduler)
    subscribe_all(ad, "linear")

    ad.init_ad(1280, 720, "normal", 1000, CREATIVE)
    ad.start_ad()
    scheduler.advance(3.0)

    ad.pause_ad()
    scheduler.advance(5.0)
    ad.resume_ad()

    ad.set_ad_volume(0.4)
    scheduler.advance(10.0)

    print(f"[linear] final state={ad.state.value} events={ad.session.event_names()}")


def non_linear_demo() -> None:
    scheduler = SimulatedScheduler()
    renderer = HeadlessRenderer(scheduler, media_duration=6.0)
    ad = create_ad_unit("non_linear", renderer, scheduler=scheduler)
    subscribe_all(ad, "non_linear")

    ad.init_ad(1280, 720, "normal", 1000, CREATIVE)
    ad.start_ad()
    scheduler.advance(1.0)

    # Extends the countdown by the configured click extension
    ad.click()
    scheduler.advance(1.0)

    ad.switch_to_linear()
    scheduler.advance(7.0)

    print(f"[non_linear] final state={ad.state.value}")
    print(ad.session.to_json())


if __name__ == "__main__":
    configure_logging(level="INFO")
    linear_demo()
    non_linear_demo()
