"""Headless playback -- two people on a short recording.

Demonstrates:
- Loading samples from CSV text into a SampleStore
- Driving a PlaybackEngine with a fixed frame dt
- Watching dwell grow through STILL intervals and reset on MOVING
- Logging telemetry through loguru
- Scrubbing backwards and seeing derived state reset

Run: python -m examples.playback
"""

import sys

from loguru import logger

from floorplay import PlaybackConfig, PlaybackEngine, SampleStore, attach_logging

CSV = """personId,tSec,angleDeg,radiusFactor,bench,motion,notes
P01,0,90,,T2,STILL,seated at the table
P01,8,90,,T2,,
P01,10,140,0.6,,,stands up
P01,14,200,1.1,,,walks out
P02,0,300,0.4,,,
P02,6,300,0.4,,,
P02,9,330,0.45,,MOVING,
P02,20,330,0.45,,,
"""


def print_frame(engine: PlaybackEngine) -> None:
    print(f"  t={engine.time_sec:5.2f}s")
    for eid in engine.store.ids():
        s = engine.get_entity_state_at(eid)
        if s.lifecycle_phase is None:
            print(f"    {eid}: not shown")
            continue
        print(
            f"    {eid}: angle={s.angle_deg:6.1f}  radius={s.radius_factor:.2f}"
            f"  {s.motion:<6}  dwell={s.dwell_magnitude:6.1f}"
            f"  {s.lifecycle_phase:<8} opacity={s.render_opacity:.2f}"
        )


def main() -> None:
    print("=== Playback ===\n")

    logger.remove()
    logger.add(sys.stderr, level="INFO", format="{time:HH:mm:ss} | {level} | {message}")
    logger.enable("floorplay")

    engine = PlaybackEngine(
        SampleStore.from_csv_text(CSV),
        PlaybackConfig(duration_sec=20.0),
    )
    # Only lifecycle changes are interesting at INFO.
    engine.bus.subscribe(
        "lifecycle_transitioned",
        lambda name, data: logger.info("{} {} -> {}", data["entity_id"], data["old"], data["new"]),
    )
    attach_logging(engine.bus, level="TRACE")

    engine.play()
    for _ in range(8):
        engine.run(25, 0.1)
        print_frame(engine)

    print("\nScrub back to 3s:")
    engine.set_time(3.0)
    print_frame(engine)

    print(f"\nDone. Clock stopped at tick {engine.clock.tick_number}.")


if __name__ == "__main__":
    main()
