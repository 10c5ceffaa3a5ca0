"""Basic usage examples for the f1feed client."""

import asyncio

from f1feed import LATEST, AsyncOpenF1Client, Filter, OpenF1Client


def main() -> None:
    with OpenF1Client() as f1:
        # The session currently running, or the most recent one
        print("=== Latest session ===")
        session = f1.latest_session()
        if session is None:
            print("  No session found.")
            return
        print(f"  {session.session_name} - {session.location}, {session.country_name}")

        # Current running order from the latest position sample per driver
        print("\n=== Running order ===")
        latest: dict[int, tuple] = {}
        for p in f1.position(session_key=LATEST):
            if p.driver_number is None or p.date is None:
                continue
            if p.driver_number not in latest or p.date >= latest[p.driver_number][0]:
                latest[p.driver_number] = (p.date, p.position)
        drivers = {d.driver_number: d for d in f1.drivers(session_key=LATEST)}
        for dn, (_, pos) in sorted(latest.items(), key=lambda item: item[1][1] or 99):
            driver = drivers.get(dn)
            print(f"  P{pos} {driver.label if driver else dn}")

        # Flags raised in the session
        print("\n=== Flags ===")
        for rc in f1.race_control(session_key=LATEST):
            if rc.is_flag and rc.date is not None:
                print(f"  {rc.date:%H:%M:%S} {rc.flag or 'FLAG'}: {rc.message}")

        # Laps 1-5 for driver #1
        print("\n=== Laps 1-5 for driver #1 ===")
        laps = f1.laps(
            session_key=LATEST,
            driver_number=1,
            lap_number=Filter(gte=1, lte=5),
        )
        for lap in laps:
            duration = f"{lap.lap_duration:.3f}s" if lap.lap_duration else "N/A"
            print(f"  Lap {lap.lap_number}: {duration}")

    # Everything the replay needs, fetched concurrently
    print("\n=== Session snapshot ===")
    snapshot = asyncio.run(_snapshot(session.session_key))
    print(
        f"  {len(snapshot.drivers)} drivers, {len(snapshot.positions)} positions, "
        f"{len(snapshot.laps)} laps, {len(snapshot.race_control)} messages"
    )
    if snapshot.weather:
        w = snapshot.weather[-1]
        print(f"  Air: {w.air_temperature}°C, Track: {w.track_temperature}°C")


async def _snapshot(session_key: int | str):
    async with AsyncOpenF1Client() as f1:
        return await f1.session_snapshot(session_key)


if __name__ == "__main__":
    main()
