#!/usr/bin/env python3
"""Log in, print every state change and optionally request an arming state.

Credentials come from ``SECUREHOME_USERNAME`` / ``SECUREHOME_PASSWORD``
(and ``SECUREHOME_KEYPAD_PIN`` for disarming), or from the command line.

Examples::

    python scripts/monitor.py --duration 60
    python scripts/monitor.py --request ARMED_AWAY --duration 20 -v
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pysecurehome import ArmingState, RemoteState, SecureHomeClient, SecureHomeConfig, SecureHomeError  # noqa: E402


def _describe(state: RemoteState) -> str:
    if state.alarm is None:
        return "no alarm section"
    open_sensors = sorted(s.name or s.id for s in state.contact_sensors.values() if s.open)
    return (
        f"arming={state.alarm.arming_state.name} fault={state.alarm.fault_status.name} "
        f"sensors={len(state.contact_sensors)} open={open_sensors or '-'}"
    )


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--username", help="Account e-mail (default: SECUREHOME_USERNAME)")
    parser.add_argument("--password", help="Account password (default: SECUREHOME_PASSWORD)")
    parser.add_argument("--cache-ttl", type=float, help="Seconds between refreshes")
    parser.add_argument("--duration", type=float, default=30.0, help="Seconds to keep monitoring")
    parser.add_argument(
        "--request",
        choices=[s.name for s in (ArmingState.DISARMED, ArmingState.ARMED_AWAY, ArmingState.ARMED_STAY)],
        help="Arming state to request after start-up",
    )
    parser.add_argument("--preferences", action="store_true", help="Also fetch user preferences")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.username:
        overrides["username"] = args.username
    if args.password:
        overrides["password"] = args.password
    if args.cache_ttl:
        overrides["cache_ttl"] = args.cache_ttl
    config = SecureHomeConfig.from_env(**overrides)

    def on_state(state: RemoteState) -> None:
        print(f"state: {_describe(state)}")

    async with SecureHomeClient(config, on_state=on_state) as client:
        client.recovery.add_listener(lambda exc: print(f"recovery: {exc}"))
        try:
            await client.start()
        except SecureHomeError as exc:
            print(f"start failed: {exc}", file=sys.stderr)
            return 1

        if args.preferences:
            try:
                prefs = await client.fetch_user_preferences()
                print(f"preferences: {sorted(prefs.raw)}")
            except SecureHomeError as exc:
                print(f"preferences unavailable: {exc}")

        if args.request:
            error = await client.request_arming_state(ArmingState[args.request])
            print(f"request {args.request}: {'ok' if error is None else error}")

        await asyncio.sleep(args.duration)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
