#!/usr/bin/env python3
"""Shuttle seat booker: command-line interface."""

import argparse
import asyncio
import logging
import sys
import time

import uvicorn

from config import WEB_HOST, WEB_PORT
from shuttle.exceptions import AuthError, ShuttleError
from shuttle.service import ShuttleService, build_service
from shuttle.state import ScheduleState


def cmd_departures(service: ShuttleService, args) -> int:
    departures = service.current_departures(args.user)
    if not departures:
        print("No active buses found right now.")
        return 0
    print("Current available buses:")
    for d in departures:
        print(f"  ID: {d.id} | Route: {d.name} | Bus: {d.bus_name}")
    return 0


def cmd_predict(service: ShuttleService, args) -> int:
    result = service.predict(args.user)
    if result.is_empty:
        print("No departures open for booking within the next hour.")
        return 0
    print(f"Upcoming buses (last bookable id: {result.last_current_id}):")
    for p in result.departures:
        d = p.departure
        print(f"  {p.label:>7} | opens {d.available_time} | leaves {d.departure_time} "
              f"| Route: {d.name} | Bus: {d.bus_name}{' | no return' if d.no_return else ''}")
    return 0


def cmd_book(service: ShuttleService, args) -> int:
    outcome = service.book_now(args.user, args.id)
    print(f"{'Booked' if outcome.success else 'FAILED'}: departure {outcome.departure_id}")
    print(outcome.detail)
    return 0 if outcome.success else 1


def cmd_schedule(service: ShuttleService, args) -> int:
    service.set_time(args.user, args.time)
    service.set_departure_id(args.user, args.id)
    armed = service.schedule(args.user)
    service.start()
    print(f"Booking of departure {armed.departure} scheduled for {armed.run_at:%H:%M:%S} "
          f"(in {int(armed.delay.total_seconds())}s). Ctrl+C to cancel.")
    try:
        while service.store.get(args.user).state in (ScheduleState.ARMED, ScheduleState.FIRING):
            time.sleep(0.5)
    except KeyboardInterrupt:
        service.cancel(args.user)
        print("\nScheduled booking cancelled.")
        return 1
    finally:
        service.shutdown()

    outcome = service.store.get(args.user).last_outcome
    if outcome is None:
        print("Booking did not run.")
        return 1
    print(f"{'Booked' if outcome.success else 'FAILED'}: departure {outcome.departure_id}")
    print(outcome.detail)
    return 0 if outcome.success else 1


def cmd_token(service: ShuttleService, args) -> int:
    if args.value:
        masked = service.set_token(args.value)
    else:
        masked = asyncio.run(service.acquire_token())
    print(f"Token saved: {masked}")
    return 0


def cmd_serve(args) -> int:
    # The app builds its own service and scheduler in its lifespan.
    uvicorn.run("web.app:app", host=args.host, port=args.port)
    return 0


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(description="Shuttle seat booker")
    parser.add_argument("--user", default="cli", help="User id for the audit log (default: cli)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("departures", help="List departures bookable right now")
    sub.add_parser("predict", help="Predict ids of departures opening within the next hour")

    book = sub.add_parser("book", help="Book a departure immediately")
    book.add_argument("--id", required=True, help="Departure id (a ~ prefix marks a predicted id)")

    schedule = sub.add_parser("schedule", help="Book a departure at a time of day, today")
    schedule.add_argument("--time", required=True, help='Time of day (HH:MM:SS, e.g. "15:10:22")')
    schedule.add_argument("--id", required=True, help="Departure id (a ~ prefix marks a predicted id)")

    token = sub.add_parser("token", help="Set the token, or obtain one via automated login")
    token.add_argument("value", nargs="?", help="Token to save; omit to log in with INTRA_LOGIN")

    serve = sub.add_parser("serve", help="Run the HTTP command API")
    serve.add_argument("--host", default=WEB_HOST, help=f"Bind address (default: {WEB_HOST})")
    serve.add_argument("--port", type=int, default=WEB_PORT, help=f"Port (default: {WEB_PORT})")

    args = parser.parse_args()
    if args.command == "serve":
        sys.exit(cmd_serve(args))

    commands = {
        "departures": cmd_departures,
        "predict": cmd_predict,
        "book": cmd_book,
        "schedule": cmd_schedule,
        "token": cmd_token,
    }

    service = build_service()
    try:
        sys.exit(commands[args.command](service, args))
    except AuthError:
        print("\nERROR: Unauthorized. Your token might be expired or invalid.")
        sys.exit(1)
    except ShuttleError as e:
        print(f"\nERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
