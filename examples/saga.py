"""
Saga Pattern (Compensating Flows)

Demonstrates backward recovery with jumps: when a booking step cannot
complete, it jumps to a compensation flow that undoes what succeeded so far.

Flow "book_holiday":
1. Book flight
2. Book hotel
3. Book car (destination="Atlantis" has no cars -> jump to "cancel_holiday")

Flow "cancel_holiday":
1. Cancel hotel
2. Cancel flight, mark the booking as failed and stop

Run with:
    PYTHONPATH=src python3 examples/saga.py
"""

import asyncio
import logging

from pyflows import Flows, HookKind

# =============================================================================
# FORWARD STEPS
# =============================================================================


async def book_flight(data, context):
    print(f"   [1] Booking flight to {data['destination']}...")
    await asyncio.sleep(0.05)
    return {**data, "flight": f"FLIGHT-{data['destination'].upper()}"}


async def book_hotel(data, context):
    print(f"   [2] Booking hotel in {data['destination']}...")
    await asyncio.sleep(0.05)
    return {**data, "hotel": f"HOTEL-{data['destination'].upper()}"}


async def book_car(data, context):
    print(f"   [3] Booking car in {data['destination']}...")
    await asyncio.sleep(0.05)
    if data["destination"] == "Atlantis":
        print("   [3] No cars available, compensating")
        return {**data, "$$": {"jump": "cancel_holiday"}}
    return {**data, "car": f"CAR-{data['destination'].upper()}", "status": "booked"}


# =============================================================================
# COMPENSATION STEPS
# =============================================================================


def cancel_hotel(data, context):
    print(f"   [undo] Cancelling {data['hotel']}")
    return {k: v for k, v in data.items() if k != "hotel"}


def cancel_flight(data, context):
    print(f"   [undo] Cancelling {data['flight']}")
    payload = {k: v for k, v in data.items() if k not in ("flight", "$$")}
    return {**payload, "status": "failed", "$$": {"done": True}}


# =============================================================================
# MAIN
# =============================================================================


async def main():
    logging.basicConfig(level=logging.INFO)

    flows = Flows()
    flows.register("book_holiday", [book_flight, book_hotel, book_car])
    flows.register("cancel_holiday", [cancel_hotel, cancel_flight])

    @flows.on(HookKind.POST_FLOW)
    def report(event):
        print(f"   [{event.flow_name}] finished: {event.output}")

    for destination in ("Paris", "Atlantis"):
        print(f"\n=== Booking holiday to {destination} ===")
        result = await flows.execute("book_holiday", {"destination": destination})
        print(f"Result: {result['status']}")


if __name__ == "__main__":
    asyncio.run(main())
