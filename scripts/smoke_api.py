#!/usr/bin/env python3
"""Smoke test for the Pool Analytics API against a running server."""

import asyncio
import json
import sys

import httpx

BASE_URL = "http://localhost:8000"


async def smoke(event_id: str):
    """Hit every endpoint once for *event_id* and print a short summary."""
    async with httpx.AsyncClient() as client:
        print(f"Testing Pool Analytics API for event {event_id}...\n")

        # 1. Health check
        print("1. Testing /api/health")
        try:
            response = await client.get(f"{BASE_URL}/api/health")
            print(f"   Status: {response.status_code}")
            print(f"   Response: {json.dumps(response.json(), indent=2)}\n")
        except Exception as e:
            print(f"   Error: {e}\n")

        # 2. Full history and rolling window
        for policy in ("full_history", "rolling_window"):
            print(f"2. Testing /api/events/{{id}}/analytics?policy={policy}")
            try:
                response = await client.get(
                    f"{BASE_URL}/api/events/{event_id}/analytics", params={"policy": policy}
                )
                print(f"   Status: {response.status_code}")
                data = response.json()
                if response.status_code != 200:
                    print(f"   {data.get('error')}: {data.get('detail')}\n")
                    continue
                print(f"   {data['title']}: pool {data['totalPool']:.2f}, "
                      f"{data['participantCount']} participants")
                print(f"   Data points: {len(data['historicalData'])}")
                for opt in data["options"]:
                    share = data["currentPercentages"].get(opt["id"], 0.0)
                    print(f"   - {opt['label']}: {share:.2f}%")
                print()
            except Exception as e:
                print(f"   Error: {e}\n")

        # 3. Realtime snapshot
        print("3. Testing /api/events/{id}/realtime")
        try:
            response = await client.get(f"{BASE_URL}/api/events/{event_id}/realtime")
            print(f"   Status: {response.status_code}")
            data = response.json()
            print(f"   Bets in the last hour: {data.get('bettingVelocity')}")
            print(f"   Momentum: {data.get('momentum')}\n")
        except Exception as e:
            print(f"   Error: {e}\n")

        # 4. Insights
        print("4. Testing /api/events/{id}/insights")
        try:
            response = await client.get(f"{BASE_URL}/api/events/{event_id}/insights")
            print(f"   Status: {response.status_code}")
            data = response.json()
            print(f"   Leading: {data.get('leadingOption')} ({data.get('trend')})")
            print(f"   Volatility: {data.get('volatility')} ({data.get('volatilityScore')})")
            print(f"   Peak betting time: {data.get('peakBettingTime')}\n")
        except Exception as e:
            print(f"   Error: {e}\n")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: smoke_api.py EVENT_ID")
        sys.exit(2)
    asyncio.run(smoke(sys.argv[1]))
