#!/usr/bin/env python3
"""
Test helper functions and factories for creating test data
"""

import json
from typing import Any, Dict, List, Optional, Union

TEST_API_URL = "http://api.test/v1"


def create_test_repeater(
    name: str = "GB3WR",
    tx: str = "145.7250",
    rx: str = "145.1250",
    tone: str = "88.5",
    modes: Optional[List[str]] = None,
    lat: float = 51.1725,
    lng: float = -2.6558,
    locator: str = "IO81QE",
    keeper: str = "G4ABC",
    human: str = "2 days ago",
    machine: int = 1700000000,
) -> Dict[str, Any]:
    """Factory function to create a repeater as the API returns it.

    Returns:
        Dictionary matching the /repeater/{name} JSON shape
    """
    return {
        "name": name,
        "tx": tx,
        "rx": rx,
        "tone": tone,
        "channel": "RV58",
        "modes": ["FM"] if modes is None else modes,
        "location": {
            "lat": lat,
            "lng": lng,
            "locator": locator,
            "placename": "Wells",
            "region": "SW",
        },
        "keeper": keeper,
        "api_version": "1",
        "updated": {"human": human, "machine": machine},
    }


def create_test_repeater_list(repeaters: List[Dict[str, Any]], locator: str = "IO81") -> Dict[str, Any]:
    """Factory function to create a /findbylocator/{locator} response."""
    return {
        "locator": locator,
        "range": 50,
        "repeaters": repeaters,
        "message": "",
        "status": "ok",
        "repeater_list": [r["name"] for r in repeaters],
    }


def to_body(data: Any) -> bytes:
    return json.dumps(data).encode("utf-8")


class FakeClock:
    """Controllable replacement for time.time"""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAPIClient:
    """Stands in for RepeaterAPIClient; answers from a url -> body/exception map"""

    def __init__(self, responses: Optional[Dict[str, Union[bytes, Exception]]] = None,
                 default: Union[bytes, Exception] = b"{}"):
        self.responses: Dict[str, Union[bytes, Exception]] = dict(responses or {})
        self.default = default
        self.requested: List[str] = []
        self.closed = False

    def respond(self, url: str, result: Union[bytes, Exception]) -> None:
        self.responses[url] = result

    def fetch(self, url: str) -> bytes:
        self.requested.append(url)
        result = self.responses.get(url, self.default)
        if isinstance(result, Exception):
            raise result
        return result

    def count(self, url: str) -> int:
        return self.requested.count(url)

    def close(self) -> None:
        self.closed = True
