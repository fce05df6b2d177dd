import json
from typing import Any, List, Optional

import pytest
import requests

from crm_migration.client import RateLimitedClient, RateLimiter
from crm_migration.config import MigrationConfig
from crm_migration.models.record import SourceRecord


def make_response(status_code: int = 200, body: Any = None, text: Optional[str] = None,
                  reason: str = "") -> requests.Response:
    """Build a real requests.Response with the given status and JSON body."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    if text is not None:
        response._content = text.encode("utf-8")
    elif body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Stands in for requests.Session: records calls, replays queued outcomes."""

    def __init__(self, outcomes: Optional[List[Any]] = None, default: Any = None):
        self.headers = {}
        self.calls = []
        self.closed = False
        self._outcomes = list(outcomes or [])
        self._default = default

    def queue(self, outcome: Any) -> None:
        self._outcomes.append(outcome)

    def request(self, method, url, json=None, params=None, timeout=None):
        self.calls.append({
            "method": method,
            "url": url,
            "json": json,
            "params": params,
            "timeout": timeout,
            "headers": dict(self.headers),
        })
        outcome = self._outcomes.pop(0) if self._outcomes else self._default
        if outcome is None:
            outcome = make_response(200, {})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


class FakeClock:
    """Manual clock; sleep() advances time instead of blocking."""

    def __init__(self, start: float = 0.0):
        self.time = start
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self.time

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.time += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_client(clock):
    """Factory for clients bound to a FakeSession and the fake clock."""

    def _make(session: FakeSession, base_url: str = "https://api.example.com",
              auth_header: str = "Bearer test", max_per_second: int = 5) -> RateLimitedClient:
        limiter = RateLimiter(max_per_second, clock=clock.now, sleep=clock.sleep)
        return RateLimitedClient(base_url, auth_header, session=session, limiter=limiter)

    return _make


@pytest.fixture
def config() -> MigrationConfig:
    return MigrationConfig(
        source_base_url="https://www.zohoapis.com",
        source_api_key="zoho-key",
        destination_base_url="https://crm.example.com/rest",
        destination_api_key="twenty-key",
        batch_size=50,
        rate_limit_per_second=5,
    )


def zoho_contact(i: int) -> dict:
    return {
        "id": f"c{i}",
        "First_Name": f"First{i}",
        "Last_Name": f"Last{i}",
        "Email": f"person{i}@example.com",
        "Phone": f"+1555000{i:04d}",
        "Mobile": f"+1555999{i:04d}",
        "Title": "Engineer",
        "Mailing_City": "Lisbon",
        "Mailing_Country": "PT",
        "Owner": {"id": "u1", "name": "Owner", "email": "owner@example.com"},
        "Record_Image": None,
    }


def zoho_task(i: int, status: str = "Open", due: str = "2024-03-01") -> dict:
    return {
        "id": f"t{i}",
        "Subject": f"Task {i}",
        "Status": status,
        "Due_Date": due,
        "Owner": {"id": "u1", "name": "Owner"},
        "Created_Time": "2024-01-01T09:00:00+00:00",
        "Modified_Time": "2024-01-02T09:00:00+00:00",
    }


def source_records(n: int, entity: str = "tasks") -> List[SourceRecord]:
    factory = zoho_task if entity == "tasks" else zoho_contact
    return [SourceRecord(id=f"r{i}", entity=entity, data=factory(i)) for i in range(n)]
