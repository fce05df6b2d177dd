from dataclasses import replace

import pytest

from crm_migration import client as client_module
from crm_migration.exceptions import BatchWriteError, HttpError, MappingError, MigrationError
from crm_migration.extractors.base import BaseExtractor
from crm_migration.extractors import APIExtractor
from crm_migration.loaders import BatchAPILoader
from crm_migration.models.migration import MigrationStatus
from crm_migration.orchestrator import MigrationRunner
from crm_migration.services.entity_registry import CONTACTS, TASKS

from conftest import FakeSession, make_response, zoho_contact, zoho_task


@pytest.fixture
def build_runner(config, clock, make_client):
    """Build a runner wired to fake source and destination sessions."""

    def _build(entity, source_session, destination_session, **overrides):
        run_config = config.model_copy(update=overrides) if overrides else config
        extractor = APIExtractor(make_client(source_session, base_url=run_config.source_base_url))
        loader = BatchAPILoader(
            make_client(destination_session, base_url=run_config.destination_base_url),
            entity,
            dry_run=run_config.dry_run,
        )
        return MigrationRunner(run_config, entity, extractor=extractor, loader=loader, sleep=clock.sleep)

    return _build


def test_zero_records_is_a_successful_empty_run(build_runner, clock):
    source = FakeSession([make_response(204)])
    destination = FakeSession()

    outcome = build_runner(TASKS, source, destination).run()

    assert outcome.status == MigrationStatus.COMPLETED
    assert outcome.succeeded
    assert outcome.records_fetched == 0
    assert outcome.batches_written == 0
    assert destination.calls == []
    assert clock.sleeps == []


def test_120_records_in_batches_of_50(build_runner, clock):
    source = FakeSession([make_response(200, {"data": [zoho_task(i) for i in range(120)]})])
    destination = FakeSession()

    outcome = build_runner(TASKS, source, destination).run()

    assert outcome.succeeded
    assert outcome.records_fetched == 120
    assert outcome.records_written == 120
    assert len(destination.calls) == 3
    assert [len(c["json"]) for c in destination.calls] == [50, 50, 20]
    positions = [r["position"] for c in destination.calls for r in c["json"]]
    assert sorted(positions) == positions == list(range(1, 121))
    assert clock.sleeps.count(1.0) == 3
    assert outcome.duration_seconds is not None


def test_failure_in_batch_two_of_three_stops_the_run(build_runner):
    source = FakeSession([make_response(200, {"data": [zoho_task(i) for i in range(120)]})])
    destination = FakeSession([
        make_response(201, {}),
        make_response(500, {"message": "Internal server error"}),
    ])

    outcome = build_runner(TASKS, source, destination).run()

    assert outcome.status == MigrationStatus.FAILED
    assert not outcome.succeeded
    assert len(destination.calls) == 2
    assert isinstance(outcome.error, BatchWriteError)
    assert outcome.error.batch_number == 2
    assert outcome.error.records_committed == 50
    assert outcome.error.status_code == 500
    assert outcome.to_dict()["error"]["batch_number"] == 2


def test_source_fetch_failure_writes_nothing(build_runner, clock):
    source = FakeSession([make_response(401, {"message": "invalid oauth token"})])
    destination = FakeSession()

    outcome = build_runner(CONTACTS, source, destination).run()

    assert outcome.status == MigrationStatus.FAILED
    assert isinstance(outcome.error, HttpError)
    assert outcome.error.status_code == 401
    assert destination.calls == []
    assert clock.sleeps == []


def test_contacts_are_mapped_to_people(build_runner):
    source = FakeSession([make_response(200, {"data": [zoho_contact(i) for i in range(3)]})])
    destination = FakeSession()

    outcome = build_runner(CONTACTS, source, destination, batch_size=2).run()

    assert outcome.succeeded
    assert [c["url"].rsplit("/", 2)[-2:] for c in destination.calls] == [["batch", "people"]] * 2
    first = destination.calls[0]["json"][0]
    assert first["name"] == {"firstName": "First0", "lastName": "Last0"}
    assert first["position"] == 1
    assert destination.calls[1]["json"][0]["position"] == 3


def test_dry_run_fetches_but_does_not_write(build_runner):
    source = FakeSession([make_response(200, {"data": [zoho_task(i) for i in range(5)]})])
    destination = FakeSession()

    outcome = build_runner(TASKS, source, destination, dry_run=True).run()

    assert outcome.succeeded
    assert outcome.dry_run
    assert outcome.records_written == 5
    assert destination.calls == []


def test_default_clients_are_built_from_config(config):
    runner = MigrationRunner(config, TASKS)

    source_client = runner.extractor.client
    destination_client = runner.loader.client

    assert source_client.base_url == "https://www.zohoapis.com"
    assert source_client._session.headers["Authorization"] == "Zoho-oauthtoken zoho-key"
    assert destination_client.base_url == "https://crm.example.com/rest"
    assert destination_client._session.headers["Authorization"] == "Bearer twenty-key"
    assert source_client.limiter is not destination_client.limiter
    assert source_client.limiter.max_per_second == 5
    assert source_client.timeout == 10.0
    assert runner.scheduler.batch_size == 50


def test_mapper_error_becomes_failed_outcome(build_runner):
    def broken_mapper(record, position):
        raise KeyError("Subject")

    entity = replace(TASKS, mapper=broken_mapper)
    source = FakeSession([make_response(200, {"data": [zoho_task(1)]})])
    destination = FakeSession()

    outcome = build_runner(entity, source, destination).run()

    assert outcome.status == MigrationStatus.FAILED
    assert isinstance(outcome.error, BatchWriteError)
    assert isinstance(outcome.error.cause, MappingError)
    assert destination.calls == []


def test_unexpected_error_becomes_failed_outcome(config, make_client):
    class ExplodingExtractor(BaseExtractor):
        def fetch_all(self, entity):
            raise RuntimeError("disk on fire")

    loader = BatchAPILoader(make_client(FakeSession()), TASKS)
    outcome = MigrationRunner(config, TASKS, extractor=ExplodingExtractor(), loader=loader).run()

    assert outcome.status == MigrationStatus.FAILED
    assert isinstance(outcome.error, MigrationError)
    assert isinstance(outcome.error.__cause__, RuntimeError)
    assert "disk on fire" in outcome.to_dict()["error"]["message"]
    assert outcome.completed_at is not None


def test_runner_closes_the_clients_it_built(config, clock, monkeypatch):
    source = FakeSession([make_response(200, {"data": [zoho_task(1)]})])
    destination = FakeSession()
    sessions = [source, destination]
    monkeypatch.setattr(client_module.requests, "Session", lambda: sessions.pop(0))

    outcome = MigrationRunner(config, TASKS, sleep=clock.sleep).run()

    assert outcome.succeeded
    assert len(destination.calls) == 1
    assert source.closed
    assert destination.closed


def test_runner_leaves_injected_clients_open(build_runner):
    source = FakeSession([make_response(401, {"message": "invalid oauth token"})])
    destination = FakeSession()

    build_runner(TASKS, source, destination).run()

    assert not source.closed
    assert not destination.closed
