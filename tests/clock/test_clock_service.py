from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime

import pytest

from ponto_system.clock.service import ClockService
from ponto_system.core.constants import LENIENT_POLICY, STRICT_POLICY
from ponto_system.core.enums import ClockEventType
from ponto_system.core.exceptions import (
    OutOfSequenceError,
    StoreUnavailableError,
    UserNotFoundError,
    ValidationError,
)

ENTRADA = ClockEventType.ENTRADA
SAIDA = ClockEventType.SAIDA


@pytest.fixture
def service(events_repo, clock):
    return ClockService(events_repo, policy=STRICT_POLICY, clock=clock)


def test_fresh_day_scenario(service, clock):
    assert service.todays_events(3) == []

    first = service.record_event(3, ENTRADA, None)
    assert first.event_type == ENTRADA
    assert first.occurred_at == clock.now
    assert first.report is None
    assert [e.event_type for e in service.todays_events(3)] == [ENTRADA]

    clock.advance(minutes=1)
    with pytest.raises(OutOfSequenceError):
        service.record_event(3, ENTRADA, None)

    clock.advance(hours=8)
    last = service.record_event(3, SAIDA, "did work all day")
    assert last.report == "did work all day"
    assert [e.event_type for e in service.todays_events(3)] == [ENTRADA, SAIDA]


def test_out_of_sequence_persists_nothing(service, events_repo):
    with pytest.raises(OutOfSequenceError):
        service.record_event(3, SAIDA, "fechando o caixa hoje")
    assert events_repo.all_events() == []
    assert events_repo.create_calls == 0


def test_claimed_type_accepts_form_strings(service):
    assert service.record_event(3, "entrada").event_type == ENTRADA


def test_unknown_claimed_type_is_validation_error(service, events_repo):
    with pytest.raises(ValidationError):
        service.record_event(3, "PAUSA")
    assert events_repo.create_calls == 0


def test_todays_events_only_today_in_order(service, events_repo, fixed_now):
    yesterday = datetime(2026, 3, 1, 23, 59, 59, 999999)
    events_repo.add(3, ENTRADA, yesterday)
    events_repo.add(3, SAIDA, datetime(2026, 3, 2, 12, 0))
    events_repo.add(3, ENTRADA, datetime(2026, 3, 2, 0, 0))
    events_repo.add(2, ENTRADA, datetime(2026, 3, 2, 9, 0))
    events_repo.add(3, ENTRADA, datetime(2026, 3, 3, 0, 0))

    events = service.todays_events(3)
    assert [(e.event_type, e.occurred_at.hour) for e in events] == [(ENTRADA, 0), (SAIDA, 12)]


def test_yesterdays_open_entrada_does_not_carry_over(service, events_repo):
    events_repo.add(3, ENTRADA, datetime(2026, 3, 1, 22, 0))
    assert service.status(3).next_type == ENTRADA
    assert service.record_event(3, ENTRADA).event_type == ENTRADA


def test_status_reports_next_type(service):
    assert service.status(3).next_type == ENTRADA
    service.record_event(3, ENTRADA)
    status = service.status(3)
    assert status.next_type == SAIDA
    assert len(status.events) == 1


def test_strict_policy_requires_exit_report(service, events_repo):
    service.record_event(3, ENTRADA)
    with pytest.raises(ValidationError, match="mínimo 10"):
        service.record_event(3, SAIDA, "  curto   ")
    assert events_repo.create_calls == 1
    assert service.record_event(3, SAIDA, "  relatório completo  ").report == "relatório completo"


def test_report_ignored_on_entrada(service):
    assert service.record_event(3, ENTRADA, "isto não deve ficar").report is None


def test_lenient_policy_report_optional(events_repo, clock):
    service = ClockService(events_repo, policy=LENIENT_POLICY, clock=clock)
    service.record_event(3, ENTRADA)
    event = service.record_event(3, SAIDA, "   ")
    assert event.event_type == SAIDA
    assert event.report is None


def test_unknown_user_cannot_record(service):
    with pytest.raises(UserNotFoundError):
        service.record_event(999, ENTRADA)


def test_concurrent_submissions_do_not_duplicate(events_repo, clock):
    service = ClockService(events_repo, policy=STRICT_POLICY, clock=clock)
    results: list = []
    barrier = threading.Barrier(8)

    def submit():
        barrier.wait()
        try:
            results.append(service.record_event(3, ENTRADA))
        except OutOfSequenceError as e:
            results.append(e)

    threads = [threading.Thread(target=submit) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    created = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, OutOfSequenceError)]
    assert len(created) == 1
    assert len(rejected) == 7
    assert [e.event_type for e in service.todays_events(3)] == [ENTRADA]


class BrokenEvents:
    def list_in_range(self, user_id, start, end):
        raise StoreUnavailableError("Can't connect to MySQL server on 'db:3306' (111)")

    @contextmanager
    def locked_for_user(self, user_id):
        raise StoreUnavailableError("Lock wait timeout exceeded; try restarting transaction")
        yield


def test_store_failures_are_logged_and_generic(clock, caplog):
    service = ClockService(BrokenEvents(), clock=clock)

    with caplog.at_level(logging.ERROR):
        with pytest.raises(StoreUnavailableError) as read_err:
            service.todays_events(3)
        with pytest.raises(StoreUnavailableError) as write_err:
            service.record_event(3, ENTRADA)

    for err in (read_err, write_err):
        assert "MySQL" not in str(err.value) and "Lock wait" not in str(err.value)
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 2


def test_invalid_report_never_reaches_store(clock):
    service = ClockService(BrokenEvents(), clock=clock)
    with pytest.raises(ValidationError):
        service.record_event(3, SAIDA, "")
