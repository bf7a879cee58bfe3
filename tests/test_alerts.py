import asyncio
import logging

import pytest

from delegaciones.services.alerts_service import LoggingNotifier, Notification, OverdueSweeper, sweep_overdue


def test_sweep_reports_each_overdue_request(store, notifier, make_request, now):
    """El barrido notifica una vez por cada solicitud vencida."""
    due = make_request(fechaVencimiento="2025-01-11")
    make_request(fechaVencimiento="2025-12-31")
    before = [r.model_dump() for r in store.all()]

    assert sweep_overdue(store, notifier, now=now) == [due.id]
    events = notifier.events()
    assert [(e.request_id, e.message, e.level) for e in events] == [(due.id, f"Solicitud {due.id} vencida", "warning")]
    assert [r.model_dump() for r in store.all()] == before


def test_sweep_without_notifier(store, make_request, now):
    """Sin notificador el barrido solo devuelve las vencidas."""
    make_request(fechaVencimiento="2025-01-11")
    assert len(sweep_overdue(store, None, now=now)) == 1


def test_logging_notifier_writes_warning(caplog):
    """El notificador por logging emite un WARNING con el mensaje."""
    with caplog.at_level(logging.WARNING, logger="delegaciones.alerts"):
        LoggingNotifier().notify(Notification(request_id="req-1", message="Solicitud req-1 vencida", level="warning"))
    assert "Solicitud req-1 vencida" in caplog.text


def test_memory_notifier_is_bounded(notifier):
    """El notificador en memoria descarta las notificaciones más antiguas."""
    for i in range(60):
        notifier.notify(Notification(message=f"m{i}"))
    events = notifier.events()
    assert len(events) == 50
    assert events[0].message == "m10"
    notifier.clear()
    assert notifier.events() == []


def test_sweeper_runs_periodically_and_stops_cleanly(store, notifier, make_request):
    """El barrido periódico se repite y se detiene sin dejar tareas vivas."""
    make_request(fechaVencimiento="2025-01-11")

    async def scenario():
        sweeper = OverdueSweeper(store, notifier, interval=0.01)
        sweeper.start()
        sweeper.start()  # idempotente
        assert sweeper.running
        await asyncio.sleep(0.08)
        await sweeper.stop()
        assert not sweeper.running
        runs = sweeper.runs
        await asyncio.sleep(0.03)
        return runs, sweeper.runs

    runs, runs_after_stop = asyncio.run(scenario())
    assert runs >= 2
    assert runs_after_stop == runs
    assert all(e.level == "warning" for e in notifier.events())


def test_sweeper_survives_failing_sweep():
    """Un fallo en un barrido no detiene los siguientes."""
    class Exploding:
        def overdue(self, as_of=None):
            raise RuntimeError("boom")

    async def scenario():
        sweeper = OverdueSweeper(Exploding(), None, interval=0.01)
        sweeper.start()
        await asyncio.sleep(0.05)
        alive = sweeper.running
        await sweeper.stop()
        return alive, sweeper.runs

    alive, runs = asyncio.run(scenario())
    assert alive
    assert runs >= 1


def test_stop_without_start_is_noop():
    """Detener un barrido que nunca arrancó no hace nada."""
    asyncio.run(OverdueSweeper(store=None, notifier=None).stop())


def test_interval_must_be_positive(store):
    """El intervalo del barrido debe ser mayor que cero."""
    with pytest.raises(ValueError):
        OverdueSweeper(store, None, interval=0)
