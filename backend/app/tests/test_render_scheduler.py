import asyncio

import pytest

from app.services.render_scheduler import RenderScheduler


def test_rapid_edits_fire_once_relative_to_last_edit(manual_loop):
    scheduler = RenderScheduler(delay=0.3, loop=manual_loop)

    scheduler.schedule()
    manual_loop.advance(0.1)
    scheduler.schedule()

    # past the first edit's deadline, before the second one's
    manual_loop.advance(0.25)
    assert scheduler.render_key == 0
    assert scheduler.pending

    manual_loop.advance(0.1)
    assert scheduler.render_key == 1
    assert not scheduler.pending

    manual_loop.advance(5)
    assert scheduler.render_key == 1


def test_separated_edits_fire_twice(manual_loop):
    scheduler = RenderScheduler(delay=0.3, loop=manual_loop)

    scheduler.schedule()
    manual_loop.advance(0.5)
    scheduler.schedule()
    manual_loop.advance(0.5)

    assert scheduler.render_key == 2


def test_cycle_start_runs_on_every_schedule_and_render_callback_gets_key(manual_loop):
    cleared = []
    rendered = []
    scheduler = RenderScheduler(
        delay=0.3,
        on_cycle_start=lambda: cleared.append(True),
        on_render=rendered.append,
        loop=manual_loop,
    )

    scheduler.schedule()
    scheduler.schedule()
    scheduler.schedule()
    manual_loop.advance(1)

    assert len(cleared) == 3
    assert rendered == [1]


def test_cancel_drops_pending_render(manual_loop):
    scheduler = RenderScheduler(delay=0.3, loop=manual_loop)
    scheduler.schedule()
    scheduler.cancel()
    manual_loop.advance(1)
    assert scheduler.render_key == 0
    assert not scheduler.pending


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        RenderScheduler(delay=-1)


@pytest.mark.asyncio
async def test_uses_running_event_loop_by_default():
    scheduler = RenderScheduler(delay=0.01)
    scheduler.schedule()
    scheduler.schedule()
    await asyncio.sleep(0.2)
    assert scheduler.render_key == 1
