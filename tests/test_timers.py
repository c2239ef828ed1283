# tests/test_timers.py

import asyncio

from quizbank.timers import CountdownTimer, format_remaining


def test_format_remaining():
    assert format_remaining(None) == "--:--"
    assert format_remaining(0) == "00 : 00"
    assert format_remaining(125) == "02 : 05"
    assert format_remaining(3600) == "60 : 00"
    assert format_remaining(-5) == "00 : 00"


def test_second_start_is_ignored():
    async def scenario():
        ticks = []

        async def on_tick():
            ticks.append(1)

        timer = CountdownTimer(on_tick, interval=0.01)
        timer.start()
        task = timer.task
        timer.start()
        same = timer.task is task
        timer.stop()
        return same

    assert asyncio.run(scenario())


def test_no_tick_after_stop():
    async def scenario():
        ticks = []

        async def on_tick():
            ticks.append(1)

        timer = CountdownTimer(on_tick, interval=0.005)
        timer.start()
        await asyncio.sleep(0.05)
        timer.stop()
        seen = len(ticks)
        await asyncio.sleep(0.05)
        return seen, len(ticks), timer.running

    seen, after, running = asyncio.run(scenario())

    assert seen > 0
    assert after == seen
    assert running is False


def test_stop_from_inside_tick_lets_callback_finish():
    async def scenario():
        events = []
        timer = None

        async def on_tick():
            events.append("tick")
            timer.stop()
            await asyncio.sleep(0)
            events.append("after stop")

        timer = CountdownTimer(on_tick, interval=0)
        timer.start()
        await asyncio.sleep(0.05)
        return events

    assert asyncio.run(scenario()) == ["tick", "after stop"]


def test_stop_before_start_is_harmless():
    async def on_tick():
        pass

    timer = CountdownTimer(on_tick, interval=1)
    timer.stop()

    assert timer.running is False
    assert timer.task is None
