import asyncio

from docdrop.services.scheduler import ExpiryScheduler


def test_timers_fire_independently():
    fired = []

    async def on_expire(name):
        fired.append(name)

    async def scenario():
        scheduler = ExpiryScheduler(on_expire)
        scheduler.schedule("late", 0.2)
        scheduler.schedule("early", 0.05)
        assert len(scheduler) == 2
        await asyncio.sleep(0.1)
        assert fired == ["early"]
        await asyncio.sleep(0.2)
        assert fired == ["early", "late"]
        assert len(scheduler) == 0

    asyncio.run(scenario())


def test_cancel_and_shutdown_disarm_timers():
    fired = []

    async def on_expire(name):
        fired.append(name)

    async def scenario():
        scheduler = ExpiryScheduler(on_expire)
        scheduler.schedule("a", 0.05)
        scheduler.schedule("b", 0.05)
        assert scheduler.cancel("a") is True
        assert scheduler.cancel("a") is False
        assert "b" in scheduler
        await scheduler.shutdown()
        await asyncio.sleep(0.1)

    asyncio.run(scenario())
    assert fired == []


def test_failing_expiry_does_not_stop_others():
    fired = []

    async def on_expire(name):
        if name == "bad":
            raise RuntimeError("boom")
        fired.append(name)

    async def scenario():
        scheduler = ExpiryScheduler(on_expire)
        scheduler.schedule("bad", 0.01)
        scheduler.schedule("good", 0.02)
        await asyncio.sleep(0.1)

    asyncio.run(scenario())
    assert fired == ["good"]
