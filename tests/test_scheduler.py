import asyncio

from cryptotext.scheduler import AsyncioFrameScheduler


def test_request_frame_fires_once_with_loop_time() -> None:
    async def scenario() -> list:
        scheduler = AsyncioFrameScheduler(fps=200)
        seen = []

        scheduler.request_frame(seen.append)
        scheduler.request_frame(seen.append)
        assert scheduler.pending

        await asyncio.sleep(0.05)
        assert not scheduler.pending
        return seen

    seen = asyncio.run(scenario())
    assert len(seen) == 1
    assert isinstance(seen[0], float)


def test_cancel_drops_pending_frame() -> None:
    async def scenario() -> list:
        scheduler = AsyncioFrameScheduler(fps=100)
        seen = []
        scheduler.request_frame(seen.append)
        scheduler.cancel()
        await asyncio.sleep(0.05)
        return seen

    assert asyncio.run(scenario()) == []


def test_fps_floor() -> None:
    scheduler = AsyncioFrameScheduler(fps=0)
    assert scheduler.fps == 1.0
    assert scheduler.interval == 1.0
