"""Tests for the asyncio bridge."""

import asyncio
import threading
from functools import partial
import pytest
from asynckit import aio, parallel, series, whilst, waterfall, Success, Failure


async def delayed(value, delay=0.0):
    await asyncio.sleep(delay)
    return value


async def broken():
    raise RuntimeError("broken")


class TestRun:
    @pytest.mark.asyncio
    async def test_parallel_completion_order(self):
        operations = [
            aio.from_coroutine(partial(delayed, "slow", 0.03)),
            aio.from_coroutine(partial(delayed, "fast", 0.0)),
        ]
        result = await aio.run(parallel, operations)
        assert result == Success(["slow", "fast"])

    @pytest.mark.asyncio
    async def test_series(self):
        operations = [aio.from_coroutine(partial(delayed, i)) for i in range(5)]
        result = await aio.run(series, operations)
        assert result == Success([0, 1, 2, 3, 4])

    @pytest.mark.asyncio
    async def test_waterfall_with_initial(self):
        async def append(argument):
            await asyncio.sleep(0)
            return argument + "!"

        step = aio.from_coroutine(append)
        result = await aio.run(waterfall, [step, step], initial="hi")
        assert result == Success("hi!!")

    @pytest.mark.asyncio
    async def test_whilst(self):
        count = 0

        async def bump():
            nonlocal count
            count += 1
            return count

        result = await aio.run(whilst, lambda: count < 3, aio.from_coroutine(bump))
        assert result == Success([1, 2, 3])

    @pytest.mark.asyncio
    async def test_exception_becomes_failure(self):
        result = await aio.run(series, [aio.from_coroutine(broken)])
        assert isinstance(result, Failure)
        assert isinstance(result.error, RuntimeError)

    @pytest.mark.asyncio
    async def test_parallel_siblings_not_cancelled(self):
        finished = []

        async def slow():
            await asyncio.sleep(0.02)
            finished.append("slow")
            return "slow"

        result = await aio.run(parallel, [aio.from_coroutine(slow), aio.from_coroutine(broken)])
        assert isinstance(result, Failure)
        assert finished == []
        await asyncio.sleep(0.05)
        assert finished == ["slow"]

    @pytest.mark.asyncio
    async def test_completion_from_other_thread(self):
        def threaded(value):
            def operation(done):
                threading.Thread(target=done, args=(Success(value),)).start()
            return operation

        result = await aio.run(parallel, [threaded(i) for i in range(10)])
        assert result == Success(list(range(10)))


class TestFromCoroutine:
    @pytest.mark.asyncio
    async def test_submit_to_loop_from_thread(self):
        loop = asyncio.get_running_loop()
        operation = aio.from_coroutine(partial(delayed, 7), loop=loop)
        reported = loop.create_future()

        def on_done(result):
            loop.call_soon_threadsafe(reported.set_result, result)

        threading.Thread(target=operation, args=(on_done,)).start()
        assert await asyncio.wait_for(reported, 1) == Success(7)

    @pytest.mark.asyncio
    async def test_cancelled_task_is_failure(self):
        async def cancelled():
            await asyncio.sleep(0)
            raise asyncio.CancelledError()

        reported = []
        aio.from_coroutine(cancelled)(reported.append)
        await asyncio.sleep(0.01)
        assert len(reported) == 1
        assert isinstance(reported[0], Failure)
        assert isinstance(reported[0].error, asyncio.CancelledError)

    @pytest.mark.asyncio
    async def test_task_referenced_until_done(self):
        release = asyncio.Event()

        async def wait_for_release():
            await release.wait()
            return "done"

        before = set(aio._tasks)
        reported = []
        aio.from_coroutine(wait_for_release)(reported.append)
        pending = list(aio._tasks - before)
        assert len(pending) == 1
        release.set()
        await asyncio.sleep(0.01)
        assert reported == [Success("done")]
        assert pending[0] not in aio._tasks
