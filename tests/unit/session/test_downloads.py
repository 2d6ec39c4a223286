"""Tests for the concurrent download queue.

Covers id allocation, newest-first ordering, progress updates, exactly-once
removal, and the split between cancellation and genuine failures.
"""

from __future__ import annotations

import asyncio
import unittest

from zipmanager.archive import ArchiveError, Blob, CancelToken
from zipmanager.session.downloads import DownloadQueue
from zipmanager.session.environment import DOWNLOAD_NAME_MESSAGE, SessionEnvironment


class _Host:
    def __init__(self, answer: str | None = None, decline: bool = False) -> None:
        self.answer = answer
        self.decline = decline
        self.saved: list[tuple[str, bytes]] = []
        self.alerts: list[str] = []
        self.prompts: list[tuple[str, str | None]] = []

    def prompt(self, message: str, default: str | None) -> str | None:
        self.prompts.append((message, default))
        if self.decline:
            return None
        return self.answer or default

    def environment(self) -> SessionEnvironment:
        return SessionEnvironment(
            prompt=self.prompt,
            confirm=lambda _message: not self.decline,
            alert=self.alerts.append,
            save_blob=lambda blob, name: self.saved.append((name, blob.data)),
        )


async def _quick(_signal: CancelToken, on_progress) -> Blob:
    on_progress(1, 2)
    on_progress(2, 2)
    return Blob(b"done")


def _gated(gate: asyncio.Event, data: bytes = b"payload"):
    async def produce(signal: CancelToken, on_progress) -> Blob:
        for step in range(1000):
            signal.raise_if_cancelled()
            if gate.is_set():
                return Blob(data)
            on_progress(step, None)
            await asyncio.sleep(0.001)
        raise RuntimeError("gate never opened")

    return produce


def _failing(error: Exception):
    async def produce(_signal: CancelToken, _on_progress) -> Blob:
        await asyncio.sleep(0)
        raise error

    return produce


class DownloadLifecycleTests(unittest.IsolatedAsyncioTestCase):
    async def test_successful_download_saves_then_leaves_list(self) -> None:
        host = _Host()
        queue = DownloadQueue(host.environment())

        download = queue.start("a.bin", _quick)
        self.assertEqual(queue.active, (download,))
        await queue.wait_all()

        self.assertEqual(host.saved, [("a.bin", b"done")])
        self.assertEqual(host.prompts, [(DOWNLOAD_NAME_MESSAGE, "a.bin")])
        self.assertEqual(queue.active, ())

    async def test_ids_never_repeat(self) -> None:
        queue = DownloadQueue(_Host().environment())

        first_ids = [queue.start(f"{index}.bin", _quick).id for index in range(3)]
        await queue.wait_all()
        later = queue.start("later.bin", _quick)
        await queue.wait_all()

        self.assertEqual(first_ids, [1, 2, 3])
        self.assertEqual(later.id, 4)

    async def test_declined_name_is_a_silent_noop(self) -> None:
        host = _Host(decline=True)
        queue = DownloadQueue(host.environment())

        self.assertIsNone(queue.start("a.bin", _quick))

        self.assertEqual(queue.active, ())
        self.assertEqual(host.alerts, [])
        host.decline = False
        self.assertEqual(queue.start("a.bin", _quick).id, 1)
        await queue.wait_all()

    async def test_chosen_name_is_used_for_saving(self) -> None:
        host = _Host(answer="renamed.bin")
        queue = DownloadQueue(host.environment())

        queue.start("a.bin", _quick)
        await queue.wait_all()

        self.assertEqual(host.saved, [("renamed.bin", b"done")])

    async def test_prompt_can_be_disabled(self) -> None:
        host = _Host(answer="ignored.bin")
        queue = DownloadQueue(host.environment(), prompt_name=False)

        queue.start("a.bin", _quick)
        await queue.wait_all()

        self.assertEqual(host.prompts, [])
        self.assertEqual(host.saved, [("a.bin", b"done")])


class DownloadProgressTests(unittest.IsolatedAsyncioTestCase):
    async def test_list_is_newest_first_and_progress_keeps_order(self) -> None:
        gate = asyncio.Event()
        queue = DownloadQueue(_Host().environment())
        first = queue.start("x.zip", _gated(gate))
        second = queue.start("y.zip", _gated(gate))

        self.assertEqual([download.name for download in queue.active], ["y.zip", "x.zip"])
        queue.report_progress(first.id, 5, 10)
        queue.report_progress(999, 1, 1)

        updated = queue.get(first.id)
        self.assertEqual((updated.progress_value, updated.progress_max), (5, 10))
        self.assertEqual([download.id for download in queue.active], [second.id, first.id])

        gate.set()
        await queue.wait_all()

    async def test_producer_progress_reaches_the_list(self) -> None:
        gate = asyncio.Event()
        queue = DownloadQueue(_Host().environment())
        download = queue.start("x.zip", _gated(gate))

        for _ in range(5):
            await asyncio.sleep(0.001)

        current = queue.get(download.id)
        self.assertIsNotNone(current.progress_value)
        self.assertIsNone(current.progress_max)
        gate.set()
        await queue.wait_all()


class DownloadAbortTests(unittest.IsolatedAsyncioTestCase):
    async def test_aborting_first_of_two_leaves_second_running_silently(self) -> None:
        gate = asyncio.Event()
        host = _Host()
        queue = DownloadQueue(host.environment())
        first = queue.start("x.zip", _gated(gate, b"x"))
        second = queue.start("y.zip", _gated(gate, b"y"))
        await asyncio.sleep(0.005)

        self.assertTrue(queue.abort(first))
        self.assertEqual([download.id for download in queue.active], [second.id])
        await asyncio.sleep(0.005)
        self.assertEqual([download.id for download in queue.active], [second.id])

        gate.set()
        await queue.wait_all()

        self.assertEqual(host.alerts, [])
        self.assertEqual(host.saved, [("y.zip", b"y")])
        self.assertEqual(queue.active, ())

    async def test_abort_racing_completion_removes_exactly_once(self) -> None:
        host = _Host()
        queue = DownloadQueue(host.environment())
        download = queue.start("a.bin", _quick)

        self.assertTrue(queue.abort(download))
        self.assertFalse(queue.abort(download))
        await queue.wait_all()

        self.assertTrue(download.cancel.cancelled)
        self.assertEqual(host.saved, [])
        self.assertEqual(host.alerts, [])
        self.assertEqual(queue.active, ())

    async def test_genuine_failure_is_reported(self) -> None:
        host = _Host()
        queue = DownloadQueue(host.environment())

        queue.start("a.bin", _failing(ArchiveError("disk full")))
        await queue.wait_all()

        self.assertEqual(host.alerts, ["disk full"])
        self.assertEqual(queue.active, ())

    async def test_cancellation_message_is_not_reported(self) -> None:
        host = _Host()
        queue = DownloadQueue(host.environment())

        queue.start("a.bin", _failing(RuntimeError("download cancelled")))
        await queue.wait_all()

        self.assertEqual(host.alerts, [])
        self.assertEqual(queue.active, ())

    async def test_abort_all_signals_every_download(self) -> None:
        gate = asyncio.Event()
        queue = DownloadQueue(_Host().environment())
        downloads = [queue.start(name, _gated(gate)) for name in ("a", "b")]

        queue.abort_all()
        await queue.wait_all()

        self.assertTrue(all(download.cancel.cancelled for download in downloads))
        self.assertEqual(queue.active, ())


class DownloadWithoutLoopTests(unittest.TestCase):
    def test_start_outside_event_loop_leaves_no_row(self) -> None:
        host = _Host()
        queue = DownloadQueue(host.environment())

        with self.assertRaises(RuntimeError):
            queue.start("a.txt", _quick)

        self.assertEqual(queue.active, ())
        self.assertEqual(host.prompts, [])

        async def start_inside_loop() -> int:
            download = queue.start("a.txt", _quick)
            await queue.wait_all()
            return download.id

        self.assertEqual(asyncio.run(start_inside_loop()), 1)
        self.assertEqual(host.saved, [("a.txt", b"done")])


if __name__ == "__main__":
    unittest.main()
