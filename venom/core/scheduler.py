"""Command scheduler and the single-consumer message queue.

Operations run as asyncio tasks on the render loop's event loop; blocking
work inside them is pushed to threads by the runner. The only shared state
they touch is the queue: each finished operation posts exactly one message
and, inside a ``Sequence``, waits until the consumer has handled it before
the next step starts.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from venom.core.commands import (
    Batch,
    Command,
    ConnectStore,
    Operation,
    Quit,
    Sequence,
    SpinnerTick,
)
from venom.core.errors import OperationFailed, VenomError
from venom.core.messages import CommandFailed, Message
from venom.core.runner import CommandRunner

logger = logging.getLogger(__name__)

# Operations with their own bound (or none needed)
_UNTIMED = (ConnectStore, SpinnerTick)


@dataclass
class Envelope:
    """A queued message plus the event the consumer sets once it is handled."""

    message: Message
    handled: asyncio.Event


class MessageQueue:
    """FIFO of messages drained by exactly one consumer (the render loop)."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Envelope] = asyncio.Queue()

    def post(self, message: Message) -> asyncio.Event:
        """Enqueue a message; the returned event is set after it is handled."""
        envelope = Envelope(message, asyncio.Event())
        self._queue.put_nowait(envelope)
        return envelope.handled

    async def get(self) -> Envelope:
        return await self._queue.get()

    def get_nowait(self) -> Envelope:
        return self._queue.get_nowait()

    def empty(self) -> bool:
        return self._queue.empty()


class Scheduler:
    """Runs commands in background tasks and reports results through the queue."""

    def __init__(
        self,
        runner: CommandRunner,
        queue: MessageQueue,
        timeout: Optional[float] = None,
    ) -> None:
        self._runner = runner
        self._queue = queue
        self._timeout = timeout
        self._tasks: set[asyncio.Task[bool]] = set()

    @property
    def pending(self) -> int:
        """Number of commands still running."""
        return len(self._tasks)

    def dispatch(self, command: Command) -> asyncio.Task[bool]:
        """Start ``command`` and return its task handle (cancellable)."""
        if isinstance(command, Quit):
            raise ValueError("Quit is handled by the render loop, not the scheduler")
        logger.debug("Dispatching %s", type(command).__name__)
        task = asyncio.create_task(self._execute(command), name=type(command).__name__)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def cancel_all(self) -> None:
        """Cancel every in-flight command."""
        for task in list(self._tasks):
            task.cancel()

    async def aclose(self) -> None:
        """Cancel in-flight commands and wait for them to unwind."""
        tasks = list(self._tasks)
        self.cancel_all()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _execute(self, command: Command) -> bool:
        """Run a command tree. Returns False once any operation failed."""
        if isinstance(command, Sequence):
            for step in command.steps:
                if not await self._execute(step):
                    logger.debug("Sequence stopped after failed step")
                    return False
            return True
        if isinstance(command, Batch):
            results = await asyncio.gather(*(self._execute(s) for s in command.steps))
            return all(results)
        message = await self._run_operation(command)
        handled = self._queue.post(message)
        await handled.wait()
        return not isinstance(message, CommandFailed)

    async def _run_operation(self, operation: Operation) -> Message:
        """Run one operation; every failure becomes a ``CommandFailed`` message."""
        name = type(operation).__name__
        timeout = None if isinstance(operation, _UNTIMED) else self._timeout
        try:
            if timeout is not None:
                return await asyncio.wait_for(self._runner.run(operation), timeout)
            return await self._runner.run(operation)
        except VenomError as e:
            logger.warning("%s failed: %s", name, e)
            return CommandFailed(e, operation)
        except asyncio.TimeoutError:
            # The worker thread cannot be interrupted and may still complete the write
            logger.warning("%s timed out after %.1fs", name, timeout)
            return CommandFailed(
                OperationFailed(
                    f"{name} timed out after {timeout:g}s; the outcome is unknown,"
                    " press r to refresh",
                    operation=name,
                ),
                operation,
            )
        except Exception as e:
            logger.exception("%s raised unexpectedly", name)
            return CommandFailed(OperationFailed(str(e) or type(e).__name__, operation=name), operation)
