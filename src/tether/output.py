"""Deferred output values.

A DeferredOutputValue carries three immediately observable facts (known,
secret, dependencies) and a payload that may only become available later.
The payload lives in a single-assignment cell; ``await resolve()`` suspends
until the cell is settled.

Cells are not bound to an event loop: decoding is synchronous and may run
before any loop exists. Each waiter gets a future on its own running loop
and is woken thread-safely when the cell settles.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import threading
from collections import ChainMap
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tether.resources import ResourceHandle

logger = logging.getLogger(__name__)


class _Absent:
    """Marker for a payload that was never provided."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


class CellState(str, enum.Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


class PayloadCell:
    """Single-assignment payload holder with registered continuations."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = CellState.PENDING
        self._value: Any = None
        self._exception: BaseException | None = None
        self._waiters: list[asyncio.Future] = []
        self._callbacks: list[Callable[[PayloadCell], None]] = []

    @property
    def state(self) -> CellState:
        return self._state

    @property
    def settled(self) -> bool:
        return self._state is not CellState.PENDING

    def set_result(self, value: Any) -> None:
        self._settle(CellState.RESOLVED, value, None)

    def set_exception(self, exc: BaseException) -> None:
        self._settle(CellState.FAILED, None, exc)

    def result(self) -> Any:
        """Return the settled value, re-raising a stored failure.

        Raises:
            RuntimeError: If the cell is still pending.
        """
        if self._state is CellState.PENDING:
            raise RuntimeError("Payload is not available yet")
        if self._exception is not None:
            raise self._exception
        return self._value

    def add_done_callback(self, fn: Callable[[PayloadCell], None]) -> None:
        """Call ``fn(cell)`` once settled (immediately if already settled)."""
        with self._lock:
            if self._state is CellState.PENDING:
                self._callbacks.append(fn)
                return
        fn(self)

    async def wait(self) -> Any:
        with self._lock:
            if self._state is CellState.PENDING:
                fut = asyncio.get_running_loop().create_future()
                self._waiters.append(fut)
            else:
                fut = None
        if fut is not None:
            await fut
        return self.result()

    def _settle(self, state: CellState, value: Any, exc: BaseException | None) -> None:
        with self._lock:
            if self._state is not CellState.PENDING:
                raise RuntimeError(f"Payload already {self._state}")
            self._state = state
            self._value = value
            self._exception = exc
            waiters, self._waiters = self._waiters, []
            callbacks, self._callbacks = self._callbacks, []
        for fut in waiters:
            _notify(fut)
        for fn in callbacks:
            try:
                fn(self)
            except Exception:
                logger.exception("Payload callback %r failed", fn)


def _notify(fut: asyncio.Future) -> None:
    """Wake a waiter on its own loop. Cancelled waiters and closed loops are skipped."""
    if fut.done():
        return
    loop = fut.get_loop()
    if loop.is_closed():
        return
    try:
        loop.call_soon_threadsafe(_wake, fut)
    except RuntimeError:
        # Closed after the check above.
        logger.debug("Waiter loop closed before it could be woken")


def _wake(fut: asyncio.Future) -> None:
    if not fut.done():
        fut.set_result(None)


class DeferredOutputValue:
    """An asynchronous value annotated with knownness, secrecy and dependencies.

    Construct with a payload for a known output, or without one for an
    unknown output. ``pending()`` creates a known output whose payload is
    settled later via ``set_result``/``set_exception``.

    Example::

        out = DeferredOutputValue("hi", is_secret=True, dependencies={"urn:..."})
        assert out.is_known and out.is_secret
        value = await out.resolve()
    """

    def __init__(
        self,
        value: Any = ABSENT,
        *,
        is_known: bool | None = None,
        is_secret: bool = False,
        dependencies: Iterable[str] = (),
        resources: Mapping[str, ResourceHandle] | None = None,
    ) -> None:
        if is_known is None:
            is_known = value is not ABSENT
        self._known = bool(is_known)
        self._secret = bool(is_secret)
        # Ordered for deterministic dependent_resources(); exposed as a set.
        self._deps: dict[str, None] = dict.fromkeys(dependencies)
        # Live view: handles resolved later in the same pass stay visible.
        self._resources: ChainMap[str, ResourceHandle] = ChainMap(
            {}, resources if resources is not None else {}
        )
        self._cell = PayloadCell()
        if not self._known:
            self._cell.set_result(None)
        elif value is not ABSENT:
            self._cell.set_result(value)

    # -- Constructors ---------------------------------------------------

    @classmethod
    def known(cls, value: Any, **kwargs: Any) -> DeferredOutputValue:
        return cls(value, is_known=True, **kwargs)

    @classmethod
    def unknown(cls, **kwargs: Any) -> DeferredOutputValue:
        return cls(is_known=False, **kwargs)

    @classmethod
    def secret(cls, value: Any, **kwargs: Any) -> DeferredOutputValue:
        return cls(value, is_known=True, is_secret=True, **kwargs)

    @classmethod
    def pending(cls, **kwargs: Any) -> DeferredOutputValue:
        """A known output whose payload will be settled later."""
        return cls(is_known=True, **kwargs)

    # -- Observable state -----------------------------------------------

    @property
    def is_known(self) -> bool:
        return self._known

    @property
    def is_secret(self) -> bool:
        return self._secret

    @property
    def dependencies(self) -> frozenset[str]:
        return frozenset(self._deps)

    @property
    def is_settled(self) -> bool:
        return self._cell.settled

    # -- Settlement -----------------------------------------------------

    def set_result(self, value: Any) -> None:
        self._cell.set_result(value)

    def set_exception(self, exc: BaseException) -> None:
        self._cell.set_exception(exc)

    # -- Awaitables -----------------------------------------------------

    async def resolve(self) -> Any:
        """Wait for and return the payload (None when unknown).

        Re-raises whatever failure was used to settle the payload.
        """
        return await self._cell.wait()

    async def dependent_resources(self) -> list[ResourceHandle]:
        """Resolve every dependency URN to a resource handle.

        Handles resolved during the same decode pass are returned as-is;
        any other URN becomes a DependencyResource. Deduplicated by URN.
        """
        from tether.resources import DependencyResource

        return [
            self._resources.get(urn) or DependencyResource(urn)
            for urn in self._deps
        ]

    # -- Combinators ----------------------------------------------------

    def map(self, fn: Callable[[Any], Any]) -> DeferredOutputValue:
        """Apply ``fn`` to the payload, producing a new output.

        Unknown outputs propagate without calling ``fn``. When ``fn``
        returns an output, its knownness, secrecy and dependencies are
        merged into the result.
        """
        result = DeferredOutputValue.pending(
            is_secret=self._secret,
            dependencies=self._deps,
            resources=self._resources,
        )
        if not self._known:
            result._settle_unknown()
            return result

        def _on_done(cell: PayloadCell) -> None:
            try:
                mapped = fn(cell.result())
            except Exception as exc:
                result._cell.set_exception(exc)
                return
            result._adopt(mapped)

        self._cell.add_done_callback(_on_done)
        return result

    apply = map

    @classmethod
    def all(cls, *values: Any) -> DeferredOutputValue:
        """Combine outputs and plain values into one output of a list.

        Known iff every input is known; secret if any is secret; depends on
        the union of all dependencies.
        """
        outputs = [v for v in values if isinstance(v, DeferredOutputValue)]
        deps: dict[str, None] = {}
        for out in outputs:
            deps.update(out._deps)
        resources = ChainMap(*(out._resources for out in outputs))
        result = cls.pending(
            is_secret=any(o.is_secret for o in outputs),
            dependencies=deps,
            resources=resources,
        )
        if not all(o.is_known for o in outputs):
            result._settle_unknown()
            return result

        remaining = [len(outputs)]
        lock = threading.Lock()

        def _on_done(cell: PayloadCell) -> None:
            with lock:
                remaining[0] -= 1
                finished = remaining[0] == 0
            if cell.state is CellState.FAILED and not result.is_settled:
                result._cell.set_exception(cell._exception)
                return
            if finished and not result.is_settled:
                result._cell.set_result([
                    v._cell.result() if isinstance(v, DeferredOutputValue) else v
                    for v in values
                ])

        if not outputs:
            result._cell.set_result(list(values))
        for out in outputs:
            out._cell.add_done_callback(_on_done)
        return result

    # -- Internal -------------------------------------------------------

    def _add_dependencies(self, urns: Iterable[str]) -> None:
        self._deps.update(dict.fromkeys(urns))

    def _settle_unknown(self) -> None:
        """Settle a pending output as unknown (no payload)."""
        self._known = False
        self._cell.set_result(None)

    def _adopt(self, inner: Any) -> None:
        """Settle this (pending) output from ``inner``, merging its metadata."""
        if not isinstance(inner, DeferredOutputValue):
            self._cell.set_result(inner)
            return
        self._secret = self._secret or inner._secret
        self._deps.update(inner._deps)
        self._resources.maps.append(inner._resources)
        if not inner._known:
            self._settle_unknown()
            return

        def _on_inner(cell: PayloadCell) -> None:
            if cell.state is CellState.FAILED:
                self._cell.set_exception(cell._exception)
            else:
                self._cell.set_result(cell.result())

        inner._cell.add_done_callback(_on_inner)

    def __repr__(self) -> str:
        flags = []
        if not self._known:
            flags.append("unknown")
        if self._secret:
            flags.append("secret")
        if self._deps:
            flags.append(f"deps={sorted(self._deps)}")
        if self._known and self._cell.state is CellState.RESOLVED:
            payload = "[secret]" if self._secret else repr(self._cell.result())
            flags.insert(0, payload)
        elif self._known and not self._cell.settled:
            flags.insert(0, "<pending>")
        return f"DeferredOutputValue({', '.join(flags)})"


def is_output(obj: Any) -> bool:
    """Return True if ``obj`` is a DeferredOutputValue."""
    return isinstance(obj, DeferredOutputValue)
