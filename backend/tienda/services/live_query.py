# backend/tienda/services/live_query.py

"""
Consultas en vivo sobre tablas de la base de datos.

Un LiveQuery envuelve una consulta asíncrona y la vuelve a ejecutar cada vez
que un store notifica una escritura confirmada sobre alguna de sus tablas.
Los resultados se entregan por una cola propia de cada suscriptor.

Uso:
    async with cart_service.observe_total() as live:
        total = await live.get()         # valor inicial
        ...
        async for total in live:         # valores posteriores
            ...

Garantías:
- Cada re-evaluación se ejecuta bajo un lock FIFO del suscriptor y lee el
  estado confirmado en ese momento, así que un suscriptor nunca recibe un
  valor superado después de uno más reciente.
- cancel() solo elimina la entrada del registro; no toca los datos.
- La cola de cada suscriptor guarda como mucho max_pending valores; si el
  consumidor no lee, se descarta el valor pendiente más antiguo.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

Query = Callable[[], Awaitable[Any]]

# Marca de fin de suscripción dentro de la cola
_CLOSED = object()

DEFAULT_MAX_PENDING = 64


class SubscriptionClosed(Exception):
    """La suscripción fue cancelada y no quedan valores pendientes."""


class LiveQuery:
    """Suscripción a una consulta que se recalcula tras cada escritura."""

    def __init__(
        self,
        tracker: "InvalidationTracker",
        tables: Iterable[str],
        query: Query,
        name: str = "",
        max_pending: int = DEFAULT_MAX_PENDING,
    ):
        self._tracker = tracker
        self.tables = frozenset(tables)
        self.name = name or ",".join(sorted(self.tables))
        self._query = query
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max(max_pending, 1))
        self._lock = asyncio.Lock()
        self._started = False
        self._cancelled = False

    @property
    def active(self) -> bool:
        return self._started and not self._cancelled

    async def start(self) -> "LiveQuery":
        """Registra la suscripción y encola el resultado inicial."""
        if self._started:
            return self
        if self._cancelled:
            raise SubscriptionClosed(self.name)
        self._started = True
        # Registrar antes de la primera lectura: una escritura confirmada
        # entre ambas también provoca una re-evaluación
        self._tracker._register(self)
        try:
            await self.refresh(propagate=True)
        except Exception:
            self.cancel()
            raise
        return self

    async def refresh(self, propagate: bool = False) -> None:
        """Ejecuta la consulta y encola el resultado si la suscripción sigue activa."""
        async with self._lock:
            if not self.active:
                return
            try:
                value = await self._query()
            except Exception:
                if propagate:
                    raise
                # La escritura ya está confirmada; el suscriptor sigue registrado
                logger.exception(f"Error re-evaluando la consulta en vivo '{self.name}'")
                return
            if self.active:
                self._enqueue(value)

    def _enqueue(self, value: Any) -> None:
        if self._queue.full():
            self._queue.get_nowait()
            logger.debug(f"Consulta en vivo '{self.name}': cola llena, se descarta el valor más antiguo")
        self._queue.put_nowait(value)

    async def get(self) -> Any:
        """Espera el siguiente resultado. Lanza SubscriptionClosed tras cancel()."""
        if not self._started:
            await self.start()
        if self._cancelled and self._queue.empty():
            raise SubscriptionClosed(self.name)
        value = await self._queue.get()
        if value is _CLOSED:
            raise SubscriptionClosed(self.name)
        return value

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._tracker._unregister(self)
        # Despierta a un consumidor bloqueado en get()
        self._enqueue(_CLOSED)
        logger.debug(f"Consulta en vivo '{self.name}' cancelada")

    async def __aenter__(self) -> "LiveQuery":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.cancel()

    def __aiter__(self) -> "LiveQuery":
        return self

    async def __anext__(self) -> Any:
        try:
            return await self.get()
        except SubscriptionClosed:
            raise StopAsyncIteration


class InvalidationTracker:
    """
    Registro de suscripciones activas por nombre de tabla.

    Los stores llaman a notify() después de confirmar una escritura que
    afectó filas de una tabla.
    """

    def __init__(self, max_pending: int = DEFAULT_MAX_PENDING):
        self.max_pending = max_pending
        self._subscriptions: Dict[str, List[LiveQuery]] = {}

    def live_query(self, tables: Iterable[str], query: Query, name: str = "") -> LiveQuery:
        """Crea una suscripción sin arrancar; se activa con start() o async with."""
        return LiveQuery(self, tables, query, name=name, max_pending=self.max_pending)

    async def subscribe(self, tables: Iterable[str], query: Query, name: str = "") -> LiveQuery:
        """Crea y arranca una suscripción (el valor inicial ya está en la cola)."""
        return await self.live_query(tables, query, name=name).start()

    async def notify(self, *tables: str) -> None:
        """Re-evalúa, en orden de registro, cada suscripción que observa alguna tabla."""
        seen = set()
        targets: List[LiveQuery] = []
        for table in tables:
            for live in self._subscriptions.get(table, []):
                if id(live) not in seen:
                    seen.add(id(live))
                    targets.append(live)
        if targets:
            logger.debug(f"Invalidando {len(targets)} consultas en vivo por cambios en {', '.join(tables)}")
        for live in targets:
            await live.refresh()

    def subscription_count(self, table: Optional[str] = None) -> int:
        if table is not None:
            return len(self._subscriptions.get(table, []))
        return len({id(live) for lives in self._subscriptions.values() for live in lives})

    def cancel_all(self) -> None:
        for lives in list(self._subscriptions.values()):
            for live in list(lives):
                live.cancel()

    def _register(self, live: LiveQuery) -> None:
        for table in live.tables:
            self._subscriptions.setdefault(table, []).append(live)

    def _unregister(self, live: LiveQuery) -> None:
        for table in live.tables:
            lives = self._subscriptions.get(table)
            if lives and live in lives:
                lives.remove(live)
                if not lives:
                    del self._subscriptions[table]
