"""
Envio assíncrono cancelável.

As telas simulam a latência de uma API com um atraso fixo antes de
confirmar o envio. O atraso roda como uma ``asyncio.Task``; quando a
tela é fechada antes do fim, a tarefa é cancelada e o callback de
conclusão nunca é chamado, então nenhum estado de uma tela já fechada é
alterado.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from backoffice.infra.logger import log_system_event


async def simulated_delay(seconds: float) -> None:
    """Atraso fixo sem I/O real."""
    if seconds > 0:
        await asyncio.sleep(seconds)


class SubmissionTask:
    """Encapsula uma corrotina de envio com cancelamento explícito.

    ``on_done`` recebe o resultado e ``on_error`` a exceção; nenhum dos
    dois é chamado se a tarefa for cancelada.
    """

    def __init__(
        self,
        coro_factory: Callable[[], Awaitable[Any]],
        on_done: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[BaseException], None]] = None,
        name: str = "submission",
    ):
        self._coro_factory = coro_factory
        self._on_done = on_done
        self._on_error = on_error
        self.name = name
        self._task: Optional[asyncio.Task] = None
        self.cancelled = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Agenda a tarefa no loop em execução."""
        if self._task is not None:
            raise RuntimeError(f"{self.name} já iniciada")
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        return self._task

    async def _run(self) -> Any:
        try:
            result = await self._coro_factory()
        except asyncio.CancelledError:
            self.cancelled = True
            log_system_event("submission_cancelled", {"task": self.name}, level="warning")
            raise
        except Exception as e:
            if self._on_error is not None:
                self._on_error(e)
            raise
        if self._on_done is not None:
            self._on_done(result)
        return result

    async def wait(self) -> Any:
        if self._task is None:
            self.start()
        return await self._task

    def cancel(self) -> bool:
        """Cancela a tarefa se ainda estiver pendente."""
        if self._task is None or self._task.done():
            return False
        self.cancelled = True
        return self._task.cancel()
