"""
Background task loop for the NeuroNano editor.

The curses loop never awaits anything. Coroutines (the AI rewrite requests) are
handed to an asyncio event loop running in a daemon thread, and report back to
the editor through a queue that the curses loop polls.
"""
import asyncio
import threading

from neuronano import logger


class BackgroundLoop:
    """An asyncio event loop running in its own daemon thread."""
    def __init__(self, name: str = "neuronano-tasks"):
        self.name = name
        self.loop = None
        self._thread = None
        self._ready = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Start the loop thread (idempotent)."""
        if self.running:
            return self
        self._ready.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        self._ready.wait()
        return self

    def _run(self):
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        self._ready.set()
        try:
            self.loop.run_forever()
        finally:
            self._cancel_pending()
            self.loop.close()
            logger.log("background loop stopped.")

    def _cancel_pending(self):
        """Cancel tasks still in flight and let them unwind before the loop closes."""
        pending = asyncio.all_tasks(self.loop)
        if not pending:
            return
        for task in pending:
            task.cancel()
        self.loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        logger.log(f"cancelled {len(pending)} unfinished task(s).")

    def submit(self, coro):
        """Schedule `coro` on the loop and return its concurrent.futures.Future."""
        if not self.running:
            self.start()
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def stop(self):
        """
        Stop the loop; tasks still in flight are cancelled and their results
        are never read.
        """
        if self.running:
            self.loop.call_soon_threadsafe(self.loop.stop)
            self._thread.join(timeout=1.0)
