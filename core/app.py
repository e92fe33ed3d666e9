import asyncio
import signal
import sys

from dotenv import load_dotenv

from core.board import render_board
from core.context import AppContext
from core.sync.controller import Notice, SyncController, SyncState, TabView
from runtime.version import as_string
from shared.logging.logger import get_logger

log = get_logger("core.app")

MIN_WATCH_INTERVAL = 0.05


class LiveBoard:
    """
    Logs the results board whenever the vote view changes.
    """

    def __init__(self):
        self._last_ids: tuple = ()

    def on_change(self, state: SyncState) -> None:
        ids = tuple(v.id for v in state.votes)
        if ids == self._last_ids:
            return
        self._last_ids = ids
        log.info("Results updated\n" + render_board(state.votes, live=True))

    @staticmethod
    def on_notice(notice: Notice) -> None:
        log.info(f"[{notice.kind}] {notice.message}")


async def watch_endpoint(
    controller: SyncController,
    stop_event: asyncio.Event,
    interval: float,
) -> None:
    """
    Re-check the stored endpoint until shutdown.

    `votectl endpoint set|clear` edits the shared state from another
    process, so mode transitions are picked up here.
    """
    interval = max(interval, MIN_WATCH_INTERVAL)
    while not stop_event.is_set():
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass
        else:
            return

        try:
            await controller.reconcile_mode()
        except Exception:
            log.exception("Endpoint check failed")


async def main(stop_event: asyncio.Event):
    # --------------------------------------------------
    # ENV
    # --------------------------------------------------
    load_dotenv()
    log.info("Environment variables loaded")
    log.info(f"{as_string()} booting")

    # --------------------------------------------------
    # SYNC
    # --------------------------------------------------
    board = LiveBoard()
    ctx = AppContext.build(on_change=board.on_change, on_notice=board.on_notice)
    controller = ctx.controller

    log.info(f"Mode: {controller.mode.value}")
    board.on_change(controller.state)

    if controller.is_cloud:
        await controller.show_view(TabView.RESULTS)
        controller.start()
    else:
        log.info("No endpoint configured; serving the local ledger only")

    # --------------------------------------------------
    # BLOCK UNTIL SHUTDOWN SIGNAL
    # --------------------------------------------------
    await watch_endpoint(controller, stop_event, ctx.settings.poll_interval)

    log.info("Shutdown initiated")

    try:
        await controller.stop()
    except Exception as e:
        log.warning(f"Controller shutdown error ignored: {e}")

    log.info("VotoDirecto stopped")


# ----------------------------------------------------------------------
# SIGNAL HANDLING (WINDOWS-SAFE)
# ----------------------------------------------------------------------

def _install_signal_handlers(
    loop: asyncio.AbstractEventLoop,
    stop_event: asyncio.Event,
):
    """
    Windows-safe Ctrl+C handler.
    Uses signal.signal + asyncio.Event to unwind cleanly.
    """

    def _handler(signum, frame):
        try:
            loop.call_soon_threadsafe(stop_event.set)
        except RuntimeError:
            stop_event.set()

    try:
        signal.signal(signal.SIGINT, _handler)
        signal.signal(signal.SIGTERM, _handler)
    except (ValueError, OSError) as e:
        log.debug(f"Signal handlers not installed: {e}")


# ----------------------------------------------------------------------
# ENTRYPOINT
# ----------------------------------------------------------------------

def run():
    stop_event = asyncio.Event()

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    _install_signal_handlers(loop, stop_event)

    try:
        loop.run_until_complete(main(stop_event))

    except KeyboardInterrupt:
        log.info("KeyboardInterrupt received, shutdown initiated")
        stop_event.set()

    finally:
        # --------------------------------------------------
        # CANCEL REMAINING TASKS (CLEANLY)
        # --------------------------------------------------
        pending = [t for t in asyncio.all_tasks(loop) if not t.done()]
        for task in pending:
            task.cancel()

        if pending:
            loop.run_until_complete(
                asyncio.gather(*pending, return_exceptions=True)
            )

        loop.run_until_complete(loop.shutdown_asyncgens())

        asyncio.set_event_loop(None)
        loop.close()


if __name__ == "__main__":
    run()
    sys.exit(0)
