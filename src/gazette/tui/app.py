from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from ..config import GazetteConfig, DEFAULT_CONFIG
from ..errors import GazetteError
from ..feed import FeedClient
from .effects import perform
from .machine import Mode, Model, update, view
from .messages import Command, Event, FetchContent, FetchList, Key, Quit, Resize, ScheduleTick, Start, TimerTick

logger = logging.getLogger(__name__)


def key_name(event: events.Key) -> str:
    """Printable keys are passed on as their character, the rest by name."""
    if event.is_printable and event.character:
        return event.character
    return event.key


class GazetteApp(App):
    """Textual runtime around the state machine.

    Events are applied one at a time on the app's event loop. Fetches run on a
    thread pool and their results come back through ``apply_event``.
    """

    CSS = """
    #screen {
        width: 100%;
        height: 100%;
    }
    """

    # ctrl+c would otherwise be swallowed by Textual's own binding
    BINDINGS = [Binding("ctrl+c", "forward_ctrl_c", show=False, priority=True)]

    def __init__(
        self,
        config: GazetteConfig = DEFAULT_CONFIG,
        client: Optional[FeedClient] = None,
        model: Optional[Model] = None,
        max_workers: int = 2,
    ) -> None:
        super().__init__()
        self.config = config
        self.client = client or FeedClient(config)
        self.model = model or Model(config=config)
        self.max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None
        self._fetch_tasks: set[asyncio.Task[None]] = set()
        self._closed = False
        self.crash: Optional[BaseException] = None

    def compose(self) -> ComposeResult:
        yield Static(id="screen")

    @property
    def failure(self) -> Optional[GazetteError]:
        return self.model.failure

    async def on_mount(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="gazette-fetch")
        self.apply_event(Resize(self.size.width, self.size.height))
        self.apply_event(Start())

    def apply_event(self, event: Event) -> None:
        """Apply one event, run the resulting commands and redraw."""
        self.model, commands = update(self.model, event)
        self._run(commands)
        self._refresh_screen()

    def _refresh_screen(self) -> None:
        self.query_one("#screen", Static).update(Text.from_ansi(view(self.model)))

    def _run(self, commands: Iterable[Command]) -> None:
        for command in commands:
            if isinstance(command, Quit):
                self.exit(return_code=command.code)
            elif isinstance(command, ScheduleTick):
                self.set_timer(command.delay, lambda: self.apply_event(TimerTick()))
            elif isinstance(command, (FetchList, FetchContent)):
                task = asyncio.create_task(self._perform(command))
                self._fetch_tasks.add(task)
                task.add_done_callback(self._fetch_tasks.discard)
            else:
                raise TypeError(f"unknown command: {command!r}")

    async def _perform(self, command: FetchList | FetchContent) -> None:
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(self._executor, perform, command, self.client)
        except Exception as exc:
            # a bug in a worker; end the session so the CLI can report it
            logger.exception("background %s crashed", type(command).__name__)
            self.crash = exc
            self.exit(return_code=1)
            return
        if self._closed:
            return
        self.apply_event(result)

    def on_resize(self, event: events.Resize) -> None:
        self.apply_event(Resize(event.size.width, event.size.height))

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.apply_event(Key(key_name(event)))

    def action_forward_ctrl_c(self) -> None:
        self.apply_event(Key("ctrl+c"))

    async def on_unmount(self) -> None:
        self._closed = True
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None
        self.client.close()


def run_tui(config: GazetteConfig = DEFAULT_CONFIG) -> int:
    """Run the full-screen interface and return the process exit code.

    Raises the stored GazetteError when the session ended in the failed state,
    and re-raises whatever crashed a background fetch.
    """
    app = GazetteApp(config)
    app.run()
    if app.crash is not None:
        raise app.crash
    if app.model.mode is Mode.FAILED:
        raise app.failure
    return app.return_code or 0
