from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx

from core.sync.controller import Notice, SyncController, SyncState
from services.sheets.endpoint import SheetEndpoint
from shared.config.settings import EndpointSettings, SyncSettings, load_sync_settings
from shared.storage.local_store import LocalStore
from shared.storage.vote_ledger import VoteLedger


@dataclass
class AppContext:
    # -------------------------------------------------
    # CONFIG
    # -------------------------------------------------
    settings: SyncSettings
    store: LocalStore
    endpoint_settings: EndpointSettings

    # -------------------------------------------------
    # SYNC
    # -------------------------------------------------
    ledger: VoteLedger
    endpoint: SheetEndpoint
    controller: SyncController = field(repr=False)

    @classmethod
    def build(
        cls,
        settings: Optional[SyncSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_change: Optional[Callable[[SyncState], None]] = None,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ) -> "AppContext":
        settings = settings or load_sync_settings()

        store = LocalStore(settings.state_dir)
        endpoint_settings = EndpointSettings(store)
        ledger = VoteLedger(store)
        endpoint = SheetEndpoint(
            endpoint_settings,
            timeout=settings.http_timeout,
            transport=transport,
        )

        # The sheet endpoint is both the read source and the write sink
        controller = SyncController(
            ledger=ledger,
            source=endpoint,
            sink=endpoint,
            endpoint=endpoint_settings,
            poll_interval=settings.poll_interval,
            settle_delay=settings.settle_delay,
            on_change=on_change,
            on_notice=on_notice,
        )

        return cls(
            settings=settings,
            store=store,
            endpoint_settings=endpoint_settings,
            ledger=ledger,
            endpoint=endpoint,
            controller=controller,
        )
