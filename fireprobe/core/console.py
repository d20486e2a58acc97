"""Console: composition root owning the log, the session and the operators.

One Console per process, created by the app factory and stored on
``app.state``; every endpoint reaches the operators through it.
"""

from __future__ import annotations

from fireprobe.application.interfaces import IBackendSDK
from fireprobe.application.services.auth_controller import AuthController
from fireprobe.application.services.blob_operator import BlobOperator
from fireprobe.application.services.function_invoker import FunctionInvoker
from fireprobe.application.services.store_operator import StoreOperator
from fireprobe.core.config import Settings
from fireprobe.core.dispatcher import OperationDispatcher
from fireprobe.core.log import OperationLog
from fireprobe.core.session import Session
from fireprobe.domain.entities import ConnectionDescriptor


class Console:
    """Wires the operators to one shared Session and OperationLog."""

    def __init__(self, settings: Settings, sdk: IBackendSDK | None) -> None:
        self.settings = settings
        self.sdk = sdk
        self.log = OperationLog()
        self.session = Session(self.log)
        self.dispatcher = OperationDispatcher(self.log)
        self.auth = AuthController(self.session, self.log, anchor_id=settings.mfa_anchor_id)
        self.store = StoreOperator(self.session, self.log)
        self.functions = FunctionInvoker(self.session, self.log)
        self.blob = BlobOperator(self.session, self.log)

    def initialize(self, descriptor: ConnectionDescriptor) -> bool:
        """Open the backend session with the configured SDK."""
        return self.session.initialize(descriptor, self.sdk)

    async def close(self) -> None:
        await self.dispatcher.shutdown()
        self.auth.widget_slot.destroy()
        await self.session.close()
