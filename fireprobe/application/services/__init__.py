"""Application services: the four operators."""

from fireprobe.application.services.auth_controller import AuthController, ChallengeWidgetSlot
from fireprobe.application.services.blob_operator import BlobOperator
from fireprobe.application.services.function_invoker import FunctionInvoker, parse_call_expression
from fireprobe.application.services.store_operator import StoreOperator

__all__ = [
    "AuthController",
    "BlobOperator",
    "ChallengeWidgetSlot",
    "FunctionInvoker",
    "StoreOperator",
    "parse_call_expression",
]
