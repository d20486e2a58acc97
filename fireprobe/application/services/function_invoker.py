"""Function invoker: parses ``name(args)`` expressions and calls remote functions.

Callable functions receive the first parsed argument as their payload.
HTTP (on_request) functions take a GET query or a POST JSON body. The
preview builders render the client-side call a tester would write for
the same request, so it can be pasted into a proof of concept.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl

from fireprobe.application.dtos.requests import HttpFunctionRequest
from fireprobe.core.log import OperationLog
from fireprobe.core.session import Session
from fireprobe.domain.enums import HttpMethod
from fireprobe.domain.exceptions import BackendError, FireprobeException, ValidationException
from fireprobe.shared.utils.literals import LiteralSyntaxError, parse_argument_list, parse_literal
from fireprobe.shared.utils.validation import InputValidator

logger = logging.getLogger(__name__)

_REASONS = {
    "internal": "Reason: Unknown. ",
    "unknown": "Reason: Unknown. ",
    "not-found": "Reason: Cloud Function not found. ",
}


@dataclass(frozen=True)
class CallExpression:
    """A parsed ``name(arguments)`` expression.

    ``arguments`` keeps the raw text after the name, parentheses included.
    """

    name: str
    arguments: str
    values: list[Any] = field(default_factory=list)

    @property
    def payload(self) -> Any:
        """The value sent to a callable function (first argument, or None)."""
        return self.values[0] if self.values else None


def parse_call_expression(text: str) -> CallExpression:
    """Split and validate a call expression.

    Raises:
        ValidationException: On a bad name/shape, a missing closing
            parenthesis, or arguments that are not JSON literals.
    """
    expression = text.strip()
    if not InputValidator.has_call_head(expression):
        raise ValidationException("Please enter a valid invoke syntax", field="expression")
    if not expression.endswith(")"):
        raise ValidationException(
            "Please enter a valid invoke syntax. The input must end with ')'", field="expression"
        )

    name = expression.split("(")[0]
    arguments = expression[len(name):]
    try:
        values = parse_argument_list(arguments[1:-1])
    except LiteralSyntaxError as exc:
        raise ValidationException(f"Invalid invoke syntax: {exc}", field="expression") from exc
    return CallExpression(name=name, arguments=arguments, values=values)


def parse_query_params(text: str) -> dict[str, Any]:
    """Parse HTTP function arguments: an object literal or a raw query string."""
    raw = text.strip()
    if not raw:
        return {}
    if raw.startswith("{"):
        try:
            parsed = parse_literal(raw)
        except LiteralSyntaxError as exc:
            raise ValidationException("Please enter a valid JSON object", field="arguments") from exc
        if not isinstance(parsed, dict):
            raise ValidationException("Please enter a valid JSON object", field="arguments")
        return parsed
    return dict(parse_qsl(raw.lstrip("?"), keep_blank_values=True))


def _compact(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def build_callable_preview(expression: CallExpression) -> str:
    """Render the client-side callable invocation for an expression."""
    args = ", ".join(json.dumps(value, indent=2, ensure_ascii=False) for value in expression.values)
    return f'const callable = httpsCallable("{expression.name}")\ncallable({args})'


def build_http_preview(url: str, method: HttpMethod, params: dict[str, Any]) -> str:
    """Render the fetch() call for an HTTP function request."""
    if method is HttpMethod.GET:
        if params:
            query = "&".join(f"{key}={value}" for key, value in params.items())
            url = f"{url}?{query}"
        return f'fetch("{url}")'
    body = json.dumps(params, indent=2, ensure_ascii=False)
    return (
        f'fetch("{url}", {{\n'
        f'  method: "POST",\n'
        f'  headers: {{ "Content-Type": "application/json" }},\n'
        f"  body: JSON.stringify({body})\n"
        f"}})"
    )


class FunctionInvoker:
    """Invokes remote functions and logs each settlement."""

    def __init__(self, session: Session, log: OperationLog) -> None:
        self._session = session
        self._log = log

    async def invoke(self, text: str) -> None:
        """Invoke a callable function from a ``name(args)`` expression."""
        try:
            functions = self._session.functions
            expression = parse_call_expression(text)
        except FireprobeException as exc:
            self._log.error(exc.message)
            return

        try:
            result = await functions.call(expression.name, expression.payload)
        except BackendError as exc:
            reason = _REASONS.get(exc.code, exc.message)
            self._log.error(f"Error: Cannot invoke {expression.name}. {reason}")
            return
        self._log.success(f"Invoke: {text.strip()}\nResponse: {_compact({'data': result})}")

    async def invoke_http(self, request: HttpFunctionRequest) -> None:
        """Call an HTTP function with a GET query or a POST JSON body."""
        try:
            functions = self._session.functions
            if not InputValidator.is_function_name(request.name):
                raise ValidationException("Please enter a valid function name", field="name")
            params = parse_query_params(request.arguments)
        except FireprobeException as exc:
            self._log.error(exc.message)
            return

        try:
            response = await functions.request(request.name, request.method.value, params)
        except BackendError as exc:
            self._log.error(f"Error: Cannot invoke {request.name}. {exc.message}")
            return

        summary = (
            f"HTTP {request.method.value} {functions.function_url(request.name)}\n"
            f"Status: {response.status_code}\nResponse: "
        )
        body = response.body if isinstance(response.body, str) else _compact(response.body)
        if response.status_code >= 400:
            self._log.error(summary + body)
        else:
            self._log.success(summary + body)

    def preview_callable(self, text: str) -> str:
        """Return the callable preview; raises ValidationException on bad syntax."""
        return build_callable_preview(parse_call_expression(text))

    def preview_http(self, request: HttpFunctionRequest) -> str:
        """Return the fetch() preview for an HTTP function request."""
        if not InputValidator.is_function_name(request.name):
            raise ValidationException("Please enter a valid function name", field="name")
        params = parse_query_params(request.arguments)
        return build_http_preview(self._session.functions.function_url(request.name), request.method, params)
