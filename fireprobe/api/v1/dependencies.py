"""Presentation-layer dependency injection.

Routes reach the session and operators only through the Console stored
on ``app.state`` by the app factory; nothing is constructed per request.
"""

from typing import Annotated

from fastapi import Depends, Request

from fireprobe.core.console import Console


def get_console(request: Request) -> Console:
    """Return the process-wide Console."""
    return request.app.state.console


ConsoleDep = Annotated[Console, Depends(get_console)]
