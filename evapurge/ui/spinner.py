# evapurge/ui/spinner.py
from __future__ import annotations

from contextlib import contextmanager, nullcontext

from rich.errors import LiveError

from evapurge.ui import console

_DEFAULT_SPINNER = "dots"


class _NoOp:
    def update(self, *_a, **_kw): ...
    def __enter__(self):
        return self

    def __exit__(self, *_e): ...


# ------------------------------------------------------------------ #
#  Public context manager
# ------------------------------------------------------------------ #
@contextmanager
def safe_status(
    *args,
    message: str | None = None,
    spinner: str = _DEFAULT_SPINNER,
):
    """
    Universal status / spinner.

    Examples
    --------
    >>> with safe_status("Scanning content…"):
    ...     collect_usage(paths)
    >>> with safe_status(message="[cyan]Compressing…[/cyan]") as st:
    ...     st.update("Still compressing…")
    """
    if args and message:
        raise TypeError("Give the message either positionally or by keyword, not both")
    if args:
        message = str(args[0])
    message = message or "Working…"

    # Nested spinners raise LiveError → degrade to a silent surrogate
    try:
        status = console.status(message, spinner=spinner)
        status.__enter__()
    except LiveError:
        with nullcontext(_NoOp()) as st:
            yield st
        return

    try:
        yield status
    finally:
        status.__exit__(None, None, None)
