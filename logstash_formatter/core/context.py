"""
Diagnostic Context
------------------
MDC (mapped diagnostic context): string key/value pairs attached to every
record logged in the current context, encoded under `@mdc`.

NDC (nested diagnostic context): a stack of context frames, flattened with
"." and encoded under `ndc`.

Both live in ContextVars, so every thread and every asyncio task sees its
own values. Stored values are never mutated in place; each change sets a
new tuple / dict.
"""

import contextvars
from contextlib import contextmanager
from typing import Iterator, Mapping

NDC_SEPARATOR = "."

_mdc_var: contextvars.ContextVar[dict[str, str]] = contextvars.ContextVar("logstash_mdc", default={})
_ndc_var: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar("logstash_ndc", default=())


# ── MDC ───────────────────────────────────────────────────────────────────────

def put_mdc(key: str, value: object) -> None:
    _mdc_var.set({**_mdc_var.get(), key: str(value)})


def remove_mdc(key: str) -> None:
    current = _mdc_var.get()
    if key in current:
        _mdc_var.set({k: v for k, v in current.items() if k != key})


def clear_mdc() -> None:
    _mdc_var.set({})


def get_mdc() -> dict[str, str]:
    """A copy of the current mapping."""
    return dict(_mdc_var.get())


@contextmanager
def mdc_context(values: Mapping[str, object] | None = None, **kwargs: object) -> Iterator[None]:
    """Add entries for the duration of the block, restoring the previous mapping after."""
    added = {**(values or {}), **kwargs}
    token = _mdc_var.set({**_mdc_var.get(), **{k: str(v) for k, v in added.items()}})
    try:
        yield
    finally:
        _mdc_var.reset(token)


# ── NDC ───────────────────────────────────────────────────────────────────────

def push_ndc(frame: str) -> None:
    _ndc_var.set(_ndc_var.get() + (frame,))


def pop_ndc() -> str:
    """Remove and return the innermost frame; empty string when there is none."""
    frames = _ndc_var.get()
    if not frames:
        return ""
    _ndc_var.set(frames[:-1])
    return frames[-1]


def clear_ndc() -> None:
    _ndc_var.set(())


def get_ndc() -> str:
    return NDC_SEPARATOR.join(_ndc_var.get())


@contextmanager
def ndc_context(frame: str) -> Iterator[None]:
    token = _ndc_var.set(_ndc_var.get() + (frame,))
    try:
        yield
    finally:
        _ndc_var.reset(token)
