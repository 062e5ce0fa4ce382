"""Formatting helpers for reporting captured errors in assertion messages."""

import traceback


def root_cause(exc: BaseException) -> BaseException:
    """Follow the exception chain to its innermost cause.

    Explicit causes (``raise ... from``) are followed first; implicit
    context is followed unless it was suppressed.
    """
    seen = {id(exc)}
    current = exc
    while True:
        nxt = current.__cause__
        if nxt is None and not current.__suppress_context__:
            nxt = current.__context__
        if nxt is None or id(nxt) in seen:
            return current
        seen.add(id(nxt))
        current = nxt


def stack_to_string(exc: BaseException) -> str:
    """Describe the root cause of ``exc`` and where it was raised.

    Returns:
        A newline-prefixed block: the root cause class and message, then
        one tab-indented line per traceback frame.
    """
    cause = root_cause(exc)
    lines = ["", f"{type(cause)}: {cause}"]
    for frame in traceback.extract_tb(cause.__traceback__):
        lines.append(f'\tFile "{frame.filename}", line {frame.lineno}, in {frame.name}')
    return "\n".join(lines) + "\n"
