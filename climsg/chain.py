"""Error chains: wrapping errors with context and taking them apart again.

A chain is built by wrapping an error in context, one level at a time::

    err = wrap(PermissionError("bad file permissions"), "could not read DB config")
    err = wrap(err, "failed to insert new record")

``str(err)`` is then ``"failed to insert new record: could not read DB config:
bad file permissions"``. Rendering splits that flattened message back on
``": "``. A message that contains ``": "`` as ordinary punctuation therefore
shows up as extra cause levels; :func:`cause_chain` walks ``__cause__`` links
instead and does not have that problem.
"""

from __future__ import annotations

from typing import Mapping

SEPARATOR = ": "


def format_message(fmt: str, args: tuple[object, ...]) -> str:
    """Interpolates `args` into `fmt` with ``%``, the way ``logging`` does.

    Without args `fmt` is returned verbatim, so a literal "%" needs no
    escaping. A single non-empty mapping is used for ``%(name)s`` fields.
    """
    if not args:
        return fmt
    if len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
        return fmt % args[0]
    return fmt % args


class WrappedError(Exception):
    """An error with a context message in front of its cause.

    The cause is kept in `cause` as well as ``__cause__``, since a
    ``raise ... from`` clause replaces the latter.
    """

    def __init__(self, context: str, cause: BaseException) -> None:
        super().__init__(context, cause)
        self.context = context
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.context}{SEPARATOR}{flatten(self.cause)}"


def wrap(cause: BaseException, fmt: str, *args: object) -> WrappedError:
    """Adds a context message (``fmt % args``) in front of `cause`."""
    return WrappedError(format_message(fmt, args), cause)


def own_message(err: BaseException) -> str:
    """Returns the message of `err` as raised, before any cause text is removed."""
    if isinstance(err, WrappedError):
        return err.context
    return str(err) or type(err).__name__


def _next_cause(err: BaseException) -> BaseException | None:
    if isinstance(err, WrappedError):
        return err.cause
    return err.__cause__


def _strip_cause_text(message: str, cause_text: str) -> str | None:
    # * `raise X(f"context: {exc}") from exc` already carries the cause text.
    if not cause_text:
        return message
    if message == cause_text:
        return None
    suffix = SEPARATOR + cause_text
    if message.endswith(suffix):
        return message[: -len(suffix)]
    return message


def _walk(err: BaseException, seen: set[int]) -> list[str]:
    messages: list[str] = []
    seen = set(seen)
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        cause = _next_cause(current)
        message: str | None = own_message(current)
        if cause is not None and id(cause) not in seen and not isinstance(current, WrappedError):
            message = _strip_cause_text(message, SEPARATOR.join(_walk(cause, seen)))
        if message is not None:
            messages.append(message)
        current = cause
    return messages


def cause_chain(err: BaseException) -> list[str]:
    """Returns the message of every link in the cause chain, outermost first.

    Links are followed through `WrappedError.cause` and explicit
    ``__cause__``; implicit ``__context__`` links ("during handling of the
    above exception") are not. When a plain exception's message already ends
    with its cause's text, that text is counted once, under the cause. A cycle
    is cut at the first repeated error.
    """
    return _walk(err, set())


def flatten(err: str | BaseException) -> str:
    """Returns the full rendered message of `err`, causes included."""
    if isinstance(err, str):
        return err
    return SEPARATOR.join(cause_chain(err))


def split_chain(message: str) -> list[str]:
    """Splits a flattened message into its segments, outermost first.

    ``SEPARATOR.join(split_chain(m)) == m`` for every `m`.
    """
    return message.split(SEPARATOR)


def render_tree(causes: list[str]) -> list[tuple[int, str]]:
    """Pairs each cause with its depth in the tree (first cause at depth 0)."""
    return [(depth, cause.strip()) for depth, cause in enumerate(causes)]
