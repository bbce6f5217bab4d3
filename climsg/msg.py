"""Status lines, titles and error trees for command-line output.

Every message kind has a label and a colour::

    Success: compiled 42 packages
    Warning: directory is empty, skipping
    Info: using value from config file
    Error: could not complete transaction
    ╰─ cause: failed to insert new record
       ╰─ cause: bad file permissions

Success, warning, info, title and plain text go to stdout; errors go to
stderr. The module-level functions use a default :class:`Printer`; the
``f``-prefixed ones (``finfo``, ``ferr``...) take the output stream first.
"""

from __future__ import annotations

import sys
from typing import TextIO

from climsg.chain import cause_chain, flatten, format_message, render_tree, split_chain
from climsg.colour import ColourMode, Style, style

BRANCH = "╰─ "
INDENT = 3

_LABELS: dict[Style, str] = {
    Style.SUCCESS: "Success",
    Style.ERROR: "Error",
    Style.WARN: "Warning",
    Style.INFO: "Info",
}


class Printer:
    """Writes styled messages to a pair of output streams.

    Args:
        stdout: Stream for success/warn/info/title/text. None means whatever
            ``sys.stdout`` is at write time.
        stderr: Stream for errors. None means ``sys.stderr`` at write time.
        mode: Colour mode. AUTO follows the process-wide colour state.
    """

    def __init__(
        self,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        mode: ColourMode = ColourMode.AUTO,
    ) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self.mode = mode

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def _line(self, tag: Style, message: str, enabled: bool) -> str:
        return f"{style(tag, _LABELS[tag], enabled=enabled)}: {message}"

    def success_string(self, fmt: str, *args: object) -> str:
        return self._line(Style.SUCCESS, format_message(fmt, args), self.mode.resolve())

    def error_string(self, fmt: str, *args: object) -> str:
        return self._line(Style.ERROR, format_message(fmt, args), self.mode.resolve())

    def warn_string(self, fmt: str, *args: object) -> str:
        return self._line(Style.WARN, format_message(fmt, args), self.mode.resolve())

    def info_string(self, fmt: str, *args: object) -> str:
        return self._line(Style.INFO, format_message(fmt, args), self.mode.resolve())

    def title_string(self, fmt: str, *args: object) -> str:
        """Returns the styled title without the surrounding blank lines."""
        return style(Style.TITLE, format_message(fmt, args).strip(), enabled=self.mode.resolve())

    def success(self, fmt: str, *args: object) -> None:
        self.stdout.write(self.success_string(fmt, *args) + "\n")

    def error(self, fmt: str, *args: object) -> None:
        self.stderr.write(self.error_string(fmt, *args) + "\n")

    def warn(self, fmt: str, *args: object) -> None:
        self.stdout.write(self.warn_string(fmt, *args) + "\n")

    def info(self, fmt: str, *args: object) -> None:
        self.stdout.write(self.info_string(fmt, *args) + "\n")

    def title(self, fmt: str, *args: object) -> None:
        """Prints a title with one leading and two trailing newlines."""
        message = format_message(fmt, args)
        self.stdout.write("\n" + style(Style.TITLE, message, enabled=self.mode.resolve()) + "\n\n")

    def text(self, fmt: str, *args: object) -> None:
        """Prints an unstyled line."""
        self.stdout.write(format_message(fmt, args) + "\n")

    def err(self, err: str | BaseException | None, *, structured: bool = False) -> None:
        """Prints an error and its chain of causes as a tree.

        The first segment is printed as an ``Error:`` line; every further
        segment gets its own ``cause:`` line, indented one level deeper than
        the one before. Nothing is printed when `err` is None or empty.

        Args:
            err: An exception or an already flattened message.
            structured: Follow ``__cause__`` links instead of splitting the
                flattened message on ``": "``. Only applies to exceptions.
        """
        if err is None or err == "":
            return

        if structured and isinstance(err, BaseException):
            segments = cause_chain(err)
        else:
            segments = split_chain(flatten(err))

        enabled = self.mode.resolve()
        lines = [self._line(Style.ERROR, segments[0], enabled) + "\n"]
        cause = style(Style.CAUSE, "cause", enabled=enabled)
        for depth, text in render_tree(segments[1:]):
            lines.append(f"{' ' * (INDENT * depth)}{BRANCH}{cause}: {text}\n")

        # * One write per error so the tree is not interleaved with other output.
        self.stderr.write("".join(lines))


def _default() -> Printer:
    return Printer()


def success(fmt: str, *args: object) -> None:
    _default().success(fmt, *args)


def error(fmt: str, *args: object) -> None:
    _default().error(fmt, *args)


def warn(fmt: str, *args: object) -> None:
    _default().warn(fmt, *args)


def info(fmt: str, *args: object) -> None:
    _default().info(fmt, *args)


def title(fmt: str, *args: object) -> None:
    _default().title(fmt, *args)


def text(fmt: str, *args: object) -> None:
    _default().text(fmt, *args)


def err(err: str | BaseException | None) -> None:  # pylint: disable=redefined-outer-name
    _default().err(err)


def fsuccess(out: TextIO, fmt: str, *args: object) -> None:
    Printer(stdout=out).success(fmt, *args)


def ferror(out: TextIO, fmt: str, *args: object) -> None:
    Printer(stderr=out).error(fmt, *args)


def fwarn(out: TextIO, fmt: str, *args: object) -> None:
    Printer(stdout=out).warn(fmt, *args)


def finfo(out: TextIO, fmt: str, *args: object) -> None:
    Printer(stdout=out).info(fmt, *args)


def ftitle(out: TextIO, fmt: str, *args: object) -> None:
    Printer(stdout=out).title(fmt, *args)


def ftext(out: TextIO, fmt: str, *args: object) -> None:
    Printer(stdout=out).text(fmt, *args)


def ferr(out: TextIO, err: str | BaseException | None) -> None:  # pylint: disable=redefined-outer-name
    Printer(stderr=out).err(err)
