# pylint: disable=too-many-return-statements

import collections
import contextlib
import functools
import io
import logging
import os
import re
from collections.abc import Iterable
from fractions import Fraction
from re import Match, Pattern
from types import TracebackType
from typing import Any, Callable, NoReturn, Optional, TypeVar, Union, cast

import attr
from pyrsistent import pmap

from lispreader import logconfig
from lispreader.lang import interop
from lispreader.lang import list as llist
from lispreader.lang import runtime
from lispreader.lang import symbol as sym
from lispreader.lang.exception import format_exception
from lispreader.lang.typing import LispNumber, ReaderForm
from lispreader.util import Maybe

logger = logging.getLogger(__name__)

whitespace_chars = re.compile(r"\s")
null_literal = re.compile("null")
symbol_name = re.compile(r":?[^0-9:.][^:.]*")
var_name = re.compile(r"([^0-9:.][^:.]*):([^0-9:.][^:.]*)")
integer_literal = re.compile(r"([-+]?[0-9]+)\.?")
float_literal = re.compile(r"[-+]?[0-9]+(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?")
ratio_literal = re.compile(r"([-+]?[0-9]+)/([0-9]+)")
accessor_name = re.compile(r"\.([a-zA-Z_]\w*)", re.ASCII)
class_name = re.compile(r"([a-zA-Z_][\w.]*)\.", re.ASCII)
instance_member_name = re.compile(r"\.([a-zA-Z_][\w.]*)\.([a-zA-Z_]\w*)", re.ASCII)
static_member_name = re.compile(r"([a-zA-Z_][\w.]*)\.([a-zA-Z_]\w*)", re.ASCII)

SymbolInterner = Callable[[str], sym.Symbol]
VarInterner = Callable[[str, str], runtime.Var]
HostResolver = Callable[[str], Any]

READER_LINE_KEY = "line"
READER_COL_KEY = "col"
READER_END_LINE_KEY = "end-line"
READER_END_COL_KEY = "end-col"


class Comment:
    pass


COMMENT = Comment()

LispReaderForm = Union[ReaderForm, Comment]
LispReaderFn = Callable[["ReaderContext", str], LispReaderForm]
W = TypeVar("W", bound=LispReaderFn)


# pylint:disable=redefined-builtin
@attr.define(repr=False, str=False)
class SyntaxError(Exception):
    message: str
    line: Optional[int] = None
    col: Optional[int] = None
    filename: Optional[str] = None
    token: Optional[str] = None

    def __repr__(self):
        return (
            f"lispreader.lang.reader.{type(self).__name__}({self.message}, "
            f"{self.line}, {self.col}, filename={self.filename})"
        )

    def __str__(self):
        keys: dict[str, Union[str, int]] = {}
        if self.filename is not None:
            keys["file"] = self.filename
        if self.line is not None and self.col is not None:
            keys["line"] = self.line
            keys["col"] = self.col
        if not keys:
            return self.message
        else:
            details = ", ".join(f"{key}: {val}" for key, val in keys.items())
            return f"{self.message} ({details})"


class UnexpectedEOFError(SyntaxError):
    """Syntax Error type raised when the reader encounters an unexpected EOF
    reading a form.

    Useful for cases such as an interactive reader, where unexpected EOF errors
    likely indicate the user is trying to enter a multiline form."""


class UnsupportedEscapeError(SyntaxError):
    """Raised for a backslash escape in a string literal which the reader does
    not support."""


class UnsupportedCharacterNameError(SyntaxError):
    """Raised for a multi-character character literal which is not one of the
    named characters."""


class UnmatchedDelimiterError(SyntaxError):
    """Raised when a closing delimiter appears without a matching opening
    delimiter."""


class InvalidSyntaxError(SyntaxError):
    """Raised when a token is not recognized as any literal form."""


@format_exception.register(SyntaxError)
def format_syntax_error(  # pylint: disable=unused-argument
    e: SyntaxError,
    tp: Optional[type[Exception]] = None,
    tb: Optional[TracebackType] = None,
) -> list[str]:
    context_exc: Optional[BaseException] = e.__cause__

    lines = [os.linesep]
    if context_exc is not None:
        lines.append(f"  exception: {type(context_exc)} from {type(e)}{os.linesep}")
    else:
        lines.append(f"  exception: {type(e)}{os.linesep}")
    if context_exc is None:
        lines.append(f"    message: {e.message}{os.linesep}")
    else:
        lines.append(f"    message: {e.message}: {context_exc}{os.linesep}")

    if e.line is not None and e.col is not None:
        line_num = f"{e.line}:{e.col}"
    elif e.line is not None:
        line_num = str(e.line)
    else:
        line_num = ""

    if e.filename is not None:
        lines.append(
            f"   location: {e.filename}:{line_num or 'NO_SOURCE_LINE'}{os.linesep}"
        )
    elif line_num:
        lines.append(f"       line: {line_num}{os.linesep}")

    if e.token is not None:
        lines.append(f"      token: {e.token!r}{os.linesep}")

    return lines


class StreamReader:
    """A stream reader with a single character of pushback.

    `read` returns the empty string once the stream is exhausted. The empty string
    may be pushed back like any other character."""

    __slots__ = ("_stream", "_pending", "_locs")

    def __init__(
        self,
        stream: io.TextIOBase,
        init_line: Optional[int] = None,
        init_column: Optional[int] = None,
    ) -> None:
        """`init_line` and `init_column` refer to where the `stream`
        starts in the broader context, defaulting to 1 and 0
        respectively if not provided."""
        init_line = init_line if init_line is not None else 1
        init_column = init_column if init_column is not None else 0
        self._stream = stream
        self._pending: Optional[str] = None
        # (line, col, char) of the last character read and the one before it
        self._locs: collections.deque[tuple[int, int, str]] = collections.deque(
            [(init_line, init_column, "")], 2
        )

    @property
    def name(self) -> Optional[str]:
        return getattr(self._stream, "name", None)

    @property
    def col(self) -> int:
        """Return the column of the character most recently returned by `read`."""
        return self._locs[-1][1]

    @property
    def line(self) -> int:
        """Return the line of the character most recently returned by `read`."""
        return self._locs[-1][0]

    @property
    def loc(self) -> tuple[int, int]:
        """Return the location of the character most recently returned by `read` as
        a tuple of (line, col)."""
        return self.line, self.col

    def _advance_loc(self, char: str) -> None:
        line, col, prev = self._locs[-1]
        if prev == "\n" or (prev == "\r" and char != "\n"):
            self._locs.append((line + 1, 1, char))
        else:
            self._locs.append((line, col + 1, char))

    def read(self) -> str:
        """Return the next character in the stream, or the empty string at the
        end of the stream."""
        if self._pending is not None:
            char, self._pending = self._pending, None
        else:
            char = self._stream.read(1)
        self._advance_loc(char)
        return char

    def unread(self, char: str) -> None:
        """Push `char` back onto the stream, so it is returned by the next `read`.

        Only one character may be pending at a time."""
        if self._pending is not None or len(self._locs) < 2:
            raise IndexError("Exceeded pushback depth")
        self._pending = char
        self._locs.pop()


class ReaderContext:
    __slots__ = (
        "_reader",
        "_intern_symbol",
        "_intern_var",
        "_resolve_host_name",
        "_suppress_read",
    )

    def __init__(
        self,
        reader: StreamReader,
        symbol_interner: Optional[SymbolInterner] = None,
        var_interner: Optional[VarInterner] = None,
        host_resolver: Optional[HostResolver] = None,
    ) -> None:
        self._reader = reader
        self._intern_symbol = Maybe(symbol_interner).or_else_get(sym.symbol)
        self._intern_var = Maybe(var_interner).or_else_get(runtime.intern_var)
        self._resolve_host_name = Maybe(host_resolver).or_else_get(
            runtime.resolve_host_name
        )
        self._suppress_read: collections.deque[bool] = collections.deque([])

    @property
    def reader(self) -> StreamReader:
        return self._reader

    def intern_symbol(self, name: str) -> sym.Symbol:
        return self._intern_symbol(name)

    def intern_var(self, ns: str, name: str) -> runtime.Var:
        return self._intern_var(ns, name)

    def resolve_host_name(self, name: str) -> Any:
        """Resolve the dotted host name `name`, raising a SyntaxError if the
        resolver cannot."""
        try:
            return self._resolve_host_name(name)
        except runtime.HostNameResolutionError as e:
            raise self.syntax_error(
                f"Unable to resolve host name: {name}", token=name
            ) from e

    @contextlib.contextmanager
    def suppressed(self, v: bool = True):
        """Within this context, fully consume each form but produce None in place
        of the value read."""
        self._suppress_read.append(v)
        try:
            yield
        finally:
            self._suppress_read.pop()

    @property
    def should_suppress_read(self) -> bool:
        try:
            return self._suppress_read[-1] is True
        except IndexError:
            return False

    def syntax_error(
        self,
        msg: str,
        error_type: type[SyntaxError] = SyntaxError,
        token: Optional[str] = None,
    ) -> SyntaxError:
        """Return a SyntaxError (or the subclass `error_type`) with the given message,
        hydrated with filename, line, and column metadata from the reader if it
        exists."""
        return error_type(
            msg,
            line=self.reader.line,
            col=self.reader.col,
            filename=self.reader.name,
            token=token,
        )

    def eof_error(self, msg: str) -> UnexpectedEOFError:
        """Return an UnexpectedEOFError with the given message, hydrated with filename,
        line, and column metadata from the reader if it exists."""
        return cast(UnexpectedEOFError, self.syntax_error(msg, UnexpectedEOFError))


EOF = object()


def _with_loc(f: W) -> W:
    """Wrap a reader function in a decorator to supply line and column
    information along with relevant forms."""

    @functools.wraps(f)
    def with_lineno_and_col(ctx: ReaderContext, char: str):
        line, col = ctx.reader.line, ctx.reader.col
        v = f(ctx, char)
        end_line, end_col = ctx.reader.line, ctx.reader.col
        if isinstance(v, llist.PersistentList):
            return v.with_meta(
                pmap(
                    {
                        READER_LINE_KEY: line,
                        READER_COL_KEY: col,
                        READER_END_LINE_KEY: end_line,
                        READER_END_COL_KEY: end_col,
                    }
                )
            )
        else:
            return v

    return cast(W, with_lineno_and_col)


def _read_token(ctx: ReaderContext, initch: str) -> str:
    """Read a raw token beginning with `initch` from the input stream.

    Tokens end at whitespace, a macro character, or the end of the stream. The
    terminating character is pushed back onto the stream."""
    reader = ctx.reader
    s: list[str] = [initch]
    while True:
        char = reader.read()
        if char == "" or whitespace_chars.match(char) or char in MACROS:
            reader.unread(char)
            return "".join(s)
        s.append(char)


def _symbol_from_match(ctx: ReaderContext, match: Match) -> sym.Symbol:
    return ctx.intern_symbol(match.group(0))


def _var_from_match(ctx: ReaderContext, match: Match) -> runtime.Var:
    ns, name = match.groups()
    return ctx.intern_var(ns, name)


def _int_from_match(_: ReaderContext, match: Match) -> int:
    return int(match.group(1))


def _float_from_match(_: ReaderContext, match: Match) -> float:
    return float(match.group(0))


def _ratio_from_match(ctx: ReaderContext, match: Match) -> LispNumber:
    numerator, denominator = match.groups()
    try:
        v = Fraction(int(numerator), int(denominator))
    except ZeroDivisionError as e:
        raise ctx.syntax_error(
            f"Invalid ratio format: {match.group(0)}",
            InvalidSyntaxError,
            token=match.group(0),
        ) from e
    if v.denominator == 1:
        return v.numerator
    return v


def _accessor_from_match(_: ReaderContext, match: Match) -> interop.Accessor:
    return interop.Accessor(match.group(1))


def _class_name_from_match(ctx: ReaderContext, match: Match) -> interop.ClassName:
    name = match.group(1)
    return interop.ClassName(ctx.resolve_host_name(name), name=name)


def _instance_member_from_match(
    ctx: ReaderContext, match: Match
) -> interop.InstanceMemberName:
    name, member = match.groups()
    return interop.InstanceMemberName(ctx.resolve_host_name(name), member, name=name)


def _static_member_from_match(
    ctx: ReaderContext, match: Match
) -> interop.StaticMemberName:
    name, member = match.groups()
    return interop.StaticMemberName(ctx.resolve_host_name(name), member, name=name)


# The order of this sequence settles which form a token is read as when it could
# be read as more than one; each pattern must match the entire token.
_TOKEN_CLASSIFIERS: tuple[
    tuple[Pattern, Callable[[ReaderContext, Match], ReaderForm]], ...
] = (
    (null_literal, lambda _, __: None),
    (symbol_name, _symbol_from_match),
    (var_name, _var_from_match),
    (integer_literal, _int_from_match),
    (float_literal, _float_from_match),
    (ratio_literal, _ratio_from_match),
    (accessor_name, _accessor_from_match),
    (class_name, _class_name_from_match),
    (instance_member_name, _instance_member_from_match),
    (static_member_name, _static_member_from_match),
)


def _interpret_token(ctx: ReaderContext, token: str) -> ReaderForm:
    """Return the value named by a raw token."""
    for pattern, from_match in _TOKEN_CLASSIFIERS:
        if (match := pattern.fullmatch(token)) is not None:
            if logger.isEnabledFor(logconfig.TRACE):
                logger.log(
                    logconfig.TRACE, f"Token '{token}' matched {pattern.pattern}"
                )
            return from_match(ctx, match)
    raise ctx.syntax_error(f"Invalid syntax: {token}", InvalidSyntaxError, token=token)


_STR_ESCAPE_CHARS = {
    '"': '"',
    "\\": "\\",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


def _read_str(ctx: ReaderContext, _: str) -> str:
    """Return a string from the input stream. The opening quote has already been
    consumed."""
    s: list[str] = []
    reader = ctx.reader
    while True:
        char = reader.read()
        if char == "":
            raise ctx.eof_error("EOF while reading string")
        if char == '"':
            return "".join(s)
        if char == "\\":
            char = reader.read()
            if char == "":
                raise ctx.eof_error("EOF while reading string")
            escape_char = _STR_ESCAPE_CHARS.get(char)
            if escape_char is None:
                raise ctx.syntax_error(
                    f"Unsupported escape character: \\{char}",
                    UnsupportedEscapeError,
                    token=f"\\{char}",
                )
            s.append(escape_char)
            continue
        s.append(char)


_SPECIAL_CHARS = {
    "newline": "\n",
    "space": " ",
    "tab": "\t",
}


def _read_character(ctx: ReaderContext, _: str) -> str:
    """Read a character literal from the input stream.

    Character literals may appear as:
      - \\a \\$ \\( etc will yield 'a', '$', and '(' respectively

      - \\newline, \\space, \\tab yield the named characters"""
    char = ctx.reader.read()
    if char == "":
        raise ctx.eof_error("EOF while reading character")

    token = _read_token(ctx, char)
    if len(token) == 1:
        return token

    special = _SPECIAL_CHARS.get(token)
    if special is not None:
        return special

    raise ctx.syntax_error(
        f"Unsupported character: \\{token}",
        UnsupportedCharacterNameError,
        token=token,
    )


def _read_comment(ctx: ReaderContext, _: str) -> Comment:
    """Read (and ignore) a single-line comment from the input stream, through the
    end of the line."""
    reader = ctx.reader
    while True:
        char = reader.read()
        if char in ("", "\n", "\r"):
            return COMMENT


def read_delimited_list(
    ctx: ReaderContext, end_char: str, is_recursive: bool = True
) -> list[ReaderForm]:
    """Read forms from the input stream until `end_char`, returning them in
    order. The opening delimiter has already been consumed."""
    coll: list[ReaderForm] = []
    reader = ctx.reader
    while True:
        char = reader.read()
        while whitespace_chars.match(char):
            char = reader.read()

        if char == "":
            raise ctx.eof_error("EOF while reading")

        if char == end_char:
            return coll

        macro_fn = MACROS.get(char)
        if macro_fn is not None:
            elem = macro_fn(ctx, char)
        else:
            reader.unread(char)
            elem = read_next(ctx, is_eof_error=True, is_recursive=is_recursive)

        if isinstance(elem, Comment):
            continue
        coll.append(elem)


@_with_loc
def _read_list(ctx: ReaderContext, _: str) -> llist.PersistentList:
    """Read a list element from the input stream."""
    return llist.list(read_delimited_list(ctx, ")", is_recursive=True))


def _read_unmatched_delimiter(ctx: ReaderContext, char: str) -> NoReturn:
    raise ctx.syntax_error(
        f"Unmatched delimiter: {char}", UnmatchedDelimiterError, token=char
    )


MACROS = pmap(
    {
        '"': _read_str,
        ";": _read_comment,
        "(": _read_list,
        ")": _read_unmatched_delimiter,
        "\\": _read_character,
    }
)


def read_next(  # pylint: disable=unused-argument
    ctx: ReaderContext,
    is_eof_error: bool = False,
    eof: Any = EOF,
    is_recursive: bool = False,
) -> ReaderForm:
    """Read the next full form from the input stream.

    If the stream is exhausted before a form begins, raise an UnexpectedEOFError if
    `is_eof_error` is True, otherwise return `eof`.

    While reading is suppressed on `ctx`, the form is consumed completely but None
    is returned in its place."""
    reader = ctx.reader
    while True:
        char = reader.read()
        while whitespace_chars.match(char):
            char = reader.read()

        if char == "":
            if is_eof_error:
                raise ctx.eof_error("EOF while reading")
            return eof

        macro_fn = MACROS.get(char)
        if macro_fn is not None:
            v = macro_fn(ctx, char)
            if isinstance(v, Comment):
                continue
            if ctx.should_suppress_read:
                return None
            return v

        token = _read_token(ctx, char)
        if ctx.should_suppress_read:
            return None
        return _interpret_token(ctx, token)


def read(  # pylint: disable=too-many-arguments
    stream,
    symbol_interner: Optional[SymbolInterner] = None,
    var_interner: Optional[VarInterner] = None,
    host_resolver: Optional[HostResolver] = None,
    is_eof_error: bool = False,
    suppress_read: bool = False,
    init_line: Optional[int] = None,
    init_column: Optional[int] = None,
) -> Iterable[ReaderForm]:
    """Read the contents of a stream as a sequence of Lisp forms.

    The optional `init_line` and `init_column` specify where the
    `stream` location metadata starts in the broader context, if not
    from the start.

    Callers may optionally specify functions used to intern symbols, intern
    namespaced Vars and resolve dotted host names. By default, symbols are
    interned by `lispreader.lang.symbol.symbol`, Vars by
    `lispreader.lang.runtime.intern_var` and host names are resolved against
    importable Python modules by `lispreader.lang.runtime.resolve_host_name`.

    If `suppress_read` is True, every form is fully consumed but None is yielded
    in its place.

    If `is_eof_error` is True, reaching the end of the stream raises an
    UnexpectedEOFError once every form has been yielded.

    The caller is responsible for closing the input stream."""
    reader = StreamReader(stream, init_line=init_line, init_column=init_column)
    ctx = ReaderContext(
        reader,
        symbol_interner=symbol_interner,
        var_interner=var_interner,
        host_resolver=host_resolver,
    )
    logger.debug(f"Reading forms from {reader.name or '<stream>'}")
    with ctx.suppressed(suppress_read):
        while True:
            expr = read_next(ctx, is_eof_error=is_eof_error, eof=EOF)
            if expr is EOF:
                return
            yield expr


def read_str(  # pylint: disable=too-many-arguments
    s: str,
    symbol_interner: Optional[SymbolInterner] = None,
    var_interner: Optional[VarInterner] = None,
    host_resolver: Optional[HostResolver] = None,
    is_eof_error: bool = False,
    suppress_read: bool = False,
    init_line: Optional[int] = None,
    init_column: Optional[int] = None,
) -> Iterable[ReaderForm]:
    """Read the contents of a string as a sequence of Lisp forms.

    Keyword arguments to this function have the same meanings as those of
    lispreader.lang.reader.read."""
    with io.StringIO(s) as buf:
        yield from read(
            buf,
            symbol_interner=symbol_interner,
            var_interner=var_interner,
            host_resolver=host_resolver,
            is_eof_error=is_eof_error,
            suppress_read=suppress_read,
            init_line=init_line,
            init_column=init_column,
        )


def read_file(  # pylint: disable=too-many-arguments
    filename: str,
    symbol_interner: Optional[SymbolInterner] = None,
    var_interner: Optional[VarInterner] = None,
    host_resolver: Optional[HostResolver] = None,
    is_eof_error: bool = False,
    suppress_read: bool = False,
) -> Iterable[ReaderForm]:
    """Read the contents of a file as a sequence of Lisp forms.

    Keyword arguments to this function have the same meanings as those of
    lispreader.lang.reader.read."""
    with open(filename, encoding="utf-8") as f:
        yield from read(
            f,
            symbol_interner=symbol_interner,
            var_interner=var_interner,
            host_resolver=host_resolver,
            is_eof_error=is_eof_error,
            suppress_read=suppress_read,
        )
