import argparse
import importlib.metadata
import os
import sys
from collections.abc import Iterable, Sequence
from typing import Any, Callable, Optional

from lispreader import logconfig
from lispreader import main as lispreader
from lispreader.lang import reader as reader
from lispreader.lang.exception import print_exception
from lispreader.lang.obj import lrepr

STDIN_FILE_NAME = "-"

BOOL_TRUE = frozenset({"true", "t", "1", "yes", "y"})
BOOL_FALSE = frozenset({"false", "f", "0", "no", "n"})


def _to_bool(v: Optional[str]) -> Optional[bool]:
    """Coerce a string argument to a boolean value, if possible."""
    if v is None:
        return v
    elif v.lower() in BOOL_TRUE:
        return True
    elif v.lower() in BOOL_FALSE:
        return False
    else:
        raise argparse.ArgumentTypeError("Unable to coerce flag value to boolean.")


def _set_envvar_action(
    var: str, parent: type[argparse.Action] = argparse.Action
) -> type[argparse.Action]:
    """Return an argparse.Action instance (deriving from `parent`) that sets the value
    as the default value of the environment variable `var`."""

    class EnvVarSetterAction(parent):  # type: ignore
        def __call__(  # pylint: disable=signature-differs
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Any,
            option_string: str,
        ):
            os.environ.setdefault(var, str(values))

    return EnvVarSetterAction


def _add_debug_arg_group(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("debug options")
    group.add_argument(
        "--enable-logger",
        action=_set_envvar_action(
            logconfig.DEV_LOGGER_ENV_VAR, parent=argparse._StoreAction
        ),
        nargs="?",
        const=True,
        type=_to_bool,
        help=(
            "if true, enable the lispreader root logger "
            "(env: LISPREADER_USE_DEV_LOGGER; default: false)"
        ),
    )
    group.add_argument(
        "-l",
        "--log-level",
        action=_set_envvar_action(
            logconfig.LEVEL_ENV_VAR, parent=argparse._StoreAction
        ),
        type=lambda s: s.upper(),
        default=logconfig.DEFAULT_LEVEL,
        help=(
            "the logging level for logs emitted by the reader "
            "(env: LISPREADER_LOGGING_LEVEL; default: WARNING)"
        ),
    )


Handler = Callable[[argparse.ArgumentParser, argparse.Namespace], None]


def _subcommand(
    subcommand: str,
    *,
    help: Optional[str] = None,  # pylint: disable=redefined-builtin
    description: Optional[str] = None,
    handler: Handler,
) -> Callable[
    [Callable[[argparse.ArgumentParser], None]],
    Callable[["argparse._SubParsersAction"], None],
]:
    def _wrap_add_subcommand(
        f: Callable[[argparse.ArgumentParser], None],
    ) -> Callable[["argparse._SubParsersAction"], None]:
        def _wrapped_subcommand(subparsers: "argparse._SubParsersAction"):
            parser = subparsers.add_parser(
                subcommand, help=help, description=description
            )
            parser.set_defaults(handler=handler)
            f(parser)

        return _wrapped_subcommand

    return _wrap_add_subcommand


def _read_forms(args: argparse.Namespace) -> Iterable[reader.ReaderForm]:
    """Yield every form from each file named in `args`, reading from stdin for
    `-`."""
    for filename in args.files or [STDIN_FILE_NAME]:
        if filename == STDIN_FILE_NAME:
            yield from reader.read(sys.stdin, suppress_read=args.suppress)
        else:
            yield from reader.read_file(filename, suppress_read=args.suppress)


def read(
    parser: argparse.ArgumentParser,  # pylint: disable=unused-argument
    args: argparse.Namespace,
) -> None:
    lispreader.init()
    try:
        for form in _read_forms(args):
            print(lrepr(form))
    except reader.SyntaxError as e:
        print_exception(e)
        sys.exit(1)


@_subcommand(
    "read",
    help="read forms and print them",
    description=(
        "Read every form in the named files (or stdin) and print the printed "
        "representation of each, one per line. Printed forms do not always read "
        "back as the same value: negative integers print as -N, which reads as a "
        "symbol, and characters print as 1-character strings."
    ),
    handler=read,
)
def _add_read_subcommand(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "files",
        nargs="*",
        help=f"files to read, or {STDIN_FILE_NAME} for stdin (default: stdin)",
    )
    parser.add_argument(
        "--suppress",
        action="store_true",
        help="consume every form without producing a value; prints null per form",
    )
    _add_debug_arg_group(parser)


def version(_, __) -> None:
    v = importlib.metadata.version("lispreader")
    print(f"lispreader {v}")


@_subcommand("version", help="print the version of lispreader", handler=version)
def _add_version_subcommand(_: argparse.ArgumentParser) -> None:
    pass


def invoke_cli(args: Optional[Sequence[str]] = None) -> None:
    """Entrypoint to run the lispreader CLI."""
    parser = argparse.ArgumentParser(
        description="lispreader reads Lisp forms into Python data."
    )

    subparsers = parser.add_subparsers(help="sub-commands")
    _add_read_subcommand(subparsers)
    _add_version_subcommand(subparsers)

    parsed_args = parser.parse_args(args=args)
    if hasattr(parsed_args, "handler"):
        parsed_args.handler(parser, parsed_args)
    else:
        parser.print_help()


if __name__ == "__main__":
    invoke_cli()
