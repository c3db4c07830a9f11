import argparse
from pathlib import Path

from ._cli import CompilerExit, logger, setup_logging
from ._config import NEWLINES, Plc2JavaConfig
from .compiler import Compiler
from .exceptions import AstLoadError, ConfigError, MalformedTreeError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plc2java",
        description="Analyzed PLC AST -> Java source generator",
    )

    sub = parser.add_subparsers(dest="cmd", required=True)

    # region Build cmd
    b = sub.add_parser("build", help="Generates Main.java from an AST document")

    b.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging",
    )

    b.add_argument(
        "src",
        type=Path,
        nargs="?",
        default=None,
        help="AST document in JSON form (default: ./main.ast.json)",
    )

    b.add_argument(
        "-o",
        "--out",
        type=Path,
        default=None,
        help="Output .java file (default: Main.java next to the source)",
    )

    b.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to plc2java.toml",
    )

    b.add_argument(
        "--newline",
        choices=sorted(NEWLINES),
        default=None,
        help="Line terminator of the generated code (default: platform)",
    )
    # endregion

    # region Version cmd
    sub.add_parser("version", help="Shows the plc2java version")
    # endregion

    return parser


def _configure(args: argparse.Namespace) -> None:
    Plc2JavaConfig.default()
    Plc2JavaConfig.verbose = args.verbose

    if args.config is not None:
        Plc2JavaConfig.load(args.config)

    if args.src is not None:
        Plc2JavaConfig.source = args.src

    if args.out is not None:
        Plc2JavaConfig.output = args.out

    if args.newline is not None:
        Plc2JavaConfig.set_newline(args.newline)


def _build(args: argparse.Namespace) -> None:
    try:
        _configure(args)
        logger.debug(
            (
                "plc2java\n"
                f"Version : {Plc2JavaConfig.version()}\n"
                f"Source  : {Plc2JavaConfig.source}\n"
                f"Output  : {Plc2JavaConfig.output_path()}\n"
                f"Newline : {Plc2JavaConfig.newline!r}"
            )
        )
        out = Compiler.build()

    except ConfigError as err:
        CompilerExit.user_error(str(err), args.config)

    except AstLoadError as err:
        CompilerExit.user_error(str(err), Plc2JavaConfig.source)

    except FileNotFoundError as err:
        CompilerExit.user_error(f"File not found: {err.filename}", show_path=False)

    except MalformedTreeError as err:
        CompilerExit.internal_error(str(err))

    except OSError as err:
        CompilerExit.system_error(str(err))

    CompilerExit.success(f"Build finished: {out}")


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()
    setup_logging(getattr(args, "verbose", False))

    match args.cmd:
        case "build":
            _build(args)

        case "version":
            print(Plc2JavaConfig.version())
            CompilerExit.success()

        case _:
            CompilerExit.user_error(
                "Unknown command",
                show_path=False,
            )


if __name__ == "__main__":
    main()
