import os
import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Final

from .exceptions import ConfigError

NEWLINES: Final[dict[str, str]] = {
    "lf": "\n",
    "crlf": "\r\n",
    "platform": os.linesep,
}


class Plc2JavaConfig:
    source: Path = Path("./main.ast.json")
    output: Path | None = None

    newline: str = os.linesep
    verbose: bool = False

    @classmethod
    def version(cls) -> str:
        try:
            return version("plc2java")

        except PackageNotFoundError:
            return "0.0.0dev"

    @classmethod
    def default(cls) -> None:
        cls.source = Path("./main.ast.json")
        cls.output = None
        cls.newline = os.linesep
        cls.verbose = False

    @classmethod
    def output_path(cls) -> Path:
        if cls.output is not None:
            return cls.output

        return cls.source.with_name("Main.java")

    @classmethod
    def set_newline(cls, name: str) -> None:
        try:
            cls.newline = NEWLINES[name]

        except KeyError:
            raise ConfigError(
                f"Unknown newline style: {name!r} "
                f"(expected one of {', '.join(NEWLINES)})"
            ) from None

    @classmethod
    def load(cls, path: Path) -> None:
        if not path.exists():
            raise ConfigError(f"Config file is missing: {path}")

        try:
            dt = tomllib.loads(path.read_text("utf-8-sig"))

        except tomllib.TOMLDecodeError as err:
            raise ConfigError(f"Invalid TOML in {path}: {err}") from err

        dt_sys = dt.get("system")
        if dt_sys is None:
            raise ConfigError(f"Missing segment system in {path}")

        config_ver = dt_sys.get("version", None)
        if config_ver is None:
            raise ConfigError(f"Missing system.version in {path}")

        func = getattr(cls, f"_v{config_ver}", None)
        if func is None or not callable(func):
            raise ConfigError(f"Unknown config version in {path}: {config_ver}")

        func(dt, path.parent)

    @classmethod
    def _v1(cls, data: dict, base: Path) -> None:
        build_data = data.get("build", {})

        if "source" in build_data:
            cls.source = base / build_data["source"]

        if "output" in build_data:
            cls.output = base / build_data["output"]

        if "newline" in build_data:
            cls.set_newline(build_data["newline"])
