from __future__ import annotations

from pathlib import Path

from ._cli import log_step, logger
from ._config import Plc2JavaConfig
from ._lang import generate, load_source, load_source_file


class Compiler:
    @classmethod
    def build(cls) -> Path:
        src = Plc2JavaConfig.source
        out = Plc2JavaConfig.output_path()

        with log_step(f"Loading AST: {src}"):
            source = load_source_file(src)

        logger.debug(
            f"Fields : {len(source.fields)}\nMethods: {len(source.methods)}"
        )

        # Rendered in memory first; a fault leaves no output file.
        with log_step("Generating Java"):
            code = generate(source, newline=Plc2JavaConfig.newline)

        with log_step(f"Writing {out}"):
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(code, encoding="utf-8", newline="")

        return out

    @classmethod
    def compile_str(cls, text: str) -> str:
        return generate(load_source(text), newline=Plc2JavaConfig.newline)
