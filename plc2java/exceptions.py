class GenerationError(Exception):
    """Base error for everything plc2java raises on purpose."""


class MalformedTreeError(GenerationError):
    """Raised when a node reaches the emitter without data the analyzer guarantees."""

    def __init__(
        self,
        node: object,
        attribute: str | None = None,
        problem: str = "is missing",
    ):
        self.node_type = type(node).__name__
        self.attribute = attribute
        self.problem = problem
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.attribute is None:
            return f"Unsupported node type: {self.node_type}"

        return f"Malformed tree: {self.node_type}.{self.attribute} {self.problem}"


class AstLoadError(GenerationError):
    """Raised when an AST document cannot be turned into nodes."""

    def __init__(self, msg: str, path: str = "$"):
        self.msg = msg
        self.path = path
        super().__init__(f"{msg}\nPATH: {path}")


class ConfigError(GenerationError):
    """Raised for an invalid plc2java.toml."""


__all__ = [
    "AstLoadError",
    "ConfigError",
    "GenerationError",
    "MalformedTreeError",
]
