from ._config import Plc2JavaConfig
from .compiler import Compiler
from .exceptions import AstLoadError, ConfigError, GenerationError, MalformedTreeError

__all__ = [
    "AstLoadError",
    "Compiler",
    "ConfigError",
    "GenerationError",
    "MalformedTreeError",
    "Plc2JavaConfig",
]
