"""
Cm Assembler - Configuration
============================

Lexer configuration. Configuration can come from:
- Default values (defined here)
- Environment variables (LexerConfig.from_env)
- Command-line options (cmlex overrides individual fields)

Environment variables (all optional):
    CMASM_DIRECTIVES: Comma-separated directive names (default: ".cstring")
    CMASM_ENCODING: ASCII-compatible byte encoding (default: "latin-1")
    CMASM_LOG_LEVEL: Logging level name (default: "WARNING")
    CMASM_MAX_DIAGNOSTICS: Maximum diagnostics kept by the reporter
"""

from dataclasses import dataclass, field
from typing import Optional
import logging
import os


# Directive names recognized by the lexer out of the box
DEFAULT_DIRECTIVES = frozenset({".cstring"})

_ASCII = "".join(chr(i) for i in range(128))


def is_ascii_compatible(encoding: str) -> bool:
    """
    Check whether an encoding can be fed to the lexer.

    The lexer compares raw bytes against ASCII values, so bytes 0-127 must
    decode to themselves and a space must encode to the single byte 32.
    Single-byte code pages and UTF-8 pass; UTF-16 and EBCDIC do not.

    Args:
        encoding: Codec name

    Returns:
        True if the codec exists and is ASCII-compatible
    """
    try:
        return (
            " ".encode(encoding) == b" "
            and bytes(range(128)).decode(encoding) == _ASCII
        )
    except (LookupError, UnicodeError):
        return False


@dataclass
class LexerConfig:
    """
    Configuration for a lexer run.

    Attributes:
        directives: Lexemes classified as DIRECTIVE tokens
        encoding: Encoding used to map source bytes to lexeme characters.
            Must be ASCII-compatible (see is_ascii_compatible); latin-1
            maps every byte to itself.
        log_level: Logging level name applied by the CLI
        max_diagnostics: Maximum diagnostics stored by the reporter
            (None for unlimited)
    """

    directives: frozenset[str] = field(default_factory=lambda: DEFAULT_DIRECTIVES)
    encoding: str = "latin-1"
    log_level: str = "WARNING"
    max_diagnostics: Optional[int] = None

    def __post_init__(self):
        if not is_ascii_compatible(self.encoding):
            raise ValueError(f"encoding '{self.encoding}' is not ASCII-compatible")

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls) -> "LexerConfig":
        """
        Create LexerConfig from environment variables.

        Invalid values are ignored and the default is kept.

        Returns:
            LexerConfig with values from environment variables
        """
        config = cls()

        if directives := os.environ.get("CMASM_DIRECTIVES"):
            names = {name.strip() for name in directives.split(",") if name.strip()}
            if names:
                config.directives = frozenset(names)

        if encoding := os.environ.get("CMASM_ENCODING"):
            if is_ascii_compatible(encoding):
                config.encoding = encoding

        if log_level := os.environ.get("CMASM_LOG_LEVEL"):
            if isinstance(logging.getLevelName(log_level.upper()), int):
                config.log_level = log_level.upper()

        if max_diagnostics := os.environ.get("CMASM_MAX_DIAGNOSTICS"):
            try:
                value = int(max_diagnostics)
                if value > 0:
                    config.max_diagnostics = value
            except ValueError:
                pass

        return config

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    def with_directives(self, *names: str) -> "LexerConfig":
        """Return a copy with additional directive names."""
        return LexerConfig(
            directives=self.directives | frozenset(names),
            encoding=self.encoding,
            log_level=self.log_level,
            max_diagnostics=self.max_diagnostics,
        )

    def is_directive(self, lexeme: str) -> bool:
        """Check whether a lexeme names a directive."""
        return lexeme in self.directives


# Global default config instance
_default_config: Optional[LexerConfig] = None


def get_default_config() -> LexerConfig:
    """
    Get the default configuration.

    Creates it from environment variables on first access.

    Returns:
        The process-wide default LexerConfig
    """
    global _default_config
    if _default_config is None:
        _default_config = LexerConfig.from_env()
    return _default_config


def set_default_config(config: Optional[LexerConfig]) -> None:
    """
    Replace the default configuration.

    Passing None makes the next get_default_config() re-read the
    environment.
    """
    global _default_config
    _default_config = config
