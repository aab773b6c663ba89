"""
BRISC Assembler - Configuration
===============================

Assembler settings. Configuration can come from:
- Default values (defined here)
- Environment variables (AssemblerConfig.from_env)
- Command-line options (applied on top by the CLI)

The defaults describe the reference machine: 32 instruction words
(64 bytes of instruction memory) and advisory source/sink tables.
"""

from dataclasses import dataclass
import logging
import os

logger = logging.getLogger(__name__)

# Jump targets are stored in the 8-bit immediate field
MAX_ADDRESSABLE_INSTRUCTIONS = 256

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass
class AssemblerConfig:
    """
    Configuration for one assembly run.

    Attributes:
        max_instructions: Size of instruction memory in words. Programs
            longer than this fail, and jump targets must be below it.
        strict_io: If True, `in`/`out` ids must appear in the machine's
            source/sink tables. If False the tables are advisory and any
            id that fits the 4-bit field is accepted.
    """

    max_instructions: int = 32
    strict_io: bool = False

    def validate(self) -> None:
        """
        Check that the configuration describes a buildable machine.

        Raises:
            ValueError: If max_instructions is outside 1..256
        """
        if not 1 <= self.max_instructions <= MAX_ADDRESSABLE_INSTRUCTIONS:
            raise ValueError(
                f"max_instructions must be in 1..{MAX_ADDRESSABLE_INSTRUCTIONS}, "
                f"got {self.max_instructions}"
            )

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            BRISC_MAX_INSTRUCTIONS: Instruction memory size in words
            BRISC_STRICT_IO: Enforce source/sink tables (1/0, true/false)

        Unparseable values are ignored with a warning.
        """
        config = cls()

        if max_instructions := os.environ.get("BRISC_MAX_INSTRUCTIONS"):
            try:
                value = int(max_instructions)
            except ValueError:
                logger.warning("ignoring BRISC_MAX_INSTRUCTIONS=%r", max_instructions)
            else:
                if 1 <= value <= MAX_ADDRESSABLE_INSTRUCTIONS:
                    config.max_instructions = value
                else:
                    logger.warning("ignoring BRISC_MAX_INSTRUCTIONS=%r", max_instructions)

        if strict_io := os.environ.get("BRISC_STRICT_IO"):
            flag = strict_io.strip().lower()
            if flag in _TRUE_VALUES:
                config.strict_io = True
            elif flag in _FALSE_VALUES:
                config.strict_io = False
            else:
                logger.warning("ignoring BRISC_STRICT_IO=%r", strict_io)

        return config
