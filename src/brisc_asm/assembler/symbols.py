"""
BRISC Symbol Table
==================

Maps label names to instruction addresses. A SymbolTable belongs to a
single assembly run; the parser fills it while scanning the source and
the code generator reads it once the scan is complete.
"""

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Iterator, Optional

from brisc_asm.errors import (
    DuplicateLabelError,
    SourceLocation,
    UnresolvedLabelError,
)


@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Label name as declared
        address: Word index of the instruction the label binds to
        location: Where the label was declared
    """
    name: str
    address: int
    location: SourceLocation


class SymbolTable:
    """
    Label name to address mapping.

    Names are unique: declaring a name twice raises DuplicateLabelError
    carrying the location of the first declaration.
    """

    def __init__(self) -> None:
        self._symbols: dict[str, Symbol] = {}

    def define(
        self,
        name: str,
        address: int,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> Symbol:
        """
        Declare a label at an address.

        Raises:
            DuplicateLabelError: If the name is already declared
        """
        if name in self._symbols:
            raise DuplicateLabelError(
                name,
                location=location,
                original_location=self._symbols[name].location,
                source_line=source_line,
            )
        symbol = Symbol(name, address, location)
        self._symbols[name] = symbol
        return symbol

    def resolve(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> int:
        """
        Return the address of a declared label.

        Raises:
            UnresolvedLabelError: If the label was never declared, with
                similarly named labels as a hint
        """
        symbol = self._symbols.get(name)
        if symbol is None:
            raise UnresolvedLabelError(
                name,
                location=location,
                source_line=source_line,
                similar_labels=self.similar(name),
            )
        return symbol.address

    def similar(self, name: str) -> list[str]:
        """Return declared names close to `name`, best match first."""
        return get_close_matches(name, self._symbols.keys(), n=3, cutoff=0.6)

    def get(self, name: str) -> Optional[Symbol]:
        return self._symbols.get(name)

    def as_dict(self) -> dict[str, int]:
        """Return a dictionary of label names to addresses."""
        return {name: sym.address for name, sym in self._symbols.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())
