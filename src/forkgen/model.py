"""Declaration-level model of a source module.

A module is an ordered tuple of top-level declarations plus whatever text
follows the last one. Every declaration owns the trivia (comments, attributes,
blank lines) that precedes it, so concatenating ``text`` of all declarations
and the trailer gives back the original source exactly.
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class FunctionDecl:
    code: str
    name: str
    generics: str | None = None
    """Generic parameter list including the angle brackets, if any."""
    signature: str = ""
    body: str = ""
    trivia: str = ""

    @property
    def text(self) -> str:
        return self.trivia + self.code


@dataclass(frozen=True)
class ImportDecl:
    code: str
    path: str
    """Whitespace-normalised use path, e.g. ``crate::phase0``."""
    alias: str | None = None
    visibility: str = ""
    trivia: str = ""

    @property
    def text(self) -> str:
        return self.trivia + self.code


@dataclass(frozen=True)
class Opaque:
    code: str
    kind: str
    trivia: str = ""

    @property
    def text(self) -> str:
        return self.trivia + self.code


Declaration = Union[FunctionDecl, ImportDecl, Opaque]


@dataclass(frozen=True)
class Module:
    declarations: tuple[Declaration, ...] = field(default_factory=tuple)
    trailer: str = ""

    def functions(self) -> list[FunctionDecl]:
        return [decl for decl in self.declarations if isinstance(decl, FunctionDecl)]

    def imports(self) -> list[ImportDecl]:
        return [decl for decl in self.declarations if isinstance(decl, ImportDecl)]

    def leading_import_count(self) -> int:
        """Length of the contiguous run of imports the module starts with."""
        count = 0
        for decl in self.declarations:
            if not isinstance(decl, ImportDecl):
                break
            count += 1
        return count
