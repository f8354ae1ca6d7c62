class GenSpecError(Exception):
    """Base class for every condition that aborts a generation run."""


class ParseFailure(GenSpecError):
    """Raised when base or override text cannot be parsed."""

    def __init__(self, label: str, line: int | None = None, column: int | None = None):
        self.label = label
        self.line = line
        self.column = column
        where = f" at line {line}, column {column}" if line is not None else ""
        super().__init__(f"failed to parse {label}{where}")


class SourceReadError(GenSpecError):
    """Raised when a base or override file exists but cannot be read."""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"cannot read '{path}': {reason}")


class SentinelCardinalityError(GenSpecError):
    """Raised when the sentinel import is missing or duplicated in the base module."""

    def __init__(self, sentinel: str, count: int):
        self.sentinel = sentinel
        self.count = count
        if count == 0:
            message = f"sentinel import '{sentinel}' not found, please fix source"
        else:
            message = f"sentinel import '{sentinel}' found {count} times, expected exactly one, please fix source"
        super().__init__(message)


class NoLeadingImports(GenSpecError):
    """Raised when the base module does not start with an import declaration."""

    def __init__(self, source_module: str):
        self.source_module = source_module
        super().__init__(
            f"base module '{source_module}' has no leading import declarations, "
            "cannot compute the insertion point for override imports"
        )
