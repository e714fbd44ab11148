import re
from dataclasses import dataclass

_IDENT = r"[_a-zA-Z][_a-zA-Z0-9]*"
_FIELD_PATH_RE = re.compile(rf"{_IDENT}(?:\.{_IDENT})*")
_VARIABLE_NAME_RE = re.compile(_IDENT)


def _check_variable_name(variable_name: str) -> None:
    if not variable_name:
        raise ValueError("Variable name cannot be empty")
    if not _VARIABLE_NAME_RE.fullmatch(variable_name):
        raise ValueError(f'Variable name "{variable_name}" is not valid')


def _check_field_path(field_path: str) -> None:
    if not field_path:
        raise ValueError("Field accessor cannot be empty")
    if not _FIELD_PATH_RE.fullmatch(field_path):
        raise ValueError(f'Field accessor "{field_path}" is not valid')


@dataclass(frozen=True)
class FieldAccessor:
    """A value reference as written in directives, e.g. ``$item.name`` or ``$.name``.

    ``variable_name`` is empty for global fields; ``field_path`` is ``None``
    when the accessor names the variable itself.
    """

    variable_name: str
    field_path: str | None

    @classmethod
    def global_field(cls, field_path: str) -> "FieldAccessor":
        _check_field_path(field_path)
        return cls("", field_path)

    @classmethod
    def variable_field(cls, variable_name: str, field_path: str) -> "FieldAccessor":
        _check_variable_name(variable_name)
        _check_field_path(field_path)
        return cls(variable_name, field_path)

    @classmethod
    def identity(cls, variable_name: str) -> "FieldAccessor":
        _check_variable_name(variable_name)
        return cls(variable_name, None)

    def is_equivalent(self, accessor: str) -> bool:
        """Tell whether a ``$``-prefixed directive accessor denotes this accessor."""
        return accessor == str(self)

    def __str__(self) -> str:
        if self.field_path is None:
            return f"${self.variable_name}"
        return f"${self.variable_name}.{self.field_path}"
