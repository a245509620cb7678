"""Common memory specification fields and typed parsing of JSON values."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple

__all__ = [
    "MemSpec",
    "parse_bool",
    "parse_bool_with_default",
    "parse_string",
    "parse_string_with_default",
    "parse_udouble",
    "parse_udouble_with_default",
    "parse_uint",
    "parse_uint_with_default",
]


def _is_empty(obj: Any) -> bool:
    """True for a missing value, null, or an empty object or array."""
    if obj is None:
        return True
    if isinstance(obj, (Mapping, list, tuple)):
        return len(obj) == 0
    return False


def _is_number(obj: Any) -> bool:
    return isinstance(obj, (int, float)) and not isinstance(obj, bool)


def _not_found(name: str) -> ValueError:
    return ValueError(f"Query json: parameter '{name}' not found")


def _wrong_type(name: str, expected: str) -> ValueError:
    return ValueError(f"Expected type for '{name}': {expected}")


def _lookup(document: Any, *keys: str) -> Any:
    """Follow ``keys`` through nested objects; a missing key yields ``None``."""
    node = document
    for key in keys:
        if node is None:
            return None
        if not isinstance(node, Mapping):
            raise ValueError(f"Cannot look up '{key}' in a non-object value")
        node = node.get(key)
    return node


def _contains(node: Any, key: str) -> bool:
    return isinstance(node, Mapping) and key in node


def parse_bool(obj: Any, name: str) -> bool:
    """Return a required boolean value."""
    if _is_empty(obj):
        raise _not_found(name)
    if isinstance(obj, bool):
        return obj
    raise _wrong_type(name, "bool")


def parse_bool_with_default(obj: Any, name: str) -> bool:
    """Return a boolean value, or ``False`` when it is missing."""
    if _is_empty(obj):
        return False
    if isinstance(obj, bool):
        return obj
    raise _wrong_type(name, "bool")


def parse_uint(obj: Any, name: str) -> int:
    """Return a required non-negative integer."""
    if _is_empty(obj):
        raise _not_found(name)
    if isinstance(obj, int) and not isinstance(obj, bool) and obj >= 0:
        return obj
    raise _wrong_type(name, "unsigned int")


def parse_uint_with_default(obj: Any, name: str, default: int = 0) -> int:
    """Return a positive number as an integer, or ``default`` when missing."""
    if _is_empty(obj):
        return default
    if _is_number(obj) and obj > 0:
        return int(obj)
    raise _wrong_type(name, "unsigned int")


def parse_udouble(obj: Any, name: str) -> float:
    """Return a required strictly positive number."""
    if _is_empty(obj):
        raise _not_found(name)
    if _is_number(obj) and obj > 0:
        return float(obj)
    raise _wrong_type(name, "positive double")


def parse_udouble_with_default(obj: Any, name: str) -> float:
    """Return a non-negative number, or ``0.0`` when missing."""
    if _is_empty(obj):
        return 0.0
    if _is_number(obj) and obj >= 0:
        return float(obj)
    raise _wrong_type(name, "positive double")


def parse_string(obj: Any, name: str) -> str:
    """Return a required string."""
    if _is_empty(obj):
        raise _not_found(name)
    if isinstance(obj, str):
        return obj
    raise _wrong_type(name, "string")


def parse_string_with_default(obj: Any, name: str, default: str) -> str:
    """Return a string, or ``default`` when missing."""
    if _is_empty(obj):
        return default
    if isinstance(obj, str):
        return obj
    raise _wrong_type(name, "string")


def _command_name(command: Any) -> str:
    name = getattr(command, "name", command)
    if not isinstance(name, str):
        raise TypeError(f"Unsupported command: {command!r}")
    return name.upper()


class _CompletionTiming(NamedTuple):
    t_rcd: int = 0
    t_rl: int = 0
    t_wl: int = 0
    t_rfc: int = 0
    t_rp: int = 0


@dataclass(kw_only=True)
class MemSpec:
    """Architecture fields shared by every memory standard."""

    number_of_banks: int = 0
    number_of_rows: int = 0
    number_of_columns: int = 0
    burst_length: int = 0
    data_rate: int = 0
    bit_width: int = 0
    memory_id: str = ""
    memory_type: str = ""
    precharge_offset_rd: int = 0
    precharge_offset_wr: int = 0

    @classmethod
    def _common_fields(cls, memspec: Mapping[str, Any]) -> dict[str, Any]:
        def arch(key: str) -> Any:
            return _lookup(memspec, "memarchitecturespec", key)

        return {
            "number_of_banks": parse_uint(arch("nbrOfBanks"), "nbrOfBanks"),
            "number_of_rows": parse_uint(arch("nbrOfRows"), "nbrOfRows"),
            "number_of_columns": parse_uint(arch("nbrOfColumns"), "nbrOfColumns"),
            "burst_length": parse_uint(arch("burstLength"), "burstLength"),
            "data_rate": parse_uint(arch("dataRate"), "dataRate"),
            "bit_width": parse_uint(arch("width"), "width"),
            "memory_id": parse_string(_lookup(memspec, "memoryId"), "memoryId"),
            "memory_type": parse_string(_lookup(memspec, "memoryType"), "memoryType"),
        }

    @classmethod
    def from_json(cls, memspec: Mapping[str, Any]) -> "MemSpec":
        """Build a specification from the ``memspec`` JSON object."""
        return cls(**cls._common_fields(memspec))

    def _completion_timing(self) -> _CompletionTiming:
        return _CompletionTiming()

    def time_to_completion(self, command: Any) -> int:
        """Cycles until ``command`` (a name or an enum member) completes."""
        name = _command_name(command)
        timing = self._completion_timing()
        match name:
            case "ACT":
                return timing.t_rcd
            case "RD":
                return timing.t_rl + self.burst_length // self.data_rate
            case "WR":
                return timing.t_wl + self.burst_length // self.data_rate
            case "REFA":
                return timing.t_rfc
            case "PRE" | "PREA":
                return timing.t_rp
            case _:
                return 0