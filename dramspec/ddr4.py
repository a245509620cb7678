"""DDR4 memory specification, with the parsing helpers the other standards share."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional, Union

from dramspec.memspec import (
    MemSpec,
    _CompletionTiming,
    _contains,
    _lookup,
    parse_udouble,
    parse_udouble_with_default,
    parse_uint,
    parse_uint_with_default,
)

__all__ = [
    "DDR4BankWiseParams",
    "DDR4PowerSpec",
    "DDR4TimingSpec",
    "DDR4VoltageDomain",
    "MemSpecDDR4",
]

_ARCH = "memarchitecturespec"
_TIMING = "memtimingspec"
_POWER = "mempowerspec"

# Timing parameters every standard reads: (attribute, JSON key).
_COMMON_TIMING_KEYS = (
    ("t_ras", "RAS"),
    ("t_rcd", "RCD"),
    ("t_rtp", "RTP"),
    ("t_wl", "WL"),
    ("t_wr", "WR"),
    ("t_rp", "RP"),
)

# A current is named by a suffix, or by (attribute suffix, key suffix) where
# the two differ; None stands for the supply voltage.
_Current = Optional[Union[str, tuple[str, str]]]


def _domain_keys(
    current_attr: str,
    voltage_attr: str,
    current_prefix: str,
    voltage_key: str,
    currents: Iterable[_Current],
) -> tuple[tuple[str, str], ...]:
    """Pair power-spec attributes with their JSON keys, in reading order."""

    def pairs() -> Iterator[tuple[str, str]]:
        for entry in currents:
            if entry is None:
                yield voltage_attr, voltage_key
                continue
            attr_suffix, key_suffix = (entry, entry) if isinstance(entry, str) else entry
            yield current_attr.format(attr_suffix.lower()), current_prefix + key_suffix

    return tuple(pairs())


def _ddr_keys(prefix: str, voltage_key: str, currents: Iterable[_Current]) -> tuple[tuple[str, str], ...]:
    return _domain_keys("i_xx{}", "v_xx", prefix, voltage_key, currents)


def _bank_wise_factor(bank_wise: Any, key: str) -> float:
    """A bank-wise power factor, 1 when the specification leaves it out."""
    return parse_udouble(bank_wise[key], key) if _contains(bank_wise, key) else 1.0


class _Reader:
    """Typed access to the parameters of a ``memspec`` JSON object."""

    def __init__(self, memspec: Mapping[str, Any]) -> None:
        self._memspec = memspec

    def uint(self, section: str, key: str) -> int:
        return parse_uint(_lookup(self._memspec, section, key), key)

    def udouble(self, section: str, key: str) -> float:
        return parse_udouble(_lookup(self._memspec, section, key), key)

    def optional_udouble(self, section: str, key: str) -> float:
        return parse_udouble_with_default(_lookup(self._memspec, section, key), key)

    def section(self, name: str) -> Any:
        """The named top-level section, or None when it is absent."""
        return _lookup(self._memspec, name) if _contains(self._memspec, name) else None

    def refresh_mode(self) -> int:
        return parse_uint_with_default(_lookup(self._memspec, "RefreshMode"), "RefreshMode", 1)

    def domain(self, spec_cls: type, keys: Iterable[tuple[str, str]], *, optional: bool = False) -> Any:
        """Build one voltage domain's power spec from ``mempowerspec``."""
        parse = self.optional_udouble if optional else self.udouble
        return spec_cls(**{attr: parse(_POWER, key) for attr, key in keys})

    def i_beta(self, fallback: float) -> float:
        if _contains(_lookup(self._memspec, _POWER), "iBeta"):
            return self.udouble(_POWER, "iBeta")
        return fallback

    def timing_fields(self, extra: Iterable[tuple[str, str]] = ()) -> dict[str, Any]:
        """Clock and the common timings, followed by ``extra`` timings."""
        f_ck = self.udouble(_TIMING, "clkMhz")
        values: dict[str, Any] = {"f_ck_mhz": f_ck, "t_ck": 1000.0 / f_ck}
        values.update(
            (attr, self.uint(_TIMING, key)) for attr, key in (*_COMMON_TIMING_KEYS, *extra)
        )
        return values

    def grouped_architecture(self, number_of_banks: int) -> dict[str, int]:
        """Bank groups, banks per group and ranks."""
        groups = self.uint(_ARCH, "nbrOfBankGroups")
        if groups == 0:
            raise ValueError("Expected type for 'nbrOfBankGroups': positive unsigned int")
        return {
            "number_of_bank_groups": groups,
            "banks_per_group": number_of_banks // groups,
            "number_of_ranks": self.uint(_ARCH, "nbrOfRanks"),
        }

    def fact_rho(self) -> float:
        return _bank_wise_factor(self.section("bankwisespec"), "factRho")


class _TimingCompletion:
    """Takes the completion timings from ``mem_timing_spec``."""

    def _completion_timing(self) -> _CompletionTiming:
        t = self.mem_timing_spec  # type: ignore[attr-defined]
        return _CompletionTiming(
            t_rcd=t.t_rcd, t_rl=t.t_rl, t_wl=t.t_wl, t_rfc=t.t_rfc, t_rp=t.t_rp
        )


@dataclass(kw_only=True)
class _TimingSpecBase:
    """Clock and timing parameters; timings are in clock cycles."""

    f_ck_mhz: float = 0.0
    t_ck: float = 0.0
    t_ras: int = 0
    t_rcd: int = 0
    t_rl: int = 0
    t_rtp: int = 0
    t_wl: int = 0
    t_wr: int = 0
    t_rfc: int = 0
    t_rp: int = 0


@dataclass(kw_only=True)
class _BurstTimingSpec(_TimingSpecBase):
    t_burst: int = 0


@dataclass(kw_only=True)
class _DDRPowerBase:
    """Currents and voltage of one voltage domain."""

    v_xx: float = 0.0
    i_xx0: float = 0.0
    i_xx2n: float = 0.0
    i_xx3n: float = 0.0
    i_xx2p: float = 0.0
    i_xx3p: float = 0.0
    i_xx4r: float = 0.0
    i_xx4w: float = 0.0
    i_xx5x: float = 0.0
    i_xx6n: float = 0.0
    i_beta: float = 0.0


@dataclass(kw_only=True)
class _RhoBankWiseParams:
    """Bank-wise power parameters."""

    # ACT standby power factor
    bw_power_fact_rho: float = 1.0


def _ddr_power_domains(
    reader: _Reader,
    spec_cls: type,
    vdd_keys: Iterable[tuple[str, str]],
    vpp_keys: Iterable[tuple[str, str]],
    refresh_keys: tuple[str, str, str],
    timing_spec: _TimingSpecBase,
) -> list[Any]:
    """Read the VDD and VPP domains and the refresh timing they depend on."""
    vdd = reader.domain(spec_cls, vdd_keys)
    vpp = reader.domain(spec_cls, vpp_keys, optional=True)
    idd5, ipp5, rfc = refresh_keys
    vdd.i_xx5x = reader.udouble(_POWER, idd5)
    vpp.i_xx5x = reader.optional_udouble(_POWER, ipp5)
    timing_spec.t_rfc = reader.uint(_TIMING, rfc)
    vdd.i_beta = reader.i_beta(vdd.i_xx0)
    vpp.i_beta = reader.i_beta(vpp.i_xx0)
    return [vdd, vpp]


class DDR4VoltageDomain(IntEnum):
    VDD = 0
    VPP = 1
    VDDQ = 2


@dataclass(kw_only=True)
class DDR4TimingSpec(_BurstTimingSpec):
    """DDR4 clock and timing parameters; timings are in clock cycles."""

    t_al: int = 0


@dataclass(kw_only=True)
class DDR4PowerSpec(_DDRPowerBase):
    """DDR4 currents and voltage of one voltage domain."""


@dataclass(kw_only=True)
class DDR4BankWiseParams(_RhoBankWiseParams):
    """DDR4 bank-wise power parameters."""


_DDR4_CURRENTS: tuple[_Current, ...] = ("0", "2n", "3n", "4r", "4w", "6n", None, "2p", "3p")
_VDD_KEYS = _ddr_keys("idd", "vdd", _DDR4_CURRENTS)
_VPP_KEYS = _ddr_keys(
    "ipp", "vpp", ("0", "2n", "3n", "4r", "4w", ("6n", "6"), None, "2p", "3p")
)

# (VDD refresh current, VPP refresh current, refresh cycle time)
_REFRESH_NORMAL = ("idd5B", "ipp5B", "RFC1")
_DDR4_REFRESH = {1: _REFRESH_NORMAL, 2: ("idd5F2", "ipp5F2", "RFC2")}
_DDR4_REFRESH_FINE = ("idd5F4", "ipp5F4", "RFC4")


@dataclass(kw_only=True)
class MemSpecDDR4(_TimingCompletion, MemSpec):
    """A DDR4 device description."""

    number_of_bank_groups: int = 0
    number_of_ranks: int = 0
    refresh_mode: int = 1
    mem_timing_spec: DDR4TimingSpec = field(default_factory=DDR4TimingSpec)
    mem_power_spec: list[DDR4PowerSpec] = field(default_factory=list)
    bw_params: DDR4BankWiseParams = field(default_factory=DDR4BankWiseParams)

    @classmethod
    def from_json(cls, memspec: Mapping[str, Any]) -> "MemSpecDDR4":
        """Build a DDR4 specification from the ``memspec`` JSON object."""
        common = cls._common_fields(memspec)
        reader = _Reader(memspec)

        bank_groups = reader.uint(_ARCH, "nbrOfBankGroups")
        ranks = reader.uint(_ARCH, "nbrOfRanks")
        refresh_mode = reader.refresh_mode()
        timing_spec = DDR4TimingSpec(**reader.timing_fields((("t_al", "AL"),)))
        power = _ddr_power_domains(
            reader,
            DDR4PowerSpec,
            _VDD_KEYS,
            _VPP_KEYS,
            _DDR4_REFRESH.get(refresh_mode, _DDR4_REFRESH_FINE),
            timing_spec,
        )
        rho = reader.fact_rho()
        timing_spec.t_burst = common["burst_length"] // common["data_rate"]

        return cls(
            **common,
            number_of_bank_groups=bank_groups,
            number_of_ranks=ranks,
            refresh_mode=refresh_mode,
            mem_timing_spec=timing_spec,
            mem_power_spec=power,
            bw_params=DDR4BankWiseParams(bw_power_fact_rho=rho),
            precharge_offset_rd=timing_spec.t_al + timing_spec.t_rtp,
            precharge_offset_wr=timing_spec.t_burst + timing_spec.t_wl + timing_spec.t_wr,
        )

    def time_to_completion(self, command: Any) -> int:
        """Cycles until ``command`` completes under the DDR4 timings."""
        return super().time_to_completion(command)