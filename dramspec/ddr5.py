"""DDR5 memory specification."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from dramspec.ddr4 import (
    _REFRESH_NORMAL,
    _BurstTimingSpec,
    _ddr_keys,
    _ddr_power_domains,
    _DDRPowerBase,
    _Reader,
    _RhoBankWiseParams,
    _TimingCompletion,
)
from dramspec.memspec import MemSpec

__all__ = [
    "DDR5BankWiseParams",
    "DDR5PowerSpec",
    "DDR5TimingSpec",
    "DDR5VoltageDomain",
    "MemSpecDDR5",
]


class DDR5VoltageDomain(IntEnum):
    VDD = 0
    VPP = 1
    VDDQ = 2


@dataclass(kw_only=True)
class DDR5TimingSpec(_BurstTimingSpec):
    """DDR5 clock and timing parameters; timings are in clock cycles."""

    t_rfcsb: int = 0


@dataclass(kw_only=True)
class DDR5PowerSpec(_DDRPowerBase):
    """DDR5 currents and voltage of one voltage domain."""

    i_xx5c: float = 0.0


@dataclass(kw_only=True)
class DDR5BankWiseParams(_RhoBankWiseParams):
    """DDR5 bank-wise power parameters."""


_VDD_KEYS = _ddr_keys("idd", "vdd", ("0", "2n", "3n", "4r", "4w", "5C", "6n", None, "2p", "3p"))
_VPP_KEYS = _ddr_keys("ipp", "vpp", ("0", "2n", "3n", "4r", "4w", "5C", "6n", None, "2p", "3p"))
_REFRESH_FINE = ("idd5F", "ipp5F", "RFC2")


@dataclass(kw_only=True)
class MemSpecDDR5(_TimingCompletion, MemSpec):
    """A DDR5 device description."""

    number_of_bank_groups: int = 0
    banks_per_group: int = 0
    number_of_ranks: int = 0
    refresh_mode: int = 1
    mem_timing_spec: DDR5TimingSpec = field(default_factory=DDR5TimingSpec)
    mem_power_spec: list[DDR5PowerSpec] = field(default_factory=list)
    bw_params: DDR5BankWiseParams = field(default_factory=DDR5BankWiseParams)

    @classmethod
    def from_json(cls, memspec: Mapping[str, Any]) -> "MemSpecDDR5":
        """Build a DDR5 specification from the ``memspec`` JSON object."""
        common = cls._common_fields(memspec)
        reader = _Reader(memspec)

        architecture = reader.grouped_architecture(common["number_of_banks"])
        refresh_mode = reader.refresh_mode()
        timing_spec = DDR5TimingSpec(**reader.timing_fields((("t_rfcsb", "RFCsb"),)))
        power = _ddr_power_domains(
            reader,
            DDR5PowerSpec,
            _VDD_KEYS,
            _VPP_KEYS,
            _REFRESH_NORMAL if refresh_mode == 1 else _REFRESH_FINE,
            timing_spec,
        )
        rho = reader.fact_rho()
        timing_spec.t_burst = common["burst_length"] // common["data_rate"]

        return cls(
            **common,
            **architecture,
            refresh_mode=refresh_mode,
            mem_timing_spec=timing_spec,
            mem_power_spec=power,
            bw_params=DDR5BankWiseParams(bw_power_fact_rho=rho),
            precharge_offset_rd=timing_spec.t_rtp,
            precharge_offset_wr=timing_spec.t_burst + timing_spec.t_wl + timing_spec.t_wr,
        )

    def time_to_completion(self, command: Any) -> int:
        """Cycles until ``command`` completes under the DDR5 timings."""
        return super().time_to_completion(command)