"""LPDDR5 memory specification."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from dramspec.ddr4 import _TIMING, _Reader, _RhoBankWiseParams, _TimingCompletion
from dramspec.lpddr4 import (
    _LPDDR_REFRESH_TIMING,
    _lpddr_keys,
    _LPDDRPowerBase,
    _LPDDRTimingBase,
)
from dramspec.memspec import MemSpec

__all__ = [
    "LPDDR5BankWiseParams",
    "LPDDR5PowerSpec",
    "LPDDR5TimingSpec",
    "LPDDR5VoltageDomain",
    "MemSpecLPDDR5",
]


class LPDDR5VoltageDomain(IntEnum):
    VDD = 0
    VDDQ = 1


@dataclass(kw_only=True)
class LPDDR5TimingSpec(_LPDDRTimingBase):
    """LPDDR5 clock and timing parameters; timings are in clock cycles."""

    t_wck: float = 0.0
    wck_to_ck: int = 0
    t_rbtp: int = 0
    t_burst: int = 0


@dataclass(kw_only=True)
class LPDDR5PowerSpec(_LPDDRPowerBase):
    """LPDDR5 currents and voltage of one voltage domain."""

    i_dd6dsx: float = 0.0


@dataclass(kw_only=True)
class LPDDR5BankWiseParams(_RhoBankWiseParams):
    """LPDDR5 bank-wise power parameters."""


_VDD_KEYS = _lpddr_keys(("0", "2n", "3n", "4r", "4w", "5", "5pb", "6", "6ds", None, "2p", "3p"))


@dataclass(kw_only=True)
class MemSpecLPDDR5(_TimingCompletion, MemSpec):
    """An LPDDR5 device description."""

    number_of_bank_groups: int = 0
    banks_per_group: int = 0
    number_of_ranks: int = 0
    per_two_bank_offset: int = 8
    bgroup_mode: bool = False
    mem_timing_spec: LPDDR5TimingSpec = field(default_factory=LPDDR5TimingSpec)
    mem_power_spec: list[LPDDR5PowerSpec] = field(default_factory=list)
    bw_params: LPDDR5BankWiseParams = field(default_factory=LPDDR5BankWiseParams)

    @classmethod
    def from_json(cls, memspec: Mapping[str, Any]) -> "MemSpecLPDDR5":
        """Build an LPDDR5 specification from the ``memspec`` JSON object."""
        common = cls._common_fields(memspec)
        reader = _Reader(memspec)

        architecture = reader.grouped_architecture(common["number_of_banks"])
        timing_spec = LPDDR5TimingSpec(
            **reader.timing_fields((*_LPDDR_REFRESH_TIMING, ("t_rbtp", "RBTP")))
        )
        wck_to_ck = reader.uint(_TIMING, "WCKtoCK")
        if wck_to_ck == 0:
            raise ValueError("Expected type for 'WCKtoCK': positive unsigned int")
        timing_spec.wck_to_ck = wck_to_ck
        timing_spec.t_wck = timing_spec.t_ck / wck_to_ck

        vdd = reader.domain(LPDDR5PowerSpec, _VDD_KEYS)
        vdd.i_beta = reader.i_beta(vdd.i_dd0x)
        rho = reader.fact_rho()

        data_rate = common["data_rate"]
        if data_rate == 0:
            raise ValueError("Expected type for 'dataRate': positive unsigned int")
        # LPDDR5 standard, table 312
        timing_spec.t_burst = common["burst_length"] // (data_rate * wck_to_ck)
        # LPDDR5 standard, figure 96
        precharge_rd = timing_spec.t_burst + timing_spec.t_rbtp
        # LPDDR5 standard, figure 97
        precharge_wr = timing_spec.t_wl + timing_spec.t_burst + 1 + timing_spec.t_wr

        return cls(
            **common,
            **architecture,
            bgroup_mode=architecture["number_of_bank_groups"] > 1,
            mem_timing_spec=timing_spec,
            mem_power_spec=[vdd],
            bw_params=LPDDR5BankWiseParams(bw_power_fact_rho=rho),
            precharge_offset_rd=precharge_rd,
            precharge_offset_wr=precharge_wr,
        )

    def time_to_completion(self, command: Any) -> int:
        """Cycles until ``command`` completes under the LPDDR5 timings."""
        return super().time_to_completion(command)