"""LPDDR4 memory specification."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from dramspec.ddr4 import (
    _bank_wise_factor,
    _Current,
    _domain_keys,
    _Reader,
    _RhoBankWiseParams,
    _TimingCompletion,
    _TimingSpecBase,
)
from dramspec.memspec import MemSpec, parse_bool_with_default, parse_uint

__all__ = [
    "LPDDR4BankWiseParams",
    "LPDDR4DataRateSpec",
    "LPDDR4ImpedanceSpec",
    "LPDDR4PowerSpec",
    "LPDDR4TimingSpec",
    "LPDDR4VoltageDomain",
    "MemSpecLPDDR4",
    "PasrMode",
]


class LPDDR4VoltageDomain(IntEnum):
    VDD = 0
    VDDQ = 1


class PasrMode(IntEnum):
    """Partial array self-refresh modes."""

    PASR_0 = 0
    PASR_1 = 1
    PASR_2 = 2
    PASR_3 = 3
    PASR_4 = 4
    PASR_5 = 5
    PASR_6 = 6
    PASR_7 = 7


# mode -> (number of banks switched off, first active bank)
_PASR_LAYOUT = {
    PasrMode.PASR_0: (0, 0),  # full array
    PasrMode.PASR_1: (4, 0),  # lower half
    PasrMode.PASR_2: (6, 0),  # lower quarter
    PasrMode.PASR_3: (7, 0),  # lower eighth
    PasrMode.PASR_4: (2, 2),  # upper three quarters
    PasrMode.PASR_5: (4, 4),  # upper half
    PasrMode.PASR_6: (6, 6),  # upper quarter
    PasrMode.PASR_7: (7, 7),  # upper eighth
}


def _pasr_active_banks(mode: int, number_of_banks: int) -> list[int]:
    off, start = _PASR_LAYOUT.get(mode, (0, 0))
    count = number_of_banks - off
    if count < 0:
        raise ValueError(
            f"PASR mode {mode} needs at least {off} banks, got {number_of_banks}"
        )
    return list(range(start, start + count))


def _lpddr_keys(currents: Iterable[_Current]) -> tuple[tuple[str, str], ...]:
    return _domain_keys("i_dd{}x", "v_ddx", "idd", "vdd", currents)


# Refresh timings of the LPDDR standards: (attribute, JSON key).
_LPDDR_REFRESH_TIMING = (("t_rfcpb", "RFCpb"), ("t_rfc", "RFCab"), ("t_refi", "REFI"))


@dataclass(kw_only=True)
class _LPDDRTimingBase(_TimingSpecBase):
    t_refi: int = 0
    t_rfcpb: int = 0


@dataclass(kw_only=True)
class _LPDDRPowerBase:
    """Currents and voltage of one voltage domain."""

    v_ddx: float = 0.0
    i_dd0x: float = 0.0
    i_dd2nx: float = 0.0
    i_dd3nx: float = 0.0
    i_dd2px: float = 0.0
    i_dd3px: float = 0.0
    i_dd4rx: float = 0.0
    i_dd4wx: float = 0.0
    i_dd5x: float = 0.0
    i_dd5pbx: float = 0.0
    i_dd6x: float = 0.0
    i_beta: float = 0.0


@dataclass(kw_only=True)
class LPDDR4TimingSpec(_LPDDRTimingBase):
    """LPDDR4 clock and timing parameters; timings are in clock cycles."""


@dataclass(kw_only=True)
class LPDDR4PowerSpec(_LPDDRPowerBase):
    """LPDDR4 currents and voltage of one voltage domain."""


@dataclass(kw_only=True)
class LPDDR4ImpedanceSpec:
    """Total capacitances and equivalent resistances of the interface lines."""

    c_total_ck: float = 0.0
    c_total_cb: float = 0.0
    c_total_rb: float = 0.0
    c_total_wb: float = 0.0
    c_total_dqs: float = 0.0
    r_eq_ck: float = 0.0
    r_eq_cb: float = 0.0
    r_eq_rb: float = 0.0
    r_eq_wb: float = 0.0
    r_eq_dqs: float = 0.0


@dataclass(kw_only=True)
class LPDDR4DataRateSpec:
    """Transfer rates of the command, data and strobe buses."""

    command_bus_rate: int = 0
    data_bus_rate: int = 0
    dqs_bus_rate: int = 0


@dataclass(kw_only=True)
class LPDDR4BankWiseParams(_RhoBankWiseParams):
    """Bank-wise power parameters and partial array self-refresh setup."""

    active_banks: list[int] = field(default_factory=list)
    bw_power_fact_sigma: int = 1
    flg_pasr: bool = False
    pasr_mode: int = 0

    def is_bank_active_in_pasr(self, bank: int) -> bool:
        """Whether ``bank`` keeps being refreshed under the PASR mode."""
        return bank in self.active_banks


_VDD_KEYS = _lpddr_keys(("0", "2n", "3n", "4r", "4w", "5", "5pb", "6", None, "2p", "3p"))


def _parse_bank_wise(bank_wise: Mapping[str, Any], number_of_banks: int) -> LPDDR4BankWiseParams:
    params = LPDDR4BankWiseParams(
        bw_power_fact_rho=_bank_wise_factor(bank_wise, "factRho"),
        bw_power_fact_sigma=int(_bank_wise_factor(bank_wise, "factSigma")),
    )
    params.flg_pasr = parse_bool_with_default(bank_wise.get("hasPASR"), "hasPASR")
    if params.flg_pasr:
        params.pasr_mode = parse_uint(bank_wise.get("pasrMode"), "pasrMode")
        params.active_banks = _pasr_active_banks(params.pasr_mode, number_of_banks)
    return params


@dataclass(kw_only=True)
class MemSpecLPDDR4(_TimingCompletion, MemSpec):
    """An LPDDR4 device description."""

    number_of_bank_groups: int = 0
    banks_per_group: int = 0
    number_of_ranks: int = 0
    mem_timing_spec: LPDDR4TimingSpec = field(default_factory=LPDDR4TimingSpec)
    mem_impedance_spec: LPDDR4ImpedanceSpec = field(default_factory=LPDDR4ImpedanceSpec)
    data_rate_spec: LPDDR4DataRateSpec = field(default_factory=LPDDR4DataRateSpec)
    mem_power_spec: list[LPDDR4PowerSpec] = field(default_factory=list)
    bw_params: LPDDR4BankWiseParams = field(default_factory=LPDDR4BankWiseParams)

    @classmethod
    def from_json(cls, memspec: Mapping[str, Any]) -> "MemSpecLPDDR4":
        """Build an LPDDR4 specification from the ``memspec`` JSON object."""
        common = cls._common_fields(memspec)
        reader = _Reader(memspec)

        architecture = reader.grouped_architecture(common["number_of_banks"])
        timing_spec = LPDDR4TimingSpec(
            **reader.timing_fields((("t_rl", "RL"), *_LPDDR_REFRESH_TIMING))
        )
        vdd = reader.domain(LPDDR4PowerSpec, _VDD_KEYS)
        vdd.i_beta = reader.i_beta(vdd.i_dd0x)

        bank_wise = reader.section("bankwisespec")
        if bank_wise is None:
            bw_params = LPDDR4BankWiseParams()
        else:
            bw_params = _parse_bank_wise(
                bank_wise if isinstance(bank_wise, Mapping) else {},
                common["number_of_banks"],
            )

        burst_length = common["burst_length"]
        # JESD209-4, table 21
        if burst_length == 16:
            precharge_rd = timing_spec.t_rtp
        else:
            precharge_rd = 8 + timing_spec.t_rtp
        precharge_wr = timing_spec.t_wl + burst_length // 2 + timing_spec.t_wr + 1

        return cls(
            **common,
            **architecture,
            mem_timing_spec=timing_spec,
            mem_power_spec=[vdd],
            bw_params=bw_params,
            precharge_offset_rd=precharge_rd,
            precharge_offset_wr=precharge_wr,
        )

    def time_to_completion(self, command: Any) -> int:
        """Cycles until ``command`` completes under the LPDDR4 timings."""
        return super().time_to_completion(command)