import copy

import pytest

from dramspec.lpddr4 import (
    LPDDR4BankWiseParams,
    LPDDR4VoltageDomain,
    MemSpecLPDDR4,
    PasrMode,
)

_BASE = {
    "memoryId": "test_lpddr4",
    "memoryType": "LPDDR4",
    "memarchitecturespec": {
        "nbrOfBanks": 8,
        "nbrOfRows": 65536,
        "nbrOfColumns": 1024,
        "burstLength": 16,
        "dataRate": 2,
        "width": 16,
        "nbrOfBankGroups": 1,
        "nbrOfRanks": 1,
    },
    "memtimingspec": {
        "clkMhz": 1600,
        "RAS": 34,
        "RCD": 29,
        "RL": 28,
        "RTP": 12,
        "WL": 14,
        "WR": 29,
        "RP": 34,
        "RFCpb": 112,
        "RFCab": 224,
        "REFI": 6248,
    },
    "mempowerspec": {
        "vdd": 1.1,
        "idd0": 60.0,
        "idd2n": 40.0,
        "idd3n": 50.0,
        "idd4r": 200.0,
        "idd4w": 180.0,
        "idd5": 250.0,
        "idd5pb": 30.0,
        "idd6": 20.0,
        "idd2p": 25.0,
        "idd3p": 35.0,
    },
}


def make(**overrides):
    data = copy.deepcopy(_BASE)
    for section, values in overrides.items():
        if isinstance(values, dict) and isinstance(data.get(section), dict):
            data[section].update(values)
        else:
            data[section] = values
    return data


def pasr_banks(mode):
    spec = MemSpecLPDDR4.from_json(
        make(bankwisespec={"hasPASR": True, "pasrMode": int(mode)})
    )
    return spec.bw_params.active_banks


def test_common_and_timing_fields():
    spec = MemSpecLPDDR4.from_json(make())
    assert spec.memory_id == "test_lpddr4"
    assert spec.number_of_banks == 8
    assert spec.banks_per_group * spec.number_of_bank_groups == spec.number_of_banks
    t = spec.mem_timing_spec
    assert t.t_ck * t.f_ck_mhz == pytest.approx(1000.0)
    assert t.t_rl == 28
    assert t.t_rfc == 224
    assert t.t_rfcpb == 112
    assert t.t_refi == 6248


def test_power_spec_single_domain():
    spec = MemSpecLPDDR4.from_json(make())
    assert len(spec.mem_power_spec) == 1
    vdd = spec.mem_power_spec[LPDDR4VoltageDomain.VDD]
    assert vdd.v_ddx == 1.1
    assert vdd.i_dd5pbx == 30.0
    assert vdd.i_beta == vdd.i_dd0x


def test_ibeta_explicit():
    spec = MemSpecLPDDR4.from_json(make(mempowerspec={"iBeta": 42.0}))
    assert spec.mem_power_spec[0].i_beta == 42.0


def test_precharge_offsets_burst_16():
    spec = MemSpecLPDDR4.from_json(make())
    assert spec.precharge_offset_rd == spec.mem_timing_spec.t_rtp


def test_bankwise_defaults_without_section():
    spec = MemSpecLPDDR4.from_json(make())
    assert spec.bw_params == LPDDR4BankWiseParams()
    assert spec.bw_params.flg_pasr is False
    assert spec.bw_params.active_banks == []


def test_bankwise_factors():
    spec = MemSpecLPDDR4.from_json(
        make(bankwisespec={"factRho": 0.5, "factSigma": 3.0})
    )
    assert spec.bw_params.bw_power_fact_rho == 0.5
    assert spec.bw_params.bw_power_fact_sigma == 3
    assert spec.bw_params.flg_pasr is False


def test_pasr_full_array():
    assert pasr_banks(PasrMode.PASR_0) == list(range(8))


def test_pasr_eighths():
    assert pasr_banks(PasrMode.PASR_3) == [0]
    assert pasr_banks(PasrMode.PASR_7) == [7]


def test_pasr_halves_partition_array():
    lower = set(pasr_banks(PasrMode.PASR_1))
    upper = set(pasr_banks(PasrMode.PASR_5))
    assert lower.isdisjoint(upper)
    assert lower | upper == set(range(8))


def test_pasr_nesting():
    assert set(pasr_banks(PasrMode.PASR_3)) < set(pasr_banks(PasrMode.PASR_2))
    assert set(pasr_banks(PasrMode.PASR_2)) < set(pasr_banks(PasrMode.PASR_1))
    assert set(pasr_banks(PasrMode.PASR_6)) < set(pasr_banks(PasrMode.PASR_5))
    assert set(pasr_banks(PasrMode.PASR_5)) < set(pasr_banks(PasrMode.PASR_4))
    assert set(pasr_banks(PasrMode.PASR_4)) < set(pasr_banks(PasrMode.PASR_0))


def test_pasr_unknown_mode_is_full_array():
    assert pasr_banks(9) == pasr_banks(PasrMode.PASR_0)


def test_is_bank_active_in_pasr():
    spec = MemSpecLPDDR4.from_json(
        make(bankwisespec={"hasPASR": True, "pasrMode": 7})
    )
    params = spec.bw_params
    assert params.flg_pasr is True
    assert params.pasr_mode == 7
    assert params.is_bank_active_in_pasr(7)
    assert not params.is_bank_active_in_pasr(0)


def test_pasr_mode_required_when_enabled():
    with pytest.raises(ValueError, match="pasrMode"):
        MemSpecLPDDR4.from_json(make(bankwisespec={"hasPASR": True}))


def test_has_pasr_must_be_bool():
    with pytest.raises(ValueError, match="hasPASR"):
        MemSpecLPDDR4.from_json(make(bankwisespec={"hasPASR": 1}))


def test_pasr_mode_needs_enough_banks():
    data = make(
        memarchitecturespec={"nbrOfBanks": 4},
        bankwisespec={"hasPASR": True, "pasrMode": 7},
    )
    with pytest.raises(ValueError):
        MemSpecLPDDR4.from_json(data)


def test_missing_refresh_timing():
    data = make()
    del data["memtimingspec"]["RFCab"]
    with pytest.raises(ValueError, match="RFCab"):
        MemSpecLPDDR4.from_json(data)


def test_time_to_completion():
    spec = MemSpecLPDDR4.from_json(make())
    t = spec.mem_timing_spec
    burst = spec.burst_length // spec.data_rate
    assert spec.time_to_completion("ACT") == t.t_rcd
    assert spec.time_to_completion("RD") == t.t_rl + burst
    assert spec.time_to_completion("WR") == t.t_wl + burst
    assert spec.time_to_completion("REFA") == t.t_rfc
    assert spec.time_to_completion("PREA") == t.t_rp
    assert spec.time_to_completion("SREFEN") == 0