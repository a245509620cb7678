import copy

import pytest

from dramspec.memspec import (
    MemSpec,
    parse_bool,
    parse_bool_with_default,
    parse_string,
    parse_string_with_default,
    parse_udouble,
    parse_udouble_with_default,
    parse_uint,
    parse_uint_with_default,
)

SAMPLE = {
    "memoryId": "sample_device",
    "memoryType": "DDR4",
    "memarchitecturespec": {
        "nbrOfBanks": 16,
        "nbrOfRows": 65536,
        "nbrOfColumns": 1024,
        "burstLength": 8,
        "dataRate": 2,
        "width": 8,
    },
}


def _doc():
    return copy.deepcopy(SAMPLE)


def test_parse_bool_values():
    assert parse_bool(True, "flag") is True
    assert parse_bool(False, "flag") is False


def test_parse_bool_missing():
    with pytest.raises(ValueError, match="not found"):
        parse_bool(None, "flag")


def test_parse_bool_wrong_type():
    with pytest.raises(ValueError, match="'flag': bool"):
        parse_bool(1, "flag")


def test_parse_bool_with_default():
    assert parse_bool_with_default(None, "flag") is False
    assert parse_bool_with_default({}, "flag") is False
    assert parse_bool_with_default(True, "flag") is True
    with pytest.raises(ValueError, match="bool"):
        parse_bool_with_default("yes", "flag")


def test_parse_uint_accepts_non_negative_int():
    assert parse_uint(7, "n") == 7
    assert parse_uint(0, "n") == 0


@pytest.mark.parametrize("value", [-1, 1.5, True, "3"])
def test_parse_uint_rejects_other_values(value):
    with pytest.raises(ValueError, match="unsigned int"):
        parse_uint(value, "n")


@pytest.mark.parametrize("value", [None, {}, []])
def test_parse_uint_missing(value):
    with pytest.raises(ValueError, match="'n' not found"):
        parse_uint(value, "n")


def test_parse_uint_with_default():
    assert parse_uint_with_default(None, "n", 5) == 5
    assert parse_uint_with_default(None, "n") == 0
    assert parse_uint_with_default(3, "n", 5) == 3
    assert parse_uint_with_default(2.9, "n") == 2


@pytest.mark.parametrize("value", [0, -2, "x", False])
def test_parse_uint_with_default_rejects(value):
    with pytest.raises(ValueError, match="unsigned int"):
        parse_uint_with_default(value, "n", 1)


def test_parse_udouble():
    assert parse_udouble(0.5, "d") == 0.5
    assert isinstance(parse_udouble(3, "d"), float)
    with pytest.raises(ValueError, match="positive double"):
        parse_udouble(0, "d")
    with pytest.raises(ValueError, match="positive double"):
        parse_udouble("1", "d")
    with pytest.raises(ValueError, match="not found"):
        parse_udouble(None, "d")


def test_parse_udouble_with_default():
    assert parse_udouble_with_default(None, "d") == 0.0
    assert parse_udouble_with_default(0, "d") == 0.0
    assert parse_udouble_with_default(1.25, "d") == 1.25
    with pytest.raises(ValueError, match="positive double"):
        parse_udouble_with_default(-0.1, "d")


def test_parse_string():
    assert parse_string("abc", "s") == "abc"
    assert parse_string("", "s") == ""
    with pytest.raises(ValueError, match="string"):
        parse_string(3, "s")
    with pytest.raises(ValueError, match="not found"):
        parse_string(None, "s")


def test_parse_string_with_default():
    assert parse_string_with_default(None, "s", "fallback") == "fallback"
    assert parse_string_with_default({}, "s", "fallback") == "fallback"
    assert parse_string_with_default("given", "s", "fallback") == "given"
    with pytest.raises(ValueError, match="string"):
        parse_string_with_default(1.0, "s", "fallback")


def test_from_json_reads_common_fields():
    spec = MemSpec.from_json(_doc())
    arch = SAMPLE["memarchitecturespec"]
    assert spec.number_of_banks == arch["nbrOfBanks"]
    assert spec.number_of_rows == arch["nbrOfRows"]
    assert spec.number_of_columns == arch["nbrOfColumns"]
    assert spec.burst_length == arch["burstLength"]
    assert spec.data_rate == arch["dataRate"]
    assert spec.bit_width == arch["width"]
    assert spec.memory_id == SAMPLE["memoryId"]
    assert spec.memory_type == SAMPLE["memoryType"]
    assert spec.precharge_offset_rd == 0
    assert spec.precharge_offset_wr == 0


def test_from_json_missing_field():
    doc = _doc()
    del doc["memarchitecturespec"]["nbrOfRows"]
    with pytest.raises(ValueError, match="nbrOfRows"):
        MemSpec.from_json(doc)


def test_from_json_missing_section():
    doc = _doc()
    del doc["memarchitecturespec"]
    with pytest.raises(ValueError, match="nbrOfBanks"):
        MemSpec.from_json(doc)


def test_from_json_section_not_an_object():
    doc = _doc()
    doc["memarchitecturespec"] = 5
    with pytest.raises(ValueError):
        MemSpec.from_json(doc)


def test_from_json_wrong_string_type():
    doc = _doc()
    doc["memoryType"] = 4
    with pytest.raises(ValueError, match="memoryType"):
        MemSpec.from_json(doc)


def test_time_to_completion_without_timing():
    spec = MemSpec(burst_length=8, data_rate=2)
    assert spec.time_to_completion("ACT") == 0
    assert spec.time_to_completion("pre") == 0
    assert spec.time_to_completion("REFA") == 0
    assert spec.time_to_completion("RD") == 4
    assert spec.time_to_completion("RD") == spec.time_to_completion("WR")


def test_time_to_completion_rejects_non_command():
    with pytest.raises(TypeError):
        MemSpec(burst_length=8, data_rate=2).time_to_completion(3)