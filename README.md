# dramspec

`dramspec` reads DRAM memory specifications written as JSON and turns them
into typed Python dataclasses holding the architecture, timing and
current/voltage parameters of a device. It supports DDR4, DDR5, LPDDR4 and
LPDDR5.

## Installation

```
pip install dramspec
```

The package has no runtime dependencies.

## Usage

A specification is a JSON object with `memoryId`, `memoryType` and the
sections `memarchitecturespec`, `memtimingspec` and `mempowerspec`, plus an
optional `bankwisespec` and, for DDR4 and DDR5, an optional `RefreshMode`.

```python
import json

from dramspec.ddr5 import DDR5VoltageDomain, MemSpecDDR5

with open("ddr5.json") as f:
    data = json.load(f)

spec = MemSpecDDR5.from_json(data["memspec"])

print(spec.memory_id, spec.number_of_banks, spec.banks_per_group)
print(spec.mem_timing_spec.t_ck, spec.mem_timing_spec.t_rfc)
print(spec.mem_power_spec[DDR5VoltageDomain.VDD].i_xx0)
print(spec.bw_params.bw_power_fact_rho)
print(spec.precharge_offset_rd, spec.precharge_offset_wr)
```

Each standard has its own module:

| Module            | Specification   | Timing             | Power             | Bank-wise              |
|-------------------|-----------------|--------------------|-------------------|------------------------|
| `dramspec.ddr4`   | `MemSpecDDR4`   | `DDR4TimingSpec`   | `DDR4PowerSpec`   | `DDR4BankWiseParams`   |
| `dramspec.ddr5`   | `MemSpecDDR5`   | `DDR5TimingSpec`   | `DDR5PowerSpec`   | `DDR5BankWiseParams`   |
| `dramspec.lpddr4` | `MemSpecLPDDR4` | `LPDDR4TimingSpec` | `LPDDR4PowerSpec` | `LPDDR4BankWiseParams` |
| `dramspec.lpddr5` | `MemSpecLPDDR5` | `LPDDR5TimingSpec` | `LPDDR5PowerSpec` | `LPDDR5BankWiseParams` |

All specification classes derive from `dramspec.memspec.MemSpec` and are
keyword-only dataclasses, so they can also be built by hand with only the
fields you need. `mem_power_spec` is a list indexed by the module's voltage
domain enum (`DDR4VoltageDomain`, `DDR5VoltageDomain`, `LPDDR4VoltageDomain`,
`LPDDR5VoltageDomain`): DDR4 and DDR5 fill the VDD and VPP domains, LPDDR4 and
LPDDR5 fill VDD only. Currents of the VPP domain are optional and default to
`0.0`; `iBeta` defaults to the domain's IDD0/IPP0 current and the bank-wise
factor `factRho` defaults to `1`.

For DDR4, `RefreshMode` 1 reads `idd5B`/`ipp5B`/`RFC1`, mode 2 reads
`idd5F2`/`ipp5F2`/`RFC2` and any other mode reads `idd5F4`/`ipp5F4`/`RFC4`.
For DDR5, mode 1 reads `idd5B`/`ipp5B`/`RFC1` and any other mode reads
`idd5F`/`ipp5F`/`RFC2`.

### Command completion time

`time_to_completion(command)` takes a command name such as `"ACT"` or any
object with a `name` attribute (for example an enum member) and returns the
number of clock cycles until it completes: `tRCD` for `ACT`, `tRL` plus
`burst_length // data_rate` for `RD`, `tWL` plus the same for `WR`, `tRFC`
for `REFA`, `tRP` for `PRE` and `PREA`, and `0` for anything else. The
DDR4, DDR5 and LPDDR5 readers do not read `RL`, so `t_rl` stays `0` for
them unless set by hand.

### Validation

Missing required parameters and values of the wrong type raise `ValueError`
with a message naming the offending parameter. The helpers in
`dramspec.memspec` can also be used directly on single values:

- `parse_uint(obj, name)` – a required non-negative integer
- `parse_uint_with_default(obj, name, default)` – a positive number, or `default` when missing
- `parse_udouble(obj, name)` – a required positive number
- `parse_udouble_with_default(obj, name)` – a non-negative number, or `0.0` when missing
- `parse_string(obj, name)` / `parse_string_with_default(obj, name, default)`
- `parse_bool(obj, name)` / `parse_bool_with_default(obj, name)` (the latter defaults to `False`)

`None`, an empty object and an empty list all count as missing.

### LPDDR4 partial-array self refresh

When `bankwisespec.hasPASR` is true, `pasrMode` (see `PasrMode`, 0–7) selects
which banks stay refreshed in self refresh; unknown modes keep the full array.

```python
from dramspec.lpddr4 import MemSpecLPDDR4

spec = MemSpecLPDDR4.from_json(data["memspec"])
spec.bw_params.active_banks
spec.bw_params.is_bank_active_in_pasr(3)
```

## What this package does not do

`dramspec` only reads and holds device specifications. It does not simulate
command traces, count bank states or cycles, or compute energy and power,
and it has no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```