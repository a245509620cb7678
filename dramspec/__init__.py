"""Typed DRAM memory specifications for DDR4, DDR5, LPDDR4 and LPDDR5, read from JSON."""

__version__ = "0.1.0"
__all__ = ["memspec", "ddr4", "ddr5", "lpddr4", "lpddr5"]