[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dramspec"
version = "0.1.0"
description = "Parse DRAM memory specifications (DDR4, DDR5, LPDDR4, LPDDR5) from JSON into typed timing and power parameters."
requires-python = ">=3.10"
dependencies = []
keywords = ["dram", "memory", "memspec", "ddr4", "ddr5", "lpddr4", "lpddr5", "power", "timing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dramspec"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
