[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "atat"
version = "0.1.0"
description = "AT command digester, ingress and clients for serial modems"
requires-python = ">=3.10"
dependencies = []
keywords = ["at-commands", "modem", "gsm", "serial", "embedded", "urc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Communications :: Telephony",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["atat"]

[tool.pytest.ini_options]
addopts = "-ra"
