"""AT command digesting, ingress and blocking and async clients for modems."""

__version__ = "0.1.0"

__all__ = [
    "asynch",
    "blocking",
    "config",
    "digest",
    "error_parse",
    "errors",
    "helpers",
    "ingress",
    "lengths",
    "responses",
    "results",
    "scan",
]