"""Bag-of-cells codecs for TON cross-chain relayer messages and account health checks."""

__version__ = "0.1.0"