"""isobench: run Go package benchmarks in isolation, one by one."""

__version__ = "0.1.0"
