from .data_backend import DataBackend, Domain, RawRecord

__all__ = [
    "DataBackend",
    "Domain",
    "RawRecord",
]
