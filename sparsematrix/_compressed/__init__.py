from .compressed import CCS, CRS

__all__ = ["CRS", "CCS"]
