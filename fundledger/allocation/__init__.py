"""Income allocation package."""

from fundledger.allocation.allocator import compute_allocation, round_half_up

__all__ = ["compute_allocation", "round_half_up"]
