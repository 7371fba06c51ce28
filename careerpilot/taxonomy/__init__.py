from functools import lru_cache

from .signal_terms import SignalTaxonomy


@lru_cache(maxsize=1)
def get_signal_taxonomy() -> SignalTaxonomy:
    return SignalTaxonomy()


__all__ = ["SignalTaxonomy", "get_signal_taxonomy"]
