from typing import Iterable, List

from kitchen.models import Seed


def sort_seeds(seeds: Iterable[Seed]) -> List[Seed]:
    """Order seeds by the raw bytes of their mint.

    The recipe PDA hashes seeds in this order, so any permutation of the same
    seed set derives the same address. ``sorted`` is stable, duplicates keep
    their input order.
    """
    return sorted(seeds, key=lambda seed: bytes(seed.mint_pubkey()))
