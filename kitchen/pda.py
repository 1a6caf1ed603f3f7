import hashlib
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Tuple

from solders.pubkey import Pubkey

from kitchen.encoding import encode_fixed_salt, encode_u64
from kitchen.errors import DerivationExhaustion
from kitchen.models import Seed
from kitchen.seeds import sort_seeds

logger = logging.getLogger("kitchen")

METADATA_SEED = b"metadata"
CONFIG_SEED = b"config"
MAX_SEED_LEN = 32
MAX_SEEDS = 16  # including the bump


@dataclass(frozen=True)
class DerivedAddress:
    address: Pubkey
    bump: int
    hash: bytes


@lru_cache(maxsize=1024)
def _find_program_address(seeds: Tuple[bytes, ...], program_id: Pubkey) -> Tuple[Pubkey, int]:
    for bump in range(255, -1, -1):
        try:
            address = Pubkey.create_program_address([*seeds, bytes([bump])], program_id)
        except ValueError:
            # On-curve result for this bump; try the next one down.
            continue
        return address, bump
    raise DerivationExhaustion(f"No viable bump seed for program {program_id}")


def find_program_address(seeds: Iterable[bytes], program_id: Pubkey) -> Tuple[Pubkey, int]:
    """Try bumps 255..0 like ``Pubkey.find_program_address``, but fail with
    :class:`DerivationExhaustion` instead of a runtime panic."""
    seeds = tuple(bytes(s) for s in seeds)
    if len(seeds) + 1 > MAX_SEEDS:
        raise ValueError(f"Too many PDA seeds: {len(seeds)} (max {MAX_SEEDS - 1} plus bump)")
    for seed in seeds:
        if len(seed) > MAX_SEED_LEN:
            raise ValueError(f"PDA seed longer than {MAX_SEED_LEN} bytes: {len(seed)}")
    return _find_program_address(seeds, program_id)


def recipe_seed_bytes(seeds: Iterable[Seed], salt: str) -> bytes:
    chunks = []
    for seed in sort_seeds(seeds):
        chunks.append(bytes(seed.mint_pubkey()))
        chunks.append(encode_u64(seed.amount_u64))
    chunks.append(encode_fixed_salt(salt))
    return b"".join(chunks)


def derive_recipe_address(seeds: Iterable[Seed], salt: str, program_id: Pubkey) -> DerivedAddress:
    """Derive the recipe PDA for a seed set and salt.

    The sha256 digest of ``mint || amount_u64_le`` for every seed in canonical
    order, followed by the 32-byte salt, is the only seed of the PDA.
    """
    digest = hashlib.sha256(recipe_seed_bytes(seeds, salt)).digest()
    address, bump = find_program_address([digest], program_id)
    logger.debug("recipe_pda_derived pda=%s bump=%s hash=%s", address, bump, digest.hex())
    return DerivedAddress(address=address, bump=bump, hash=digest)


def metadata_address(mint: Pubkey, metadata_program_id: Pubkey) -> Pubkey:
    return find_program_address([METADATA_SEED, bytes(metadata_program_id), bytes(mint)], metadata_program_id)[0]


def config_address(program_id: Pubkey) -> Pubkey:
    return find_program_address([CONFIG_SEED], program_id)[0]
