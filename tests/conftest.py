import pytest
from solders.pubkey import Pubkey

from kitchen.settings import ProgramConfig, Settings
from kitchen.tx_builder import RecipeInstructionBuilder

PAYER = "4PYfccDjZpjthkDkKPGQHEZXtSooRwgHCQJTig4myc7x"
MINT = "4o5wmhvHtF8JuauJgrzWpR6dyCNQJn9MYwCHNUhBXxve"


def mint_of(byte: int) -> str:
    return str(Pubkey(bytes([byte]) * 32))


@pytest.fixture
def config() -> ProgramConfig:
    return ProgramConfig.from_settings(Settings(_env_file=None))


@pytest.fixture
def builder(config) -> RecipeInstructionBuilder:
    return RecipeInstructionBuilder(config)


@pytest.fixture
def recipe_data() -> dict:
    return {
        "seeds": [{"mint": MINT, "amount_u64": 100}],
        "salt": "random-salt",
        "metadataCid": "some-metadata-cid",
        "name": "Test Recipe",
        "symbol": "TST",
    }


@pytest.fixture
def usage_data() -> dict:
    return {
        "pda": "some-public-key",
        "seeds": [
            {"mint": mint_of(9), "amount_u64": 5},
            {"mint": mint_of(3), "amount_u64": 7},
        ],
        "seedSalt": "salty",
        "qty_requested": "1.5",
    }
