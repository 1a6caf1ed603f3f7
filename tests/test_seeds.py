from kitchen.models import Seed
from kitchen.seeds import sort_seeds
from tests.conftest import mint_of


def seed(byte, amount=1):
    return Seed(mint=mint_of(byte), amount_u64=amount)


class TestSortSeeds:
    def test_orders_by_raw_mint_bytes(self):
        seeds = [seed(3), seed(1), seed(2)]
        assert [s.mint for s in sort_seeds(seeds)] == [mint_of(1), mint_of(2), mint_of(3)]

    def test_byte_order_not_base58_text_order(self):
        # "1111..." encodes zero bytes, so it must come first even though
        # other base58 strings can sort before it as text.
        low = Seed(mint="11111111111111111111111111111111", amount_u64=1)
        high = seed(0xFF)
        assert sort_seeds([high, low]) == [low, high]

    def test_duplicates_keep_input_order(self):
        first, second = seed(5, amount=10), seed(5, amount=20)
        result = sort_seeds([second, seed(9), first])
        assert [s.amount_u64 for s in result] == [20, 10, 1]

    def test_idempotent(self):
        seeds = [seed(7), seed(2), seed(4), seed(2, amount=3)]
        once = sort_seeds(seeds)
        assert sort_seeds(once) == once

    def test_returns_new_list(self):
        seeds = [seed(2), seed(1)]
        result = sort_seeds(seeds)
        assert result is not seeds
        assert [s.mint for s in seeds] == [mint_of(2), mint_of(1)]
