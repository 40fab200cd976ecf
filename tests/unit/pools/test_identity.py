"""Tests for deterministic pool identities."""

import pytest

from cpamm.constants import U64_MAX
from cpamm.pools import derive_lp_share_id, derive_pool_id
from tests.helpers import ASSET_X, ASSET_Y


class TestDerivePoolId:
    def test_deterministic(self):
        assert derive_pool_id(1, ASSET_X, ASSET_Y) == derive_pool_id(1, ASSET_X, ASSET_Y)

    def test_format(self):
        pool_id = derive_pool_id(1, ASSET_X, ASSET_Y)
        assert pool_id.startswith("0x")
        assert len(pool_id) == 66

    def test_seed_distinguishes(self):
        assert derive_pool_id(1, ASSET_X, ASSET_Y) != derive_pool_id(2, ASSET_X, ASSET_Y)

    def test_order_matters(self):
        assert derive_pool_id(1, ASSET_X, ASSET_Y) != derive_pool_id(1, ASSET_Y, ASSET_X)

    def test_length_prefix_prevents_ambiguity(self):
        """("ab", "c") and ("a", "bc") concatenate to the same bytes without prefixes."""
        assert derive_pool_id(1, "ab", "c") != derive_pool_id(1, "a", "bc")

    @pytest.mark.parametrize("seed", [-1, U64_MAX + 1])
    def test_seed_out_of_range(self, seed):
        with pytest.raises(ValueError):
            derive_pool_id(seed, ASSET_X, ASSET_Y)

    def test_max_seed(self):
        assert derive_pool_id(U64_MAX, ASSET_X, ASSET_Y).startswith("0x")


class TestDeriveLpShareId:
    def test_distinct_from_pool_and_assets(self):
        pool_id = derive_pool_id(1, ASSET_X, ASSET_Y)
        lp_share_id = derive_lp_share_id(pool_id)
        assert lp_share_id not in (pool_id, ASSET_X, ASSET_Y)
        assert lp_share_id == derive_lp_share_id(pool_id)
