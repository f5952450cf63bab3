"""Integration tests against the public testnet mirror node."""

import os

import pytest

from hashscripts.mirror import FetchPolicy, MirrorNodeClient, Network, ProtocolError
from hashscripts.mirror.api import endpoints

pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_MIRROR_NETWORK_TESTS") != "1",
    reason="Requires network access to the testnet mirror node",
)


class TestTestnetMirror:
    """Test live traversals on testnet."""

    @pytest.mark.asyncio
    async def test_token_listing_follows_cursor(self):
        """Test a tiny page size walks real cursors until the page cap trips."""
        seen = []
        async with MirrorNodeClient(
            network=Network.TESTNET, policy=FetchPolicy(timeout=10.0)
        ) as client:
            with pytest.raises(ProtocolError, match="exceeded 3 pages"):
                await client.iterate(
                    endpoints.TOKENS,
                    {"limit": 2},
                    fold=lambda item, acc: acc.append(item["token_id"]),
                    initial=seen,
                    max_pages=3,
                )
        assert len(seen) == 6
        assert len(set(seen)) == 6

    @pytest.mark.asyncio
    async def test_token_info_round_trip(self):
        """Test the first listed token can be looked up by id."""
        async with MirrorNodeClient(network=Network.TESTNET) as client:
            data = (await client.fetch_json("/api/v1/tokens?limit=1")).unwrap()
            token_id = data["tokens"][0]["token_id"]
            info = await client.get_token_info(token_id)
        assert info.token_id == token_id
