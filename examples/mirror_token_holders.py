#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from hashscripts.mirror import MirrorNodeClient, Network


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="List the top holders of a token via the mirror node")
    p.add_argument("token", nargs="?", default="0.0.456858")
    p.add_argument("top", nargs="?", type=int, default=10)
    p.add_argument("network", nargs="?", default="mainnet", choices=[n.value for n in Network])
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    async with MirrorNodeClient(network=Network(args.network)) as client:
        info = await client.get_token_info(args.token)
        balances = await client.get_token_balances(args.token)

    ranked = sorted(balances.items(), key=lambda kv: kv[1], reverse=True)[: args.top]
    print(f"{info.name} ({info.symbol}) {info.token_id}: {len(balances)} holders")
    print(f"{'Account':20} | {'Balance':>24}")
    print("-" * 48)
    for account, raw in ranked:
        print(f"{account:20} | {info.scaled(raw):>24,}")


if __name__ == "__main__":
    asyncio.run(main())
