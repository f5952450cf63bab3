#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from hashscripts.mirror import CancellationToken, MirrorNodeClient, Network


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Print the movement history of one NFT serial")
    p.add_argument("token", nargs="?", default="0.0.1350444")
    p.add_argument("serial", nargs="?", type=int, default=1)
    p.add_argument("timeout", nargs="?", type=float, default=60.0, help="Give up after N seconds")
    p.add_argument("network", nargs="?", default="mainnet", choices=[n.value for n in Network])
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    token = CancellationToken()
    loop = asyncio.get_running_loop()
    loop.call_later(args.timeout, token.cancel, "timeout")

    async with MirrorNodeClient(network=Network(args.network), cancel_token=token) as client:
        history = await client.get_nft_transactions(args.token, args.serial)

    print(f"{args.token}@{args.serial}: {len(history)} movements:")
    print(f"{'Time':25} | {'Type':20} | {'From':14} -> {'To':14}")
    print("-" * 82)
    for move in history:
        print(
            f"{move.consensus_timestamp.isoformat():25} | {move.type:20} | "
            f"{move.sender_account_id or '-':14} -> {move.receiver_account_id or '-':14}"
        )


if __name__ == "__main__":
    asyncio.run(main())
