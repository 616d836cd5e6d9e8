"""
MCP server exposing transaction lookup via the Etherscan V2 proxy.
"""

import argparse
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .config import load_config, network_label, resolve_chain_id
from .context import CallContext
from .service import TransactionService

server = FastMCP(
    name="etherscan-tx",
    instructions="Resolve Ethereum transaction hashes into human-readable records via Etherscan API V2.",
)

_service: Optional[TransactionService] = None


def _get_service() -> TransactionService:
    global _service
    if _service is None:
        cfg = load_config()
        _service = TransactionService(cfg)
    return _service


@server.tool(
    name="get_transaction",
    title="Get Transaction Detail",
    description="Resolve a transaction hash into status, value, fees, confirmations and timestamp.",
)
def get_transaction(tx_hash: str, network: Optional[str] = None, timeout: Optional[float] = None) -> dict:
    svc = _get_service()
    ctx = CallContext.with_timeout(timeout) if timeout else CallContext.background()
    return svc.resolve_transaction(ctx, tx_hash, network).to_dict()


@server.tool(
    name="set_network",
    title="Switch Default Network",
    description="Switch the default network used by get_transaction (mainnet, sepolia or numeric chain id).",
)
def set_network(network: str) -> dict:
    svc = _get_service()
    svc.session.set_chain_id(resolve_chain_id(network))
    chain_id = svc.session.chain_id
    return {"chain_id": chain_id, "network": network_label(chain_id)}


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run the Etherscan transaction MCP server.")
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http"],
        default="stdio",
        help="stdio for local MCP clients, streamable-http to serve over the network.",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind host for streamable-http.")
    parser.add_argument("--port", type=int, default=8000, help="Bind port for streamable-http.")
    args = parser.parse_args(argv)

    if args.transport == "streamable-http":
        server.settings.host = args.host
        server.settings.port = args.port
    server.run(transport=args.transport)


if __name__ == "__main__":
    main()
