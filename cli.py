#!/usr/bin/env python3
"""Command line access to the token validation engine. All output is JSON."""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from tokencheck.core.errors import TokenValidationError
from tokencheck.logging_config import setup_logging
from tokencheck.services import TokenValidationService, get_token_validation_service
from tokencheck.types import ValidationResult


def emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def dump(model) -> Dict[str, Any]:
    return model.model_dump(by_alias=True, mode="json")


def summarize(results: List[ValidationResult]) -> Dict[str, int]:
    valid = sum(1 for r in results if r.is_valid)
    return {"total": len(results), "valid": valid, "invalid": len(results) - valid}


def load_batch_file(path: str, default_network: Optional[str]) -> List[Any]:
    """Read ``[{"address": ..., "network": ...}]`` or a bare list of addresses."""
    with open(path, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    items = data.get("tokens", []) if isinstance(data, dict) else data
    requests = []
    for item in items:
        if isinstance(item, str):
            if not default_network:
                raise ValueError("--network is required when the batch file lists bare addresses")
            requests.append({"address": item, "network": default_network})
        elif isinstance(item, dict):
            requests.append({"address": item.get("address", ""), "network": item.get("network") or default_network or ""})
        else:
            # the service rejects it in its own slot
            requests.append(item)
    return requests


async def cli_validate(service: TokenValidationService, address: str, network: str) -> int:
    result = await service.validate(address, network)
    emit(dump(result))
    return 0 if result.is_valid else 1


async def cli_batch(service: TokenValidationService, args: argparse.Namespace) -> int:
    if args.file:
        requests = load_batch_file(args.file, args.network)
    else:
        if not args.network:
            raise ValueError("--network is required when addresses are given on the command line")
        requests = [{"address": address, "network": args.network} for address in args.addresses]

    if not requests:
        raise ValueError("No tokens to validate")

    results = await service.validate_batch(requests)
    emit({"results": [dump(r) for r in results], "summary": summarize(results)})
    return 0


async def cli_token_list(service: TokenValidationService, address: str, network: str) -> int:
    check = await service.check_token_list(address, network)
    emit(dump(check))
    return 0


async def cli_health(service: TokenValidationService, networks: List[str]) -> int:
    targets = networks or [n["network"] for n in service.supported_networks()]
    reports = await asyncio.gather(*(service.network_health(n) for n in targets))
    emit([dump(r) for r in reports])
    return 0 if all(r.healthy for r in reports) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Token address validation CLI")
    parser.add_argument("--log-level", help="Override LOG_LEVEL (e.g. DEBUG)")
    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser("validate", help="Validate one token address")
    validate_parser.add_argument("address", help="Contract or mint address")
    validate_parser.add_argument("network", help="Network (base, ethereum, base-testnet, solana, solana-devnet)")

    batch_parser = subparsers.add_parser("batch", help="Validate many token addresses")
    batch_parser.add_argument("addresses", nargs="*", help="Addresses on --network")
    batch_parser.add_argument("--network", help="Network for bare addresses")
    batch_parser.add_argument("--file", help="JSON file with a list of {address, network} objects")

    list_parser = subparsers.add_parser("token-list", help="Check published token lists for an address")
    list_parser.add_argument("address", help="Contract or mint address")
    list_parser.add_argument("network", help="Network")

    health_parser = subparsers.add_parser("health", help="Probe RPC providers")
    health_parser.add_argument("networks", nargs="*", help="Networks to probe (default: all)")

    subparsers.add_parser("networks", help="List supported networks and capabilities")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    setup_logging(args.log_level)
    service = get_token_validation_service()

    try:
        if args.command == "validate":
            return await cli_validate(service, args.address, args.network)
        if args.command == "batch":
            return await cli_batch(service, args)
        if args.command == "token-list":
            return await cli_token_list(service, args.address, args.network)
        if args.command == "health":
            return await cli_health(service, args.networks)
        if args.command == "networks":
            emit(service.supported_networks())
            return 0
    except TokenValidationError as e:
        emit({"error": e.kind.value, "message": e.message, "details": e.details})
        return 1
    except (ValueError, OSError) as e:
        emit({"error": "InvalidInput", "message": str(e)})
        return 2

    parser.print_help()
    return 2


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
