"""
Command line entry point for the Azure helpers.
"""

import argparse

from .azure_utils import find_storage_account_resource_group, get_blob_service_client, get_master_key
from .credentials import resolve_credential
from .logging_utils import GRN, RED, RST, logger, setup_logging
from .resources import STORAGE_ACCOUNTS, ResourceKind, find_resource_group
from .subscriptions import resolve_subscription_id


def run(args) -> str:
    """Run the selected sub-command and return its single-line result."""
    if args.command == "storage-key":
        client = get_blob_service_client(args.account, timeout=args.timeout)
        return client.credential.account_key
    if args.command == "master-key":
        return get_master_key(args.app, timeout=args.timeout)
    if args.command == "resource-group" and args.rest:
        if args.kind != STORAGE_ACCOUNTS:
            raise ValueError("--rest only supports storage accounts")
        return find_storage_account_resource_group(args.name, timeout=args.timeout)

    credential = resolve_credential(timeout=args.timeout)
    subscription_id = resolve_subscription_id(credential, timeout=args.timeout)
    if args.command == "subscription":
        return subscription_id
    return find_resource_group(credential, subscription_id, args.kind, args.name, timeout=args.timeout)


def build_parser():
    parser = argparse.ArgumentParser(description="Resolve Azure subscriptions, resource groups and keys")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging", default=False
    )
    parser.add_argument(
        "-t", "--timeout", type=int, help="Seconds allowed for each Azure call", default=None
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("subscription", help="Print the subscription ID in use")

    rg_parser = subparsers.add_parser("resource-group", help="Print the resource group of a resource")
    rg_parser.add_argument(
        "kind", type=ResourceKind.parse, help="storage, webapp or a Namespace/type such as Microsoft.KeyVault/vaults"
    )
    rg_parser.add_argument("name", help="The resource name (case-sensitive)")
    rg_parser.add_argument(
        "--rest", action="store_true", help="Look up storage accounts through the REST API with a bearer token"
    )

    key_parser = subparsers.add_parser("storage-key", help="Print the primary key of a storage account")
    key_parser.add_argument("account", help="The storage account name")

    master_parser = subparsers.add_parser("master-key", help="Print the master host key of a web app")
    master_parser.add_argument("app", help="The web app name")
    return parser


def main(argv=None):
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        result = run(args)
    except Exception as e:
        logger.error(f"{RED}Lookup failed: {str(e)}{RST}")
        exit(1)

    logger.debug(f"{GRN}Lookup succeeded{RST}")
    print(result)


if __name__ == "__main__":
    main()
