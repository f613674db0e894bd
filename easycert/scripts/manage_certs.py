#!/usr/bin/env python3
"""Generate and handle certificates of a small certificate authority."""

import argparse
import sys
from pathlib import Path

from easycert.lib.config import CA_NAME, EasyCertConfig, Layout, default_root, validate_rsa_size
from easycert.lib.emitter import LANGUAGES
from easycert.lib.errors import EasyCertError
from easycert.lib.logging_config import LOGGER, set_verbose
from easycert.lib.manager import CertManager
from easycert.lib.models import ArtifactKind
from easycert.lib.openssl import OpenSSL

EPILOG = """\
NAME is the name of a file to look for in the certificates directory, while
FILENAME (starting with '.' or '/') is the path of a certificate or key file.

Directory:         --new [--ca --rsa-size N --years N]
Requests:          --req [--sign --combine --rsa-size N --years N --host H,...] NAME
                   --sign [--combine --years N] NAME
Language bindings: --lang {go,python} --server-cert NAME [--ca-cert NAME|FILENAME]
Check:             --check [--cert|--key] NAME|FILENAME
Information:       --cat [--cert|--key] NAME|FILENAME
                   --info [--end-date --hash --issuer --name] NAME|FILENAME
                   --info --full NAME|FILENAME
List:              --list-certs --list-requests
"""

INFO_FLAGS = {
    "end_date": "--end-date",
    "hash": "--hash",
    "issuer": "--issuer",
    "name": "--name",
}


def rsa_size(value: str) -> int:
    """argparse type for --rsa-size."""
    try:
        return validate_rsa_size(int(value))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def positive_int(value: str) -> int:
    """argparse type for --years."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from e
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="easycert",
        description="Generate and handle certificates",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("target", nargs="?", metavar="NAME|FILENAME")

    modes = parser.add_argument_group("operations")
    modes.add_argument(
        "--new",
        action="store_true",
        help="create the directory structure to handle the certificates",
    )
    modes.add_argument("--ca", action="store_true", help="create the certification authority")
    modes.add_argument("--req", action="store_true", help="create a certificate request")
    modes.add_argument("--sign", action="store_true", help="sign a certificate request")
    modes.add_argument(
        "--lang",
        choices=sorted(LANGUAGES),
        help="generate source files embedding a server certificate",
    )
    modes.add_argument("--check", action="store_true", help="check a certificate or key")
    modes.add_argument("--cat", action="store_true", help="show certificate or key")
    modes.add_argument(
        "--info", action="store_true", help="print out information of the certificate"
    )
    modes.add_argument(
        "--list-certs", action="store_true", help="list the certificates built"
    )
    modes.add_argument(
        "--list-requests", action="store_true", help="list the certificate requests built"
    )

    options = parser.add_argument_group("options")
    options.add_argument(
        "--root",
        type=Path,
        default=None,
        help="directory holding the certificates (default: $EASYCERT_ROOT or ~/.cert)",
    )
    options.add_argument(
        "--rsa-size",
        type=rsa_size,
        default=2048,
        help="size in bits for the RSA key (default: 2048)",
    )
    options.add_argument(
        "--years",
        type=positive_int,
        default=None,
        help="number of years a generated certificate is valid (default: 1, or 10 with --ca)",
    )
    options.add_argument(
        "--host", default="", help="comma-separated hostnames and IPs to generate a certificate for"
    )
    options.add_argument(
        "--combine",
        action="store_true",
        help="with --sign, also write certificate and key into NAME.pem",
    )
    options.add_argument(
        "--ca-cert", default=CA_NAME, help="name or file of CA's certificate (default: ca)"
    )
    options.add_argument("--server-cert", default="", help="name of server's certificate")
    options.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="directory for generated source files (default: current directory)",
    )

    kind = options.add_mutually_exclusive_group()
    kind.add_argument("--cert", action="store_true", help="the file is a certificate")
    kind.add_argument("--key", action="store_true", help="the file is a private key")

    info = parser.add_argument_group("information")
    info.add_argument("--end-date", action="store_true", help="print the date until it is valid")
    info.add_argument("--hash", action="store_true", help="print the hash value")
    info.add_argument("--issuer", action="store_true", help="print the issuer")
    info.add_argument("--name", action="store_true", help="print the subject")
    info.add_argument("--full", action="store_true", help="print extensive information")

    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def _mode_groups(args: argparse.Namespace) -> list[str]:
    """Return the operation groups selected; flags inside a group combine."""
    groups = {
        "directory": args.new or args.ca,
        "request": args.req or args.sign,
        "lang": args.lang is not None,
        "check": args.check,
        "cat": args.cat,
        "info": args.info,
        "list": args.list_certs or args.list_requests,
    }
    return [group for group, selected in groups.items() if selected]


def validate_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> str:
    """Reject invalid flag combinations, returning the selected operation group.

    parser.error() exits with status 2.
    """
    groups = _mode_groups(args)
    if not groups:
        parser.error("no operation given")
    if len(groups) > 1:
        parser.error(f"operations cannot be combined: {', '.join(groups)}")
    group = groups[0]

    if group in ("request", "check", "cat", "info") and not args.target:
        parser.error("missing required NAME or FILENAME argument")
    if group in ("directory", "lang", "list") and args.target:
        parser.error(f"unexpected argument: {args.target}")
    if group == "lang" and (not args.server_cert or not args.ca_cert):
        parser.error("missing required parameter in --ca-cert or --server-cert")

    selected_info = [flag for dest, flag in INFO_FLAGS.items() if getattr(args, dest)]
    if group != "info" and (selected_info or args.full):
        parser.error("--end-date, --hash, --issuer, --name and --full require --info")
    if group == "info":
        if args.full and selected_info:
            parser.error("--full cannot be combined with " + ", ".join(selected_info))
        if not args.full and not selected_info:
            parser.error("--info requires --full or at least one of " + ", ".join(INFO_FLAGS.values()))

    if (args.cert or args.key) and group not in ("check", "cat"):
        parser.error("--cert and --key apply only to --check and --cat")
    if args.host and not args.req:
        parser.error("--host requires --req")
    if args.combine and not args.sign:
        parser.error("--combine requires --sign")

    return group


def _write_names(names: list[str]) -> None:
    if names:
        sys.stdout.write("\t".join(names) + "\n")


def run(args: argparse.Namespace, group: str, manager: CertManager) -> None:
    """Dispatch the validated operation to the manager."""
    kind = ArtifactKind.KEY if args.key else ArtifactKind.CERT

    if group == "list":
        if args.list_certs:
            _write_names(manager.list_certificates())
        if args.list_requests:
            _write_names(manager.list_requests())

    elif group == "check":
        result = manager.check(args.target, kind)
        LOGGER.info("Check passed: %s", result)

    elif group == "cat":
        sys.stdout.write(manager.cat(args.target, kind))

    elif group == "info":
        fields = [dest for dest in INFO_FLAGS if getattr(args, dest)]
        sys.stdout.write(manager.info(args.target, fields=fields, full=args.full))

    elif group == "request":
        if args.req:
            hosts = [h.strip() for h in args.host.split(",") if h.strip()]
            manager.create_request(args.target, hosts=hosts)
        if args.sign:
            manager.sign_request(args.target, years=args.years, combine=args.combine)

    elif group == "lang":
        manager.emit_bindings(
            args.server_cert,
            output_dir=args.output_dir,
            ca_cert=args.ca_cert,
            language=args.lang,
        )

    elif group == "directory":
        if args.new:
            manager.init_layout()
        if args.ca:
            manager.build_ca(years=args.years)


def main(argv: list[str] | None = None) -> int:
    """Run easycert.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    group = validate_args(parser, args)
    set_verbose(args.verbose)

    try:
        root = args.root if args.root is not None else default_root()
        config = EasyCertConfig(rsa_size=args.rsa_size)
        manager = CertManager(Layout.from_root(root), config, OpenSSL.locate(config.digest))

        run(args, group, manager)
        return 0

    except FileExistsError as e:
        LOGGER.error("Refusing to overwrite: %s", e)
        return 1
    except FileNotFoundError as e:
        LOGGER.error("File not found: %s", e)
        return 1
    except (EasyCertError, OSError, ValueError) as e:
        LOGGER.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
