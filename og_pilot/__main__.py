#!/usr/bin/env python3
"""Command line entry point: python -m og_pilot --title "Hello" [--json]"""

import argparse
import asyncio
import json
import logging
import sys

from . import Client, Configuration, OgPilotError

logger = logging.getLogger("og_pilot")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Request an image from the OG Pilot API")
    parser.add_argument("--title", required=True, help="Image title")
    parser.add_argument("--template", help="Template name")
    parser.add_argument("--path", help="Page path the image belongs to")
    parser.add_argument("--param", action="append", default=[], metavar="KEY=VALUE",
                        help="Extra claim, may be repeated")
    parser.add_argument("--iat", type=float, help="Issued-at, seconds or milliseconds")
    parser.add_argument("--json", action="store_true", help="Print the JSON body instead of the image URL")
    parser.add_argument("--base-url", help="Override the API origin")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_params(args):
    params = {"title": args.title}
    if args.template:
        params["template"] = args.template
    if args.path:
        params["path"] = args.path
    for item in args.param:
        key, sep, value = item.partition("=")
        if not sep:
            raise SystemExit(f"Invalid --param {item!r}, expected KEY=VALUE")
        params[key] = value
    return params


async def run(args) -> int:
    client = Client(Configuration(base_url=args.base_url))
    try:
        result = await client.create_image(build_params(args), json=args.json, iat=args.iat)
    except OgPilotError as e:
        logger.error(f"Error creating image: {str(e)}")
        return 1

    print(json.dumps(result, indent=2) if args.json else result)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
