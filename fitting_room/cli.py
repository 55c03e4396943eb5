"""
Command line driver for the fitting room service.

Runs one operation against local image files and writes the generated image
to disk::

    fitting-room model photo.jpg -o model.png
    fitting-room try-on model.png jacket.jpg -o outfit.png
    fitting-room pose outfit.png "Side profile view" -o side.png
    fitting-room poses
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx
from google.genai import errors as genai_errors

from fitting_room.bootstrap.bootstrapper import bootstrap_fitting_room
from fitting_room.codecs.data_url import decode_data_url, format_data_url
from fitting_room.entities.image import LocalImageFile
from fitting_room.errors import FittingRoomError, UnsupportedImageError
from fitting_room.services.FittingRoomService.fitting_room_service_interface import (
    FittingRoomServiceInterface,
)
from fitting_room.services.FittingRoomService.prompts import POSE_INSTRUCTIONS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fitting-room",
        description="Generate fashion e-commerce images with Gemini.",
    )
    parser.add_argument(
        "--env",
        default="development",
        choices=["development", "staging", "production"],
    )
    parser.add_argument("--config-path", default="configuration")

    subparsers = parser.add_subparsers(dest="command", required=True)

    model = subparsers.add_parser("model", help="Turn a photo into a studio model photo")
    model.add_argument("photo", type=Path)
    model.add_argument("-o", "--output", type=Path, required=True)

    try_on = subparsers.add_parser("try-on", help="Dress a model image in a garment")
    try_on.add_argument("model_image", type=Path)
    try_on.add_argument("garment", type=Path)
    try_on.add_argument("-o", "--output", type=Path, required=True)

    pose = subparsers.add_parser("pose", help="Regenerate an image from a new perspective")
    pose.add_argument("image", type=Path)
    pose.add_argument("instruction")
    pose.add_argument("-o", "--output", type=Path, required=True)

    subparsers.add_parser("poses", help="List suggested pose instructions")

    return parser


async def read_data_url(path: Path) -> str:
    image = LocalImageFile(path)
    if not image.content_type or not image.content_type.startswith("image/"):
        raise UnsupportedImageError(image.content_type)
    return format_data_url(image.content_type, await image.read())


def write_data_url(data_url: str, output: Path) -> None:
    _, data = decode_data_url(data_url)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)


async def run(args: argparse.Namespace, service: FittingRoomServiceInterface) -> str:
    if args.command == "model":
        return await service.generate_model_image(LocalImageFile(args.photo))

    if args.command == "try-on":
        return await service.generate_virtual_try_on_image(
            await read_data_url(args.model_image), LocalImageFile(args.garment)
        )

    if args.command == "pose":
        return await service.generate_pose_variation(
            await read_data_url(args.image), args.instruction
        )

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "poses":
        for instruction in POSE_INSTRUCTIONS:
            print(instruction)
        return 0

    try:
        service = bootstrap_fitting_room(env=args.env, config_path=args.config_path)
        image_url = asyncio.run(run(args, service))
        write_data_url(image_url, args.output)
    except (FittingRoomError, genai_errors.APIError, httpx.HTTPError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(args.output)
    return 0
