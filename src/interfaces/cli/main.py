"""
Command line access to the herd records.

Usage:
  herdbook list
  herdbook show ANIMAL_ID
  herdbook upsert --tag A-001 --type CALF --sex FEMALE [--id ID --version N] [--breed Angus ...]

The storage backend comes from the environment (see src/config/settings.py):
PLATFORM=web or STORAGE_BACKEND=blob selects the JSON blob store, anything
else the SQLite database at DATABASE_URL.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from typing import TextIO

from src.application.errors import AppError, NotFound, ValidationError
from src.application.interfaces.repositories.animals import AnimalRepository
from src.application.use_cases.animals import get_animal, list_animals, upsert_animal
from src.config.logging_config import configure_logging
from src.config.settings import get_settings
from src.domain.models.animal import NUMERIC_FIELDS, OPTIONAL_FIELDS, Animal
from src.infrastructure.repos.animal_document import AnimalDocument
from src.infrastructure.repos.factory import get_animal_repository
from src.utils.datetime_tz import age_label, format_day_date

LIST_COLUMNS = ("Tag", "Type", "Sex", "Breed", "Origin", "Birth", "Age", "Weight", "Sire", "Dam")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="herdbook", description="Livestock record keeping")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List animals, most recently changed first")

    show = commands.add_parser("show", help="Print one animal as JSON")
    show.add_argument("animal_id")

    upsert = commands.add_parser("upsert", help="Create or replace an animal")
    upsert.add_argument("--id", help="Existing animal id (omit to create)")
    upsert.add_argument("--version", type=int, help="Version last read, for conflict detection")
    upsert.add_argument("--tag", required=True)
    upsert.add_argument("--type", required=True, help="CALF, YEARLING, BREEDING_FEMALE, FEEDLOT")
    upsert.add_argument("--sex", required=True, help="MALE or FEMALE")
    for name in OPTIONAL_FIELDS:
        upsert.add_argument(
            f"--{name.replace('_', '-')}",
            dest=name,
            type=float if name in NUMERIC_FIELDS else str,
        )
    return parser


def _row(animal: Animal) -> tuple[str, ...]:
    weight = f"{animal.weight_kg:g} kg" if animal.weight_kg is not None else "-"
    return (
        animal.tag,
        animal.type.value if animal.type else "-",
        animal.sex.value if animal.sex else "-",
        animal.breed or "-",
        animal.origin or "-",
        format_day_date(animal.birth_date),
        age_label(animal.birth_date),
        weight,
        animal.sire_tag or "-",
        animal.dam_tag or "-",
    )


def render_table(animals: Sequence[Animal]) -> str:
    rows = [LIST_COLUMNS, *(_row(animal) for animal in animals)]
    widths = [max(len(row[i]) for row in rows) for i in range(len(LIST_COLUMNS))]
    return "\n".join(
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows
    )


def render_json(animal: Animal) -> str:
    return AnimalDocument.from_domain(animal).model_dump_json(
        by_alias=True, exclude_none=True, indent=2
    )


async def run(args: argparse.Namespace, repo: AnimalRepository, out: TextIO) -> None:
    if args.command == "list":
        animals = await list_animals.execute(repo)
        if not animals:
            print("No animals recorded yet.", file=out)
            return
        print(render_table(animals), file=out)
    elif args.command == "show":
        animal = await get_animal.execute(repo, args.animal_id)
        if animal is None:
            raise NotFound(f"Animal {args.animal_id} not found")
        print(render_json(animal), file=out)
    elif args.command == "upsert":
        payload = upsert_animal.UpsertAnimalInput(
            id=args.id,
            version=args.version,
            tag=args.tag,
            type=args.type,
            sex=args.sex,
            **{name: getattr(args, name) for name in OPTIONAL_FIELDS},
        )
        animal = await upsert_animal.execute(repo, payload)
        print(render_json(animal), file=out)


async def _main(args: argparse.Namespace, repo: AnimalRepository) -> None:
    try:
        await run(args, repo, sys.stdout)
    finally:
        await repo.close()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    try:
        asyncio.run(_main(args, get_animal_repository()))
    except ValidationError as exc:
        print(f"error [{exc.code}]: {exc.message}", file=sys.stderr)
        return 2
    except AppError as exc:
        print(f"error [{exc.code}]: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
