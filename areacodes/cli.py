"""
areacodes CLI.

Commands:
  - lookup: find records by area code (or by E.164 prefix with --e164)
  - search: free-text search over city/region/notes
  - suggest: autocomplete by code or place-name prefix
  - codes: list one country's area codes
  - countries: list the available countries
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import click

from areacodes import __version__
from areacodes.config import AreaCodeSettings, load_settings
from areacodes.core.countries import country_name, display_name, flag, subtitle
from areacodes.core.errors import AreaCodeError
from areacodes.core.record import AreaCode
from areacodes.logging_config import configure_logging
from areacodes.service import AreaCodeService


T = TypeVar("T")

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config path.",
)
json_option = click.option("--json", "as_json", is_flag=True, help="Print JSON to stdout.")


def _settings(config_path: Path | None) -> AreaCodeSettings:
    settings = load_settings(yaml_path=config_path)
    configure_logging(level=settings.log_level, json_logging=settings.json_logging)
    return settings


def _run(settings: AreaCodeSettings, query: Callable[[AreaCodeService], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with AreaCodeService.from_settings(settings) as service:
            return await query(service)

    try:
        return asyncio.run(runner())
    except AreaCodeError as exc:
        raise click.ClickException(str(exc)) from exc


def _human_text(records: list[AreaCode]) -> str:
    if not records:
        return "No matching area codes.\n"
    lines: list[str] = []
    for r in records:
        lines.append(display_name(r))
        lines.append(f"  {subtitle(r)}")
        if r.notes:
            lines.append(f"  {r.notes}")
    return "\n".join(lines) + "\n"


def _emit(records: list[AreaCode], *, as_json: bool) -> None:
    if as_json:
        payload: list[dict[str, Any]] = [r.to_dict() for r in records]
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        click.echo(_human_text(records), nl=False)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__)
def main() -> None:
    """Offline telephone area-code lookup."""


@main.command("lookup")
@click.argument("code", type=str)
@click.option("--e164", "is_e164", is_flag=True, help="Treat CODE as calling code + area code.")
@json_option
@config_option
def lookup_cmd(code: str, is_e164: bool, as_json: bool, config_path: Path | None) -> None:
    """
    Look up an area code across all countries.
    """

    settings = _settings(config_path)
    if is_e164:
        found = _run(settings, lambda s: s.lookup_e164(code))
        records = [found] if found is not None else []
    else:
        records = _run(settings, lambda s: s.lookup(code))
    _emit(records, as_json=as_json)


@main.command("search")
@click.argument("query", type=str)
@json_option
@config_option
def search_cmd(query: str, as_json: bool, config_path: Path | None) -> None:
    """Search city, region and notes (case-insensitive substring)."""

    settings = _settings(config_path)
    _emit(_run(settings, lambda s: s.search(query)), as_json=as_json)


@main.command("suggest")
@click.argument("prefix", type=str)
@click.option("--limit", type=int, default=None, help="Maximum number of suggestions.")
@json_option
@config_option
def suggest_cmd(prefix: str, limit: int | None, as_json: bool, config_path: Path | None) -> None:
    """Autocomplete by area-code or place-name prefix."""

    settings = _settings(config_path)
    _emit(_run(settings, lambda s: s.suggestions(prefix, limit)), as_json=as_json)


@main.command("codes")
@click.argument("country", type=str)
@json_option
@config_option
def codes_cmd(country: str, as_json: bool, config_path: Path | None) -> None:
    """List every area code of one country (ISO alpha-2, e.g. CA)."""

    settings = _settings(config_path)
    _emit(_run(settings, lambda s: s.codes(country)), as_json=as_json)


@main.command("countries")
@json_option
@config_option
def countries_cmd(as_json: bool, config_path: Path | None) -> None:
    """List the countries with an available dataset."""

    settings = _settings(config_path)

    async def available(service: AreaCodeService) -> list[str]:
        return service.available_countries()

    countries = _run(settings, available)
    if as_json:
        click.echo(json.dumps(countries))
        return
    for cc in countries:
        click.echo(f"{flag(cc)} {cc} {country_name(cc)}")
