"""Command-line interface using Click."""

import asyncio
import dataclasses
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import get_settings_path
from .exceptions import LiveLyricsError
from .core.engine import LiveLyricsEngine, format_offset
from .core.lyrics_fetch import LyricsFetchPipeline
from .core.models import PlaybackSnapshot, Provider, SongChange
from .core.observable import ObservableValue
from .core.playback import now_ms
from .core.providers import DefaultProviderService
from .core.search_strategy import plan_search_strategies
from .core.settings import SettingsStore
from .utils.logging import setup_logging

PROVIDER_CHOICE = click.Choice([p.value for p in Provider], case_sensitive=False)


def _make_service(store: SettingsStore) -> DefaultProviderService:
    return DefaultProviderService(translation_language=store.settings.translation_language)


def _with_provider(store: SettingsStore, provider: Optional[str]) -> SettingsStore:
    """Use ``provider`` for this run only, without persisting it."""
    if provider:
        store.settings = dataclasses.replace(
            store.settings, selected_provider=Provider.parse(provider)
        )
    return store


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.option('--settings', 'settings_path', type=click.Path(), help='Settings file')
@click.pass_context
def cli(ctx, verbose, log_file, settings_path):
    """livelyrics - follow the playing song with synced lyrics."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose
    ctx.obj['settings_path'] = Path(settings_path) if settings_path else get_settings_path()


@cli.command()
@click.argument('title')
@click.argument('artist', default='')
def plan(title, artist):
    """Show the search strategies tried for TITLE and ARTIST."""
    for i, strategy in enumerate(plan_search_strategies(title, artist), 1):
        click.echo(f"{i}. [{strategy.label}] {strategy.title} / {strategy.artist}")


@cli.command()
@click.argument('title')
@click.argument('artist', default='')
@click.option('--provider', type=PROVIDER_CHOICE, help='Provider for this search only')
@click.option('--offset', type=click.IntRange(min=0), default=0,
              help='Result offset (0 = best match)')
@click.pass_context
def fetch(ctx, title, artist, provider, offset):
    """Fetch synced lyrics for TITLE and ARTIST and print them."""
    logger = ctx.obj['logger']
    store = _with_provider(SettingsStore(ctx.obj['settings_path']), provider)
    pipeline = LyricsFetchPipeline(
        _make_service(store),
        store.settings,
        on_progress=lambda s: logger.info(f"[{s.label}] {s.title} / {s.artist}"),
    )
    try:
        result = asyncio.run(pipeline.run(title, artist, offset))
    except LiveLyricsError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    click.echo(f"{result.title} - {result.artist}")
    for line in result.lines:
        click.echo(f"[{line.timestamp}] {line.text}")


@cli.command()
@click.argument('title')
@click.argument('artist', default='')
@click.option('--provider', type=PROVIDER_CHOICE, help='Provider for this run only')
@click.option('--start-ms', type=click.IntRange(min=0), default=0,
              help='Playback position to start from')
@click.option('--lrc-offset', type=int, default=0,
              help='Lyrics offset in ms (positive = later)')
@click.pass_context
def follow(ctx, title, artist, provider, start_ms, lrc_offset):
    """Play TITLE on a simulated clock and print each line as it comes up."""
    logger = ctx.obj['logger']
    store = _with_provider(SettingsStore(ctx.obj['settings_path']), provider)
    try:
        asyncio.run(_follow(store, title, artist, start_ms, lrc_offset))
    except KeyboardInterrupt:
        pass
    except LiveLyricsError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)


async def _follow(store: SettingsStore, title: str, artist: str, start_ms: int, lrc_offset: int) -> None:
    songs = ObservableValue(SongChange(title, artist))
    playback = ObservableValue(PlaybackSnapshot(True, start_ms, now_ms(), 1.0))
    engine = LiveLyricsEngine(_make_service(store), store, songs, playback)

    async with engine:
        status = None
        shown = -1
        offset_applied = False
        async for state in engine.states.subscribe():
            if state.status_text and state.status_text != status:
                click.echo(state.status_text, err=True)
            status = state.status_text

            if state.lines and not offset_applied:
                offset_applied = True
                if lrc_offset:
                    engine.set_offset(lrc_offset)
                    click.echo(f"Offset {format_offset(lrc_offset)}", err=True)
                continue

            if state.current_line_index != shown and state.current_line is not None:
                shown = state.current_line_index
                click.echo(state.current_line.text)
                if shown == len(state.lines) - 1:
                    break

            if not state.is_loading and not state.lines and status and not engine.is_fetching:
                break


@cli.command(name='provider')
@click.argument('name', required=False, type=PROVIDER_CHOICE)
@click.pass_context
def provider_cmd(ctx, name):
    """Show the selected provider, or select NAME."""
    store = SettingsStore(ctx.obj['settings_path'])
    if name:
        store.update_selected_provider(Provider.parse(name))
        click.echo(f"✅ Provider set to {store.settings.selected_provider.display_name}")
    else:
        click.echo(store.settings.selected_provider.display_name)


if __name__ == '__main__':
    cli()
