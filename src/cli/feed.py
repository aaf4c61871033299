"""CLI commands for the Free Read feed engine."""

import json
import logging
import sys
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import click
import structlog

from src.config import ConfigValidationError, FeedEngineConfig, load_engine_config
from src.config.constants import COMPONENT_CLI
from src.config.error_hints import format_validation_error
from src.feed.merge import merge_pools
from src.feed.metrics import FeedMetrics
from src.feed.models import FeedItem
from src.feed.session import FeedSession
from src.fetch.client import HttpFetcher
from src.fetch.metrics import FetchMetrics
from src.library.models import PassageCategory
from src.observability.logging import bind_session_context, configure_logging
from src.pool.builder import build_seed_pool
from src.pool.seed import format_like_count
from src.ranker.impact import ImpactScorer
from src.remote.fetcher import RemoteFetchOutcome, RemoteStoryFetcher
from src.remote.metrics import RemoteMetrics
from src.settings import AppSettings
from src.store.kv import SqliteKeyValueStore
from src.store.metrics import StoreMetrics
from src.store.repositories import LikedItemsRepository, StoryCacheRepository


logger = structlog.get_logger()

_REFRESH_POLL_SECONDS = 0.2


@dataclass
class CliContext:
    """Options shared by every command."""

    config_path: Path | None
    state_path: Path
    json_logs: bool
    verbose: bool


def _setup(ctx: CliContext, command: str) -> tuple[FeedEngineConfig, AppSettings]:
    """Configure logging and load the engine configuration.

    Exits with status 1 and formatted hints when the configuration is
    invalid.
    """
    log_level = logging.DEBUG if ctx.verbose else logging.WARNING
    configure_logging(level=log_level, json_format=ctx.json_logs)
    session_id = str(uuid.uuid4())[:8]
    bind_session_context(session_id)

    settings = AppSettings()
    try:
        config = load_engine_config(settings, ctx.config_path)
    except ConfigValidationError as e:
        click.echo(f"Configuration validation failed: {e.file_path}", err=True)
        for error in e.errors:
            formatted = format_validation_error(
                location=error["location"],
                message=error["message"],
                error_type=error.get("type", "unknown"),
                include_hint=True,
            )
            click.echo(f"  - {formatted}", err=True)
        sys.exit(1)

    logger.bind(component=COMPONENT_CLI, command=command).info(
        "command_started",
        state_path=str(ctx.state_path),
        config_path=str(ctx.config_path) if ctx.config_path else None,
    )
    return config, settings


def _master_pool(
    config: FeedEngineConfig,
    store: SqliteKeyValueStore,
) -> list[FeedItem]:
    """Merge cached remote stories with the local seed pool."""
    local = build_seed_pool(config.pool, ImpactScorer(config.impact))
    cached = StoryCacheRepository(store).load()
    return merge_pools(
        cached,
        local,
        replace_threshold=config.feed.remote_replace_threshold,
        max_size=config.feed.max_pool_size,
    )


def _parse_categories(names: tuple[str, ...]) -> list[PassageCategory]:
    """Resolve category options validated by click.Choice."""
    return [PassageCategory.from_name(name) for name in names]


def _format_item(position: int, item: FeedItem, session: FeedSession) -> str:
    liked = "♥" if session.is_liked(item.id) else "♡"
    likes = format_like_count(session.like_count(item.id))
    return (
        f"[{position:03d}] {item.category.value} | {item.title} "
        f"({item.part_label}) {liked} {likes}\n      {item.quote}"
    )


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Optional YAML file overriding engine settings.",
)
@click.option(
    "--state",
    "state_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the SQLite state database (default: FREEREAD_STATE_PATH).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    state_path: Path | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Free Read feed engine CLI."""
    ctx.obj = CliContext(
        config_path=config_path,
        state_path=state_path or AppSettings().state_path,
        json_logs=json_logs,
        verbose=verbose,
    )


@cli.command()
@click.option(
    "--batches",
    type=click.IntRange(min=1, max=20),
    default=1,
    help="Number of batches to print (default: 1).",
)
@click.option(
    "--category",
    "category_names",
    multiple=True,
    type=click.Choice([c.value for c in PassageCategory], case_sensitive=False),
    help="Restrict the feed to a category (repeatable).",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Shuffle seed for a reproducible feed (default: FREEREAD_FEED_SEED).",
)
@click.option(
    "--stats",
    is_flag=True,
    help="Print feed counters as JSON on stderr after the batches.",
)
@click.pass_obj
def preview(
    ctx: CliContext,
    batches: int,
    category_names: tuple[str, ...],
    seed: int | None,
    stats: bool,
) -> None:
    """Print the first batches of the feed."""
    config, settings = _setup(ctx, "preview")
    categories = _parse_categories(category_names)

    with SqliteKeyValueStore(ctx.state_path) as store:
        session = FeedSession(
            _master_pool(config, store),
            LikedItemsRepository(store),
            config.feed,
            seed=seed if seed is not None else settings.feed_seed,
        )
        if categories:
            session.set_category_filter(categories)

        for _ in range(batches):
            for rendered in session.append_batch():
                click.echo(_format_item(rendered.position, rendered.item, session))

    if stats:
        click.echo(json.dumps(FeedMetrics.get_instance().to_dict(), indent=2), err=True)


def run_refresh(
    fetcher: RemoteStoryFetcher,
    cancel: threading.Event,
    poll_seconds: float = _REFRESH_POLL_SECONDS,
) -> tuple[RemoteFetchOutcome, bool]:
    """Run a refresh on a worker thread so Ctrl-C can cancel it mid-run.

    The main thread polls the worker so a KeyboardInterrupt is seen while
    books are still downloading; it then sets ``cancel`` and waits for the
    fetcher to return its fallback.

    Returns:
        Tuple of (outcome, whether the run was cancelled).
    """
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="refresh") as runner:
        future = runner.submit(fetcher.fetch_outcome, cancel)
        try:
            while True:
                try:
                    return future.result(timeout=poll_seconds), False
                except TimeoutError:
                    continue
        except KeyboardInterrupt:
            cancel.set()
            logger.bind(component=COMPONENT_CLI).warning("refresh_cancelled")
            return future.result(), True


def _metrics_snapshot() -> dict[str, dict[str, object]]:
    return {
        "fetch": FetchMetrics.get_instance().to_dict(),
        "remote": RemoteMetrics.get_instance().to_dict(),
        "store": StoreMetrics.get_instance().to_dict(),
    }


@cli.command()
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output the outcome and run metrics as JSON.",
)
@click.pass_obj
def refresh(ctx: CliContext, json_output: bool) -> None:
    """Fetch remote stories and update the story cache."""
    config, _ = _setup(ctx, "refresh")
    cancel = threading.Event()

    with (
        SqliteKeyValueStore(ctx.state_path) as store,
        HttpFetcher(config.fetch) as http,
    ):
        fetcher = RemoteStoryFetcher(
            http,
            store,
            local_pool=lambda: build_seed_pool(config.pool, ImpactScorer(config.impact)),
            config=config,
        )
        outcome, cancelled = run_refresh(fetcher, cancel)

    if json_output:
        click.echo(
            json.dumps(
                {
                    "source": outcome.source.value,
                    "stories": len(outcome.items),
                    "duration_ms": round(outcome.duration_ms, 2),
                    "cancelled": cancelled,
                    "error": outcome.error.to_dict() if outcome.error else None,
                    "metrics": _metrics_snapshot(),
                },
                indent=2,
            )
        )
    else:
        click.echo(f"Source: {outcome.source.value}")
        click.echo(f"Stories: {len(outcome.items)}")
        if outcome.error is not None:
            click.echo(f"Fallback reason: {outcome.error.message}")

    if cancelled:
        click.echo("Refresh cancelled.", err=True)
        sys.exit(130)


@cli.command()
@click.argument("item_id")
@click.pass_obj
def share(ctx: CliContext, item_id: str) -> None:
    """Print the share text of ITEM_ID."""
    config, _ = _setup(ctx, "share")

    with SqliteKeyValueStore(ctx.state_path) as store:
        session = FeedSession(
            _master_pool(config, store), LikedItemsRepository(store), config.feed
        )
        text = session.share_text(item_id)

    if not text:
        click.echo(f"Unknown item: {item_id}", err=True)
        sys.exit(1)
    click.echo(text)


@cli.command()
@click.argument("item_id")
@click.pass_obj
def like(ctx: CliContext, item_id: str) -> None:
    """Toggle the like on ITEM_ID."""
    config, _ = _setup(ctx, "like")

    with SqliteKeyValueStore(ctx.state_path) as store:
        session = FeedSession(
            _master_pool(config, store), LikedItemsRepository(store), config.feed
        )
        liked = session.toggle_like(item_id)
        label = session.like_label(item_id)

    click.echo(f"{'Liked' if liked else 'Unliked'} {item_id} ({label})")


@cli.command()
@click.pass_obj
def categories(ctx: CliContext) -> None:
    """List categories with their item counts in the current pool."""
    config, _ = _setup(ctx, "categories")

    with SqliteKeyValueStore(ctx.state_path) as store:
        pool = _master_pool(config, store)

    for category in PassageCategory:
        count = sum(1 for item in pool if item.category == category)
        click.echo(f"{category.value:<12} {count}")
