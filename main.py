#!/usr/bin/env python3
"""
SecFeed - Security News Feed Engine
===================================

Command line interface for fetching, browsing and caching feed articles.

Usage:
    python main.py --help                    # Show all commands
    python main.py check-config              # Validate configuration
    python main.py fetch [--force]           # Fetch articles (cache aware)
    python main.py show ARTICLE_ID           # Show one article
    python main.py search QUERY              # Search title/description/content
    python main.py category LABEL            # Filter by category label
    python main.py cached                    # Show the persisted cache
    python main.py clear-cache               # Remove the persisted cache
    python main.py saved list|add|remove|clear
"""

import sys
import asyncio
from pathlib import Path
from typing import List

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from secfeed.config.settings import get_settings
from secfeed.database.models import Article
from secfeed.processing.news_service import NewsService
from secfeed.utils.logging import configure_application_logging
from secfeed.utils.exceptions import (
    SecFeedError,
    FetchFailed,
    FailureKind,
    classify_failure,
)

console = Console()

FAILURE_HINTS = {
    FailureKind.NETWORK: "Check your internet connection and try again.",
    FailureKind.SERVER: "The news server is having trouble. Try again later.",
    FailureKind.GENERAL: "Something went wrong while loading news.",
}


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, debug):
    """SecFeed - cybersecurity news feed engine."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        # Show help if no subcommand provided
        click.echo(ctx.get_help())
        return

    if ctx.invoked_subcommand != 'check-config':
        _configure_logging(debug)


def _configure_logging(debug: bool) -> None:
    settings = get_settings()
    configure_application_logging(
        log_level="DEBUG" if debug else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )


def _articles_table(title: str, articles: List[Article]) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Category", style="magenta")
    table.add_column("Published", style="green")

    for article in articles:
        article_title = article.title
        if len(article_title) > 60:
            article_title = article_title[:57] + "..."
        table.add_row(
            escape(article.id),
            escape(article_title),
            escape(article.category),
            escape(article.pub_date),
        )

    return table


def _print_articles(title: str, articles: List[Article]) -> None:
    if not articles:
        console.print("[yellow]⚠️ No articles found[/yellow]")
        return
    console.print(_articles_table(title, articles))


def _report_fetch_failure(error: FetchFailed) -> None:
    kind = classify_failure(error)
    console.print(f"[bold red]❌ {escape(error.original_message)}[/bold red]")
    console.print(f"[yellow]{FAILURE_HINTS[kind]}[/yellow]")


@cli.command()
def check_config():
    """Validate configuration and environment variables."""
    console.print("[bold blue]🔧 Checking SecFeed Configuration[/bold blue]")

    try:
        settings = get_settings()

        table = Table(title="Configuration Status")
        table.add_column("Component", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Details")

        checks = [
            ("Feed", _check_feed_config),
            ("Cache", _check_cache_config),
            ("Parsing", _check_parsing_config),
            ("Database", _check_database_config),
            ("Logging", _check_logging_config),
        ]

        all_passed = True
        for name, check_func in checks:
            status, details = check_func(settings)
            table.add_row(name, "✅ Valid" if status else "❌ Invalid", details)
            if not status:
                all_passed = False

        console.print(table)

        if all_passed:
            console.print("[bold green]✅ All configuration checks passed![/bold green]")
            sys.exit(0)
        else:
            console.print("[bold red]❌ Configuration validation failed[/bold red]")
            sys.exit(1)

    except SecFeedError as e:
        console.print(f"[bold red]❌ Configuration error: {escape(str(e))}[/bold red]")
        sys.exit(1)


@cli.command()
@click.option('--force', is_flag=True, help='Bypass the in-memory cache')
def fetch(force):
    """Fetch articles from the configured feed."""
    settings = get_settings()
    console.print(f"[bold blue]📡 Fetching {escape(settings.feed.url)}[/bold blue]")

    async def run_fetch():
        async with NewsService.from_settings(settings) as service:
            return await service.fetch_articles(force_refresh=force)

    try:
        articles = asyncio.run(run_fetch())
    except FetchFailed as e:
        _report_fetch_failure(e)
        sys.exit(1)

    _print_articles(f"Articles ({len(articles)})", articles)


@cli.command()
@click.argument('article_id')
def show(article_id):
    """Show a single article, fetching the feed if needed."""

    async def run_lookup():
        async with NewsService.from_settings() as service:
            return await service.find_article(article_id)

    try:
        article = asyncio.run(run_lookup())
    except FetchFailed as e:
        _report_fetch_failure(e)
        sys.exit(1)

    if article is None:
        console.print(f"[bold red]❌ Article not found: {escape(article_id)}[/bold red]")
        sys.exit(1)

    console.print(Panel(
        f"[magenta]{escape(article.category)}[/magenta]  [green]{escape(article.pub_date)}[/green]\n\n"
        f"{escape(article.content or article.description)}\n\n"
        f"🔗 {escape(article.link)}\n🖼️ {escape(article.image_url)}",
        title=f"[bold]{escape(article.title)}[/bold]",
    ))


@cli.command()
@click.argument('query')
def search(query):
    """Search fetched articles by text."""

    async def run_search():
        async with NewsService.from_settings() as service:
            await service.fetch_articles()
            return service.search_articles(query)

    try:
        articles = asyncio.run(run_search())
    except FetchFailed as e:
        _report_fetch_failure(e)
        sys.exit(1)

    _print_articles(f"Results for '{escape(query)}' ({len(articles)})", articles)


@cli.command()
@click.argument('label')
def category(label):
    """List fetched articles with the given category label."""

    async def run_filter():
        async with NewsService.from_settings() as service:
            await service.fetch_articles()
            return service.get_articles_by_category(label)

    try:
        articles = asyncio.run(run_filter())
    except FetchFailed as e:
        _report_fetch_failure(e)
        sys.exit(1)

    _print_articles(f"{escape(label)} ({len(articles)})", articles)


@cli.command()
def cached():
    """Show the persisted article cache without touching the network."""

    async def run_read():
        async with NewsService.from_settings() as service:
            return service.get_cached()

    articles = asyncio.run(run_read())
    _print_articles(f"Cached articles ({len(articles)})", articles)


@cli.command()
def clear_cache():
    """Remove the persisted article cache."""

    async def run_clear():
        async with NewsService.from_settings() as service:
            service.clear_cache()

    try:
        asyncio.run(run_clear())
    except SecFeedError as e:
        console.print(f"[bold red]❌ Error clearing cache: {escape(str(e))}[/bold red]")
        sys.exit(1)

    console.print("[bold green]✅ Cache cleared[/bold green]")


@cli.group()
def saved():
    """Manage saved articles."""


@saved.command('list')
def saved_list():
    """List saved articles, newest first."""

    async def run_list():
        async with NewsService.from_settings() as service:
            return service.saved_articles.get_saved_articles()

    articles = asyncio.run(run_list())
    _print_articles(f"Saved articles ({len(articles)})", articles)


@saved.command('add')
@click.argument('article_id')
def saved_add(article_id):
    """Save an article by ID."""

    async def run_add():
        async with NewsService.from_settings() as service:
            article = await service.find_article(article_id)
            if article is not None:
                service.saved_articles.save_article(article)
            return article

    try:
        article = asyncio.run(run_add())
    except FetchFailed as e:
        _report_fetch_failure(e)
        sys.exit(1)
    except SecFeedError as e:
        console.print(f"[bold red]❌ Error saving article: {escape(str(e))}[/bold red]")
        sys.exit(1)

    if article is None:
        console.print(f"[bold red]❌ Article not found: {escape(article_id)}[/bold red]")
        sys.exit(1)

    console.print(f"[bold green]✅ Saved: {escape(article.title)}[/bold green]")


@saved.command('remove')
@click.argument('article_id')
def saved_remove(article_id):
    """Remove an article from the saved list."""

    async def run_remove():
        async with NewsService.from_settings() as service:
            was_saved = service.saved_articles.is_article_saved(article_id)
            service.saved_articles.remove_article(article_id)
            return was_saved

    try:
        was_saved = asyncio.run(run_remove())
    except SecFeedError as e:
        console.print(f"[bold red]❌ Error removing article: {escape(str(e))}[/bold red]")
        sys.exit(1)

    if was_saved:
        console.print(f"[bold green]✅ Removed {escape(article_id)}[/bold green]")
    else:
        console.print(f"[yellow]⚠️ {escape(article_id)} was not saved[/yellow]")


@saved.command('clear')
def saved_clear():
    """Remove every saved article."""
    if not click.confirm("Remove all saved articles?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    async def run_clear():
        async with NewsService.from_settings() as service:
            service.saved_articles.clear_saved_articles()

    try:
        asyncio.run(run_clear())
    except SecFeedError as e:
        console.print(f"[bold red]❌ Error clearing saved articles: {escape(str(e))}[/bold red]")
        sys.exit(1)

    console.print("[bold green]✅ Saved articles cleared[/bold green]")


# Helper functions for configuration checks
def _check_feed_config(settings) -> tuple[bool, str]:
    """Check feed configuration."""
    return True, f"URL: {settings.feed.url}, Timeout: {settings.feed.request_timeout:g}s"


def _check_cache_config(settings) -> tuple[bool, str]:
    return True, (
        f"Memory TTL: {settings.cache.memory_ttl_seconds:g}s, "
        f"Persisted TTL: {settings.cache.persisted_ttl_seconds:g}s"
    )


def _check_parsing_config(settings) -> tuple[bool, str]:
    images = len(settings.parsing.fallback_images)
    return True, f"Description limit: {settings.parsing.description_max_length}, Fallback images: {images}"


def _check_database_config(settings) -> tuple[bool, str]:
    """Check database configuration."""
    try:
        db_path = Path(settings.database.path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return True, f"Path: {settings.database.path}"
    except OSError as e:
        return False, str(e)


def _check_logging_config(settings) -> tuple[bool, str]:
    """Check logging configuration."""
    try:
        if settings.logging.file_path:
            log_path = Path(settings.logging.file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
        return True, f"Level: {settings.logging.level.value}, Console: {settings.logging.console_logging}"
    except OSError as e:
        return False, str(e)


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 SecFeed interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[bold red]❌ Unexpected error: {escape(str(e))}[/bold red]")
        sys.exit(1)
