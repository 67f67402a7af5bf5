import asyncio
import sys
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import UTC, datetime

import click

from .config import Settings, get_settings, validate_config
from .ingest.news import fetch_news
from .ingest.social import fetch_trending_posts
from .items import NewsItem, SocialPost
from .logging import PerformanceLogger, get_logger, log_error, setup_logging
from .processing.aggregate import DashboardState, FeedViews, View, aggregate
from .processing.scoring import RelevanceScorer, ScoredItem
from .render import DashboardRenderer, OutputFormat
from .search import share_url
from .ui import init_ui

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Both adapters' output for one query."""
    query: str
    news: tuple[NewsItem, ...]
    posts: tuple[SocialPost, ...]
    fetched_at: datetime = field(default_factory=lambda: datetime.now(UTC))


async def _settle(branch: str, awaitable: Awaitable[list]) -> list:
    """Await one adapter, mapping any failure to an empty list."""
    try:
        return await awaitable
    except Exception as e:
        logger.error(**log_error(e, context="adapter_failed", branch=branch))
        return []


async def fetch_all(query: str, settings: Settings | None = None) -> FetchResult:
    """Run both source adapters concurrently and join on their results."""
    settings = settings or get_settings()

    with PerformanceLogger("fetch_all_sources", logger):
        news, posts = await asyncio.gather(
            _settle("news", fetch_news(query, settings)),
            _settle("social", fetch_trending_posts(query, settings)),
        )

    logger.info("Sources fetched", query=query, news_count=len(news), social_count=len(posts))
    return FetchResult(query=query, news=tuple(news), posts=tuple(posts))


class DashboardSession:
    """Cached fetch results plus display state.

    Changing the query, view or threshold recomputes the views from the cached
    items; only ``refresh`` goes back to the sources.
    """

    def __init__(
        self,
        result: FetchResult,
        state: DashboardState | None = None,
        scorer: RelevanceScorer | None = None,
    ):
        self.result = result
        self.state = state or DashboardState(query=result.query)
        self.scorer = scorer or RelevanceScorer()

    @property
    def views(self) -> FeedViews:
        return aggregate(
            self.result.news,
            self.result.posts,
            self.state.query,
            self.state.threshold,
            self.scorer,
        )

    @property
    def displayed(self) -> tuple[ScoredItem, ...]:
        return self.views.select(self.state.view)

    def set_view(self, view: View | str) -> None:
        self.state = self.state.with_view(view)

    def set_threshold(self, threshold: int) -> None:
        self.state = self.state.with_threshold(threshold)

    def set_query(self, query: str) -> None:
        self.state = self.state.with_query(query)

    async def refresh(self, query: str | None = None, settings: Settings | None = None) -> None:
        query = query or self.state.query
        self.result = await fetch_all(query, settings)
        self.state = self.state.with_query(query)


async def run_pipeline(
    settings: Settings,
    query: str,
    view: View = View.ALL,
    threshold: int = 0,
    ui=None,
) -> DashboardSession:
    """Fetch sources for a query and build the dashboard session."""
    state = DashboardState(query=query, view=view, threshold=threshold)

    if ui:
        with ui.stage(f"Gathering news and posts for {query}") as (progress, task):
            result = await fetch_all(query, settings)
            ui.complete_progress(progress, task, f"Found {len(result.news)} news items, {len(result.posts)} posts")
    else:
        result = await fetch_all(query, settings)

    session = DashboardSession(result, state)
    if ui:
        if not result.news:
            ui.warning("No news items could be fetched for this query")
        ui.verbose_log(f"View counts: {session.views.counts()}")
    return session


@click.command()
@click.argument("query", required=False)
@click.option(
    "--view",
    type=click.Choice([v.value for v in View]),
    default=View.ALL.value,
    help="Which view to display",
)
@click.option(
    "--threshold",
    type=click.IntRange(0, 3),
    default=0,
    help="Minimum relevance score (0-3)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.MARKDOWN.value,
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.File("w", encoding="utf-8"),
    default="-",
    help="Output file (default: stdout)",
)
@click.option("--mock", is_flag=True, help="Use sample data instead of live sources")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="ERROR",
    help="Log level",
)
@click.option("--verbose", is_flag=True, help="Show detailed progress information")
@click.option(
    "--validate-config",
    "validate_config_flag",
    is_flag=True,
    help="Validate configuration and exit",
)
def cli(
    query,
    view,
    threshold,
    output_format,
    output,
    mock,
    log_level,
    verbose,
    validate_config_flag,
):
    """AI News Hub - aggregate and rank news and social posts for a topic."""
    setup_logging(log_level="INFO" if verbose else log_level, json_logging=False)
    ui = init_ui(verbose=verbose)

    try:
        settings = get_settings()
        if mock:
            settings.mock = True

        if validate_config_flag:
            if validate_config(settings):
                ui.success("Configuration is valid")
                sys.exit(0)
            else:
                ui.error("Configuration validation failed")
                sys.exit(1)

        query = (query or settings.default_query).strip() or settings.default_query
        ui.show_banner(query)

        session = asyncio.run(run_pipeline(
            settings=settings,
            query=query,
            view=View(view),
            threshold=threshold,
            ui=ui,
        ))

        renderer = DashboardRenderer()
        output.write(renderer.render(session, OutputFormat(output_format)))

        ui.show_final_summary(
            counts=session.views.counts(),
            state=session.state,
            link=share_url(query),
        )

    except Exception as e:
        logger.error("CLI execution failed", error=str(e))
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
