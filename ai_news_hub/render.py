"""
Dashboard rendering for the command line.

Renders the active view of a dashboard session either as Markdown (through a
Jinja2 template) or as JSON.
"""

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson
from jinja2 import Environment, FileSystemLoader

from .config import get_vocabulary
from .processing.aggregate import View
from .search import share_url
from .utils import format_datetime_iso, truncate_text

if TYPE_CHECKING:
    from .orchestrator import DashboardSession

logger = logging.getLogger(__name__)

VIEW_LABELS = {
    View.ALL: "総合情報",
    View.NEWS: "ニュース",
    View.SOCIAL: "X ポスト",
}


class OutputFormat(Enum):
    """Supported output formats."""
    MARKDOWN = "markdown"
    JSON = "json"


class DashboardRenderer:
    """Markdown and JSON rendering of dashboard views."""

    def __init__(self, template_dir: Path | None = None):
        if template_dir is None:
            template_dir = Path(__file__).parent / 'templates'
        self.template_dir = Path(template_dir)

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._register_filters()

    def _register_filters(self) -> None:
        """Register custom Jinja2 filters."""

        def format_date(date_obj: datetime, format_str: str = '%Y-%m-%d %H:%M') -> str:
            return date_obj.strftime(format_str)

        def truncate_chars(text: str, length: int = 120) -> str:
            return truncate_text(text, length)

        self.jinja_env.filters['format_date'] = format_date
        self.jinja_env.filters['truncate_chars'] = truncate_chars

    def build_context(self, session: "DashboardSession") -> dict[str, Any]:
        state = session.state
        views = session.views
        return {
            'state': state,
            'view_label': VIEW_LABELS[state.view],
            'items': views.select(state.view),
            'counts': views.counts(),
            'share_url': share_url(state.query),
            'quick_topics': get_vocabulary().quick_topics,
            'fetched_at': session.result.fetched_at,
        }

    def render_markdown(self, session: "DashboardSession") -> str:
        template = self.jinja_env.get_template('dashboard.md.j2')
        return template.render(**self.build_context(session))

    def render_json(self, session: "DashboardSession") -> str:
        state = session.state
        views = session.views
        payload = {
            'query': state.query,
            'view': state.view.value,
            'threshold': state.threshold,
            'fetched_at': format_datetime_iso(session.result.fetched_at),
            'counts': views.counts(),
            'share_url': share_url(state.query),
            'items': [scored.to_dict() for scored in views.select(state.view)],
        }
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode('utf-8') + "\n"

    def render(self, session: "DashboardSession", output_format: OutputFormat = OutputFormat.MARKDOWN) -> str:
        """Render the active view in the requested format."""
        logger.info(f"Rendering {session.state.view.value} view as {output_format.value}")
        if output_format is OutputFormat.JSON:
            return self.render_json(session)
        return self.render_markdown(session)
