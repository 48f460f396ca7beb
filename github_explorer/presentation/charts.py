"""Chart figures and summary metrics for the analytics view."""

from typing import List, Sequence, Tuple

import plotly.graph_objects as go

from github_explorer.domain.analytics import (
    language_distribution,
    summary_stats,
    top_by_stars,
    truncate_label,
)
from github_explorer.domain.repository import Repository


LANGUAGE_COLORS = [
    "hsl(217, 91%, 60%)",
    "hsl(150, 80%, 50%)",
    "hsl(45, 100%, 50%)",
    "hsl(0, 65%, 51%)",
    "hsl(270, 91%, 60%)",
    "hsl(180, 80%, 50%)",
]
STARS_COLOR = "hsl(150, 80%, 50%)"


def summary_metrics(repositories: Sequence[Repository]) -> List[Tuple[str, str]]:
    """Label/value pairs for the summary tiles, values with thousands separators."""
    stats = summary_stats(repositories)
    return [
        ("Total Stars", f"{stats.total_stars:,}"),
        ("Total Forks", f"{stats.total_forks:,}"),
        ("Total Watchers", f"{stats.total_watchers:,}"),
        ("Avg Stars", f"{stats.avg_stars:,}"),
    ]


def stars_bar_chart(repositories: Sequence[Repository]) -> go.Figure:
    top_repos = top_by_stars(repositories)

    fig = go.Figure(
        go.Bar(
            x=[truncate_label(repo.name) for repo in top_repos],
            y=[repo.stars for repo in top_repos],
            name="Stars",
            marker_color=STARS_COLOR,
            hovertext=[repo.full_name for repo in top_repos],
        )
    )
    fig.update_layout(
        title="Top Repositories by Stars",
        showlegend=False,
        yaxis=dict(rangemode="tozero"),
        margin=dict(l=20, r=20, t=50, b=20),
    )
    return fig


def language_doughnut_chart(repositories: Sequence[Repository]) -> go.Figure:
    distribution = language_distribution(repositories)

    fig = go.Figure(
        go.Pie(
            labels=list(distribution.keys()),
            values=list(distribution.values()),
            hole=0.5,
            marker=dict(colors=LANGUAGE_COLORS[:len(distribution)]),
            sort=False,
        )
    )
    fig.update_layout(
        title="Language Distribution",
        legend=dict(orientation="h"),
        margin=dict(l=20, r=20, t=50, b=20),
    )
    return fig
