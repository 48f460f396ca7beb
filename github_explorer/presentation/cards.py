"""Formatting of repository cards."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from github_explorer.domain.repository import Repository


CARD_TOPICS = 3
NO_DESCRIPTION = "No description available"


def format_count(count: int) -> str:
    """Abbreviate counts of a thousand or more ("1.2k"), halves rounded up."""
    if count >= 1000:
        thousands = Decimal(count / 1000).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return f"{thousands}k"
    return str(count)


def format_date(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.date().isoformat()


def card_fields(repo: Repository, bookmarked: bool = False) -> Dict[str, Any]:
    """Values shown on a repository card."""
    topics = list(repo.topics[:CARD_TOPICS])
    hidden_topics = len(repo.topics) - CARD_TOPICS

    return {
        "id": repo.id,
        "owner": repo.owner.login,
        "avatar_url": repo.owner.avatar_url,
        "name": repo.name,
        "heading": f"{repo.owner.login}/{repo.name}",
        "description": repo.description or NO_DESCRIPTION,
        "topics": topics,
        "more_topics": f"+{hidden_topics}" if hidden_topics > 0 else None,
        "stars": format_count(repo.stars),
        "forks": format_count(repo.forks),
        "watchers": format_count(repo.watchers),
        "language": repo.language,
        "updated": format_date(repo.updated_at),
        "url": repo.html_url,
        "bookmarked": bookmarked,
    }


def render_card_text(repo: Repository, bookmarked: bool = False) -> str:
    fields = card_fields(repo, bookmarked)

    marker = "[*]" if bookmarked else "[ ]"
    lines = [f"{marker} {fields['heading']}  (#{fields['id']})", f"    {fields['description']}"]

    badges = fields["topics"] + ([fields["more_topics"]] if fields["more_topics"] else [])
    if badges:
        lines.append("    " + " ".join(f"#{badge}" if not badge.startswith("+") else badge for badge in badges))

    stats = f"    stars {fields['stars']}  forks {fields['forks']}  watchers {fields['watchers']}"
    if fields["language"]:
        stats += f"  [{fields['language']}]"
    lines.append(stats)

    footer = f"    {fields['url']}"
    if fields["updated"]:
        footer = f"    Updated {fields['updated']}  {fields['url']}"
    lines.append(footer)

    return "\n".join(lines)
