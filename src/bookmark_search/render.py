"""Render a filtered bookmark view as plain text for the terminal."""

from .models import Author, FilteredView, Item

SEPARATOR = "-" * 40


def count_line(view: FilteredView) -> str:
    if len(view.items) == 1:
        return "1 bookmark"
    return f"{len(view.items)} bookmarks"


def render_view(view: FilteredView) -> str:
    """Render every bookmark in the view, in fetch order."""
    lines = [count_line(view), ""]
    if not view.items:
        lines.append("No bookmarks")
        return "\n".join(lines)

    for item in view.items:
        lines.append(render_item(item, view.author_for(item)))
        lines.append(SEPARATOR)
    return "\n".join(lines)


def render_item(item: Item, author: Author) -> str:
    lines: list[str] = []

    if author.username:
        header = f"{author.name} @{author.username}"
        if author.verified:
            header += " [verified]"
    else:
        header = "Unknown author"
    if item.created_at:
        header += f" · {item.created_at.strftime('%Y-%m-%d %H:%M UTC')}"
    lines.append(header)

    for text_line in item.text.strip().split("\n"):
        lines.append(f"  {text_line}")

    if item.tags:
        lines.append("  Tags: " + ", ".join(tag.name for tag in item.tags))

    if author.username:
        lines.append(f"  https://twitter.com/{author.username}/status/{item.id}")

    return "\n".join(lines)
