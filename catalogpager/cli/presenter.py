"""CLI presentation helpers for human and JSON output modes."""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

import click

from catalogpager.constants import CatalogKind
from catalogpager.domain.models import CatalogPage, Chapter, MangaDetails, PageImage


class CliPresenter:
    """Render command outputs for human and machine-readable modes."""

    def __init__(self, *, json_output: bool, quiet: bool) -> None:
        """Store output-mode flags for rendering decisions."""
        self.json_output = json_output
        self.quiet = quiet

    @property
    def emits_human_output(self) -> bool:
        """Return whether human-readable output should be emitted."""
        return not self.json_output and not self.quiet

    def emit_intro(self, intro: str) -> None:
        """Emit a styled intro banner when human output is enabled."""
        if self.emits_human_output:
            click.echo(click.style(intro, fg="blue"))

    def emit_notice(self, message: str) -> None:
        """Emit one human-readable informational message."""
        if self.emits_human_output:
            click.echo(message)

    def emit_pages(self, kind: CatalogKind, start_page: int, pages: Iterable[CatalogPage]) -> None:
        """Emit listing pages as they are fetched."""
        for page_number, page in enumerate(pages, start_page):
            if self.json_output:
                self.emit_json(
                    {
                        "kind": kind.value,
                        "page": page_number,
                        "has_next_page": page.has_next_page,
                        "entries": [entry.as_dict() for entry in page.entries],
                    }
                )
                continue
            if self.quiet:
                for entry in page.entries:
                    click.echo(entry.relative_path)
                continue
            more = "more" if page.has_next_page else "last page"
            click.echo(click.style(f"{kind.value} page {page_number} ({more})", fg="green"))
            if not page.entries:
                click.echo("  (no new entries)")
            for entry in page.entries:
                click.echo(f"  {entry.title or '<untitled>'}  {entry.relative_path}")

    def emit_details(self, details: MangaDetails) -> None:
        """Emit title details."""
        if self.json_output:
            self.emit_json(details.as_dict())
            return
        click.echo(click.style(details.title or "<untitled>", bold=True))
        click.echo(f"Status: {details.status.name.lower()}")
        if details.genres:
            click.echo(f"Genres: {', '.join(details.genres)}")
        if details.thumbnail_url:
            click.echo(f"Thumbnail: {details.thumbnail_url}")
        if details.description:
            click.echo("")
            click.echo(details.description)

    def emit_chapters(self, chapters: list[Chapter]) -> None:
        """Emit chapter names and links."""
        if self.json_output:
            self.emit_json(
                {"chapters": [{"name": c.name, "relative_path": c.relative_path} for c in chapters]}
            )
            return
        for chapter in chapters:
            click.echo(f"{chapter.name}  {chapter.relative_path}")

    def emit_page_images(self, images: list[PageImage]) -> None:
        """Emit reader page image URLs."""
        if self.json_output:
            self.emit_json(
                {"pages": [{"index": image.index, "image_url": image.image_url} for image in images]}
            )
            return
        for image in images:
            click.echo(f"{image.index:>3} {image.image_url}")

    def emit_base_url(self, source_name: str, base_url: str, default_base_url: str) -> None:
        """Emit the effective base URL of a source."""
        if self.json_output:
            self.emit_json(
                {"source": source_name, "base_url": base_url, "default_base_url": default_base_url}
            )
            return
        click.echo(base_url)
        if base_url != default_base_url:
            self.emit_notice(f"(default: {default_base_url})")

    def emit_error(self, message: str, *, exit_code: int) -> None:
        """Emit a failure description on stderr, or as JSON on stdout in JSON mode."""
        if self.json_output:
            self.emit_json({"status": "error", "exit_code": exit_code, "message": message})
            return
        click.echo(click.style(f"Error: {message}", fg="red"), err=True)

    def emit_json(self, payload: Mapping[str, Any]) -> None:
        """Emit one machine-readable JSON object to stdout."""
        click.echo(json.dumps(payload, sort_keys=True, ensure_ascii=False))
