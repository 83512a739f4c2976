"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
import mimetypes
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from resumint.clients.api_client import ApiClient
from resumint.clients.drafts_client import DraftsClient
from resumint.clients.llm_client import LLMClient
from resumint.clients.media_store import MediaStore
from resumint.config import AppConfig, load_config
from resumint.drafts.manager import DraftManager
from resumint.errors import ResumintError, ValidationError
from resumint.logging.usage_store import UsageStore
from resumint.models.draft import DraftKind, ResumeDraft
from resumint.routing.host_router import rewrite
from resumint.services.ai_text import AITextService

app = typer.Typer(
    name="resumint",
    help="Resumint drafts, AI text and portfolio routing from the command line",
    no_args_is_help=True,
)
console = Console()

TOKEN_ENV = "RESUMINT_TOKEN"

KindOption = typer.Option(DraftKind.RESUME, "--kind", "-k", help="Draft kind")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _api(config: AppConfig) -> ApiClient:
    return ApiClient(
        config.api.base_url,
        access_token=os.environ.get(TOKEN_ENV),
        timeout=config.api.timeout,
        max_retries=config.api.max_retries,
    )


def _run(coro):
    try:
        return asyncio.run(coro)
    except ResumintError as exc:
        console.print(f"[red]{type(exc).__name__}: {exc.message}[/red]")
        raise typer.Exit(1)


def _parse_value(raw: str):
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@app.command()
def login(
    email: str = typer.Argument(help="Account email"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Log in and print the access token to export as RESUMINT_TOKEN."""
    config = load_config()

    async def _login():
        async with _api(config) as api:
            user = await api.login(email, password)
            return user, api.access_token

    user, token = _run(_login())
    console.print(f"[green]Logged in as {user.display_name}[/green]")
    console.print(f"export {TOKEN_ENV}={token}")


@app.command("list")
def list_drafts(kind: DraftKind = KindOption) -> None:
    """List your drafts."""
    config = load_config()

    async def _list():
        async with _api(config) as api:
            return await DraftsClient(api, kind).list()

    drafts = _run(_list())
    table = Table(title=f"{kind.value} drafts")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Draft")
    table.add_column("Last saved")
    for d in drafts:
        saved = d.last_saved.strftime("%Y-%m-%d %H:%M") if d.last_saved else "-"
        table.add_row(d.id or "-", d.title, "yes" if d.is_draft else "no", saved)
    console.print(table)


@app.command()
def show(draft_id: str = typer.Argument(help="Draft id"), kind: DraftKind = KindOption) -> None:
    """Print a draft as JSON."""
    config = load_config()

    async def _show():
        async with _api(config) as api:
            return await DraftsClient(api, kind).get(draft_id)

    draft = _run(_show())
    console.print_json(json.dumps(draft.to_wire()))


@app.command()
def create(
    title: str = typer.Argument(help="Title of the new draft"),
    kind: DraftKind = KindOption,
) -> None:
    """Create an empty draft."""
    config = load_config()

    async def _create():
        async with _api(config) as api:
            return await DraftsClient(api, kind).create(title)

    draft = _run(_create())
    console.print(f"[green]Created {draft.title!r}: {draft.id}[/green]")


@app.command()
def edit(
    draft_id: str = typer.Argument(help="Draft id"),
    section: str = typer.Argument(help="Section name, e.g. personalInfo or summary"),
    values: list[str] = typer.Argument(
        help="field=value pairs for object sections, or a single JSON/text value"
    ),
    kind: DraftKind = KindOption,
) -> None:
    """Patch one section of a draft and save it."""
    config = load_config()

    if all("=" in v for v in values):
        patch = {k: _parse_value(v) for k, v in (item.split("=", 1) for item in values)}
    elif len(values) == 1:
        patch = _parse_value(values[0])
    else:
        console.print("[red]Pass field=value pairs or exactly one value[/red]")
        raise typer.Exit(1)

    async def _edit():
        async with _api(config) as api:
            manager = DraftManager(DraftsClient(api, kind), autosave=False)
            await manager.load(draft_id)
            manager.update_section(section, patch)
            await manager.save()
            return manager.status_text

    status = _run(_edit())
    console.print(f"[green]{section} updated. {status}[/green]")


@app.command()
def duplicate(draft_id: str = typer.Argument(help="Draft id"), kind: DraftKind = KindOption) -> None:
    """Copy a draft."""
    config = load_config()

    async def _duplicate():
        async with _api(config) as api:
            return await DraftsClient(api, kind).duplicate(draft_id)

    copy = _run(_duplicate())
    console.print(f"[green]Created {copy.title!r}: {copy.id}[/green]")


@app.command()
def delete(
    draft_id: str = typer.Argument(help="Draft id"),
    kind: DraftKind = KindOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a draft."""
    if not yes:
        typer.confirm(f"Delete {kind.value} {draft_id}?", abort=True)
    config = load_config()

    async def _delete():
        async with _api(config) as api:
            await DraftsClient(api, kind).delete(draft_id)

    _run(_delete())
    console.print(f"[green]Deleted {draft_id}[/green]")


@app.command()
def summary(
    keywords: str = typer.Argument(help="Comma-separated keywords"),
    draft_id: str = typer.Option(None, "--draft", "-d", help="Resume to use as context"),
    apply: bool = typer.Option(False, "--apply", help="Write the summary into the resume"),
) -> None:
    """Generate a professional summary with Claude."""
    config = load_config()
    store = UsageStore(config.usage.resolved_db_path)
    service = AITextService(
        LLMClient(timeout=config.llm.timeout),
        model=config.llm.model,
        summary_max_tokens=config.llm.summary_max_tokens,
        cover_letter_max_tokens=config.llm.cover_letter_max_tokens,
        usage_store=store,
    )

    async def _summary():
        if draft_id is None:
            return await service.generate_summary(keywords)
        async with _api(config) as api:
            manager = DraftManager(DraftsClient(api, DraftKind.RESUME), autosave=False)
            draft = await manager.load(draft_id)
            result = await service.generate_summary(
                keywords, draft if isinstance(draft, ResumeDraft) else None
            )
            if apply:
                manager.update_section("summary", result.text)
                await manager.save()
            return result

    with console.status("Generating summary..."):
        result = _run(_summary())
    usage = result.usage
    console.print(Panel(result.text, title="Summary"))
    console.print(
        f"[dim]{usage.input_tokens} in / {usage.output_tokens} out tokens, "
        f"~${usage.estimated_cost:.4f}[/dim]"
    )


@app.command()
def publish(
    draft_id: str = typer.Argument(help="Resume id"),
    subdomain: str = typer.Option(None, "--subdomain", "-s", help="Portfolio label"),
    password: str = typer.Option(None, "--password", help="Protect the portfolio"),
) -> None:
    """Publish a resume as a portfolio site."""
    config = load_config()

    async def _publish():
        async with _api(config) as api:
            client = DraftsClient(api, DraftKind.RESUME)
            label = subdomain or (await client.publication_status(draft_id)).suggested_subdomain
            if not await client.check_subdomain(draft_id, label):
                raise ValidationError(f"Subdomain {label!r} is already taken")
            return await client.publish(draft_id, label, password=password)

    result = _run(_publish())
    console.print(f"[green]Published at {result.url}[/green]")


@app.command()
def unpublish(draft_id: str = typer.Argument(help="Resume id")) -> None:
    """Take a published portfolio offline."""
    config = load_config()

    async def _unpublish():
        async with _api(config) as api:
            await DraftsClient(api, DraftKind.RESUME).unpublish(draft_id)

    _run(_unpublish())
    console.print(f"[green]Unpublished {draft_id}[/green]")


@app.command("upload-photo")
def upload_photo(
    user_id: str = typer.Argument(help="User id"),
    image: Path = typer.Argument(help="Image file"),
) -> None:
    """Replace a user's profile photo and print its public URL."""
    if not image.exists():
        console.print(f"[red]File not found: {image}[/red]")
        raise typer.Exit(1)
    config = load_config()
    content_type = mimetypes.guess_type(image.name)[0] or "application/octet-stream"
    try:
        store = MediaStore.from_env(
            bucket=config.storage.bucket, max_upload_bytes=config.storage.max_upload_bytes
        )
        url = store.upload_profile_photo(user_id, image.read_bytes(), image.name, content_type)
    except (ResumintError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{url}[/green]")


@app.command()
def route(
    host: str = typer.Argument(help="Request Host header, e.g. acme.localhost:3000"),
    path: str = typer.Argument("/", help="Request path"),
    query: str = typer.Option("", "--query", "-q", help="Query string"),
) -> None:
    """Show how a request would be routed."""
    config = load_config()
    result = rewrite(
        host,
        path,
        query,
        base_domains=config.router.base_domains,
        portfolio_prefix=config.router.portfolio_prefix,
    )
    if result.rewritten:
        console.print(f"[green]rewrite -> {result.url}[/green]")
    else:
        console.print(f"pass through -> {result.url}")


@app.command()
def usage(user_id: str = typer.Option(None, "--user", help="Filter by user id")) -> None:
    """Show this month's AI usage."""
    config = load_config()
    store = UsageStore(config.usage.resolved_db_path)
    stats = store.get_monthly_stats(user_id)
    console.print(
        Panel(
            f"Operations: {stats['operations']}\n"
            f"Tokens: {stats['total_tokens']} "
            f"({stats['input_tokens']} in / {stats['output_tokens']} out)\n"
            f"Cost: ${stats['cost_usd']:.4f}\n"
            f"Success rate: {stats['success_rate']:.1f}%",
            title=f"AI usage {stats['month']}",
        )
    )


if __name__ == "__main__":
    app()
