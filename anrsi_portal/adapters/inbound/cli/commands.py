"""CLI interface for the ANRSI portal toolkit."""

import json
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ....config import settings, setup_logging
from ....core.domain import (
    LANGUAGE_NAMES,
    ArticleDraft,
    PAGE_KINDS,
    Locale,
    LocalizedDocument,
    UploadKind,
    get_page_kind,
)
from ....core.domain.exceptions import PortalError
from ....core.services.normalizer import normalize_article
from ....core.services.pagination import paginate_items
from ....core.services.serializer import serialize_article
from ...common.exception_handler import format_exception_json, user_message

app = typer.Typer(
    name="anrsi",
    help="ANRSI portal toolkit - edit multilingual portal content from the terminal",
    add_completion=False,
)

console = Console(force_terminal=True, legacy_windows=False)

# Determine if we're in debug mode (shows full stack traces)
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"


def handle_cli_error(exc: Exception) -> None:
    """Handle and display errors in CLI with structured format.

    In debug mode, shows full JSON error details.
    In normal mode, shows a user-friendly message with error code.

    Args:
        exc: The exception to handle.
    """
    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    if DEBUG_MODE:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, ensure_ascii=False),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
        return

    error_type = error_data["error"]["type"]
    error_code = error_data["error"].get("code", "UNKNOWN")
    location = error_data.get("location", {})

    console.print(f"\n[red]Error [{error_code}]:[/] {user_message(exc)}")
    console.print(f"[dim]Type: {error_type}[/]")
    if location:
        loc_str = f"{location.get('file', '?')}:{location.get('line', '?')} in {location.get('method', '?')}"
        console.print(f"[dim]Location: {loc_str}[/]")
    console.print("[dim]Set DEBUG=true for full details[/]")


def _container():
    from ....composition import container

    setup_logging(level=settings.log_level, json_format=settings.log_json)
    settings.ensure_directories()
    return container


def _require_editor() -> None:
    session = _container().get_session_manager()
    if not session.is_editor():
        console.print("[red]Error:[/] You need to log in with an editor or admin account.")
        console.print("[dim]Run: anrsi login[/]")
        raise typer.Exit(1)


# =============================================================================
# Session
# =============================================================================


@app.command()
def login(
    username: str = typer.Option(..., prompt=True, help="Admin username"),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Admin password"),
) -> None:
    """Log in to the portal backend and remember the session."""
    session = _container().get_session_manager()
    try:
        with console.status("[bold green]Logging in...[/]"):
            user = session.login(username, password)
    except PortalError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)
    console.print(f"✅ Logged in as [bold]{user.display_name}[/] ({user.role.value})")


@app.command()
def logout() -> None:
    """Forget the stored token (language preferences are kept)."""
    _container().get_session_manager().logout()
    console.print("Logged out.")


@app.command()
def whoami() -> None:
    """Show the logged-in user and language preferences."""
    session = _container().get_session_manager()
    state = session.session
    user = session.current_user()
    if user is None:
        console.print("Not logged in.")
    else:
        console.print(f"[bold]{user.display_name}[/] <{user.email}>")
        console.print(f"Role: {user.role.value}  Editor: {'yes' if session.is_editor() else 'no'}")
    console.print(f"Admin language: {LANGUAGE_NAMES[state.admin_language]}")
    console.print(f"Public language: {LANGUAGE_NAMES[state.public_language]}")


@app.command()
def language(
    code: str = typer.Argument(..., help="fr, ar or en"),
    public: bool = typer.Option(False, "--public", help="Set the public site language"),
) -> None:
    """Set the admin (default) or public language preference."""
    session = _container().get_session_manager()
    try:
        locale = session.set_public_language(code) if public else session.set_admin_language(code)
    except PortalError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)
    target = "Public" if public else "Admin"
    console.print(f"{target} language set to {LANGUAGE_NAMES[locale]}")


# =============================================================================
# Pages
# =============================================================================


@app.command()
def kinds() -> None:
    """List the editable page kinds."""
    table = Table(title="Page kinds")
    table.add_column("Kind", style="cyan")
    table.add_column("Slug")
    table.add_column("Lists")
    for kind in PAGE_KINDS.values():
        if kind.is_page:
            table.add_row(kind.name, kind.slug, ", ".join(kind.list_keys) or "-")
    console.print(table)


@app.command()
def pages() -> None:
    """List the pages stored in the backend."""
    _require_editor()
    try:
        stored = _container().get_portal_client().list_pages()
    except PortalError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    table = Table(title="Pages")
    table.add_column("ID", justify="right")
    table.add_column("Slug", style="cyan")
    table.add_column("Type")
    table.add_column("Published")
    table.add_column("Active")
    for page in stored:
        table.add_row(
            str(page.id),
            page.slug,
            page.page_type or "-",
            "✅" if page.is_published else "❌",
            "✅" if page.is_active else "❌",
        )
    console.print(table)


@app.command()
def show(
    slug: str = typer.Argument(..., help="Page kind or slug"),
    lang: str = typer.Option(None, "--lang", "-l", help="fr, ar or en (default: admin language)"),
    list_key: str = typer.Option(None, "--list", help="List to display"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    page_size: int = typer.Option(settings.default_page_size, "--page-size", help="Items per page"),
) -> None:
    """Show one page in one language, with a paginated list."""
    container = _container()
    session = container.get_session_manager()
    try:
        kind = get_page_kind(slug)
        locale = Locale.parse(lang) if lang else session.session.admin_language
        editor = container.create_page_editor(kind.name)
        content = editor.open(admin=session.is_authenticated())[locale]
        key = list_key or (kind.list_keys[0] if kind.list_keys else None)
        window, visible = (
            paginate_items(content.lists.get(key, []), page, page_size) if key else (None, [])
        )
    except PortalError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    console.print(
        Panel.fit(
            f"[bold]{content.hero_title or content.title}[/]\n[dim]{content.hero_subtitle}[/]",
            title=f"{kind.slug} ({LANGUAGE_NAMES[locale]})",
            border_style="blue",
        )
    )
    if content.intro_text:
        console.print(content.intro_text)
    if key is None or window is None:
        return

    table = Table(title=key)
    table.add_column("#", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Details")
    table.add_column("Attachments")
    for offset, item in enumerate(visible):
        details = ", ".join(
            f"{name}={value}" for name, value in item.fields.items() if isinstance(value, str) and value
        )
        table.add_row(
            str(window.start + offset),
            item.title or "[dim](untitled)[/]",
            details,
            "\n".join(url for url in item.attachments if url),
        )
    console.print(table)

    links = " ".join(
        "…" if number is None else (f"[bold][{number}][/]" if number == window.page else str(number))
        for number in window.page_numbers
    )
    console.print(f"Page {window.page}/{max(window.total_pages, 1)}  {links}")


@app.command()
def export(
    slug: str = typer.Argument(..., help="Page kind or slug"),
    output: Path = typer.Option(None, "--output", "-o", help="Write to this file"),
) -> None:
    """Export a page's normalized multilingual document as JSON."""
    try:
        container = _container()
        admin = container.get_session_manager().is_authenticated()
        document = container.create_page_editor(slug).open(admin=admin)
        text = json.dumps(document.model_dump(by_alias=True), indent=2, ensure_ascii=False)
        if output:
            output.write_text(text, encoding="utf-8")
    except (PortalError, OSError) as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    if output:
        console.print(f"✅ Exported {slug} to {output}")
    else:
        typer.echo(text)


@app.command()
def push(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Document JSON (from export)"),
    draft: bool = typer.Option(False, "--draft", help="Save unpublished"),
) -> None:
    """Save an edited document JSON back to its page."""
    _require_editor()
    try:
        document = LocalizedDocument.model_validate_json(file.read_text(encoding="utf-8"))
        editor = _container().create_page_editor(document.kind)
        editor.open()
        editor.load(document)
        with console.status("[bold green]Saving...[/]"):
            saved = editor.save(is_published=not draft)
    except (PortalError, OSError, ValueError) as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)
    console.print(f"✅ Saved page [cyan]{saved.slug}[/] (id={saved.id})")


@app.command()
def upload(
    slug: str = typer.Argument(..., help="Page kind or slug"),
    list_key: str = typer.Argument(..., help="List holding the item, e.g. rapports"),
    index: int = typer.Argument(..., help="Item position in the list"),
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Files to upload"),
    slot: int = typer.Option(0, "--slot", help="Attachment slot of the first file"),
    lang: str = typer.Option(None, "--lang", "-l", help="Locale the upload is made from"),
    image: bool = typer.Option(False, "--image", help="Upload as images instead of documents"),
) -> None:
    """Upload files to an item's attachments in every language, then save."""
    _require_editor()
    container = _container()
    kind = UploadKind.IMAGE if image else UploadKind.DOCUMENT
    try:
        locale = Locale.parse(lang) if lang else container.get_session_manager().session.admin_language
        editor = container.create_page_editor(slug)
        editor.open()
        with console.status(f"[bold green]Uploading {len(files)} file(s)...[/]"):
            outcomes = editor.upload_many(locale, list_key, index, slot, files, kind)
        for outcome in outcomes:
            if outcome.ok:
                console.print(f"✅ [{outcome.slot}] {outcome.path.name} → {outcome.url}")
            else:
                console.print(f"❌ [{outcome.slot}] {outcome.path.name}: {user_message(outcome.error)}")
        if any(outcome.ok for outcome in outcomes):
            saved = editor.save(is_published=editor.page.is_published if editor.page else True)
            console.print(f"Saved page [cyan]{saved.slug}[/]")
    except PortalError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    if not all(outcome.ok for outcome in outcomes):
        raise typer.Exit(1)


@app.command("article-export")
def article_export(
    article_id: int = typer.Argument(..., help="Article id"),
    output: Path = typer.Option(None, "--output", "-o", help="Write to this file"),
) -> None:
    """Export an article as an editable multilingual draft (JSON)."""
    _require_editor()
    try:
        draft = normalize_article(_container().get_portal_client().get_article(article_id))
        text = json.dumps(draft.model_dump(by_alias=True), indent=2, ensure_ascii=False)
        if output:
            output.write_text(text, encoding="utf-8")
    except (PortalError, OSError) as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    if output:
        console.print(f"✅ Exported article {article_id} to {output}")
    else:
        typer.echo(text)


@app.command("article-push")
def article_push(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Article draft JSON"),
    draft: bool = typer.Option(False, "--draft", help="Save unpublished"),
) -> None:
    """Create or update an article from a draft (a draft without id creates one)."""
    _require_editor()
    try:
        article = ArticleDraft.model_validate_json(file.read_text(encoding="utf-8"))
        if draft:
            article.published = False
        payload = serialize_article(article)
        client = _container().get_portal_client()
        with console.status("[bold green]Saving...[/]"):
            if article.id is not None:
                saved = client.update_article(article.id, payload)
            else:
                saved = client.create_article(payload)
    except (PortalError, OSError, ValueError) as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)
    saved = saved or {}
    console.print(f"✅ Saved article [cyan]{saved.get('title', payload.title)}[/] (id={saved.get('id')})")


@app.command("import-json")
def import_json(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Calls-for-applications JSON"),
) -> None:
    """Replace the calls-for-applications page content from a JSON file."""
    _require_editor()
    try:
        with console.status("[bold green]Importing...[/]"):
            result = _container().get_portal_client().import_page_json(file)
    except PortalError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)
    console.print(f"✅ {result.get('message', 'Import complete')}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP service."""
    import uvicorn

    uvicorn.run(
        "anrsi_portal.adapters.inbound.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    app()
