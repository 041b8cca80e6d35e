"""CLI entry point for Personal Knowledge Capture."""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import load_config, DEFAULT_CONFIG

console = Console()


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """Personal Knowledge Capture - clip highlights, links and pages into Obsidian."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


def _get_config(ctx) -> dict:
    return load_config(ctx.obj.get("config_path"))


def _get_vaults(config: dict, name: str | None = None) -> list:
    from .vault.vaults import find_vaults

    vaults = find_vaults(config)
    if name:
        vaults = [v for v in vaults if v.name == name]
    return vaults


@cli.command()
@click.option("--path", default=None, help="Custom config directory")
def init(path):
    """Write a starter configuration file."""
    import yaml

    base = Path(path).expanduser().resolve() if path else Path("~/.pkc").expanduser()
    base.mkdir(parents=True, exist_ok=True)

    config_file = base / "config.yaml"
    if config_file.exists():
        console.print(f"[yellow]Config already exists: {config_file}[/]")
        return

    cfg = dict(DEFAULT_CONFIG)
    cfg["index_path"] = str(base / "index.json")
    cfg["state_path"] = str(base / "state.yaml")
    cfg.pop("vaults")
    cfg.pop("obsidian_config")
    header = (
        "# Claude API key for page summaries (or set ANTHROPIC_API_KEY env var)\n"
        "# claude_api_key: sk-ant-your-key-here\n\n"
        "# Vaults are read from Obsidian's obsidian.json unless listed here\n"
        "# vaults:\n"
        "#   - name: Notes\n"
        "#     path: ~/Documents/Notes\n\n"
    )
    config_file.write_text(header + yaml.dump(cfg, default_flow_style=False, sort_keys=False))
    console.print(f"[bold green]✓ Created config: {config_file}[/]")
    console.print("  Run: pkc index")


@cli.command()
@click.pass_context
def vaults(ctx):
    """List known vaults and whether they can receive captures."""
    from .vault.index import NoteIndex
    from .vault.vaults import installed_plugins

    config = _get_config(ctx)
    found = _get_vaults(config)
    if not found:
        console.print("[yellow]No vaults found. Open one in Obsidian or add 'vaults' to config.yaml.[/]")
        return

    plugin_id = config["required_plugin"]
    index = NoteIndex(config["index_path"])

    table = Table(title="Vaults")
    table.add_column("Name", style="cyan")
    table.add_column("Path")
    table.add_column(plugin_id, justify="center")
    table.add_column("Indexed", style="dim")
    for v in found:
        ok = plugin_id in installed_plugins(v)
        table.add_row(v.name, v.root_path, "[green]✓[/]" if ok else "[red]✗[/]", index.indexed_at(v) or "never")
    console.print(table)


@cli.command()
@click.option("--vault", "vault_name", default=None, help="Only rebuild this vault")
@click.pass_context
def index(ctx, vault_name):
    """Rebuild the cached note index."""
    from .vault.index import NoteIndex

    config = _get_config(ctx)
    found = _get_vaults(config, vault_name)
    if not found:
        console.print("[red]No matching vaults found.[/]")
        return

    counts = NoteIndex(config["index_path"]).refresh(found)
    for name, count in counts.items():
        console.print(f"[green]✓ {name}: {count} note(s)[/]")


@cli.command()
@click.argument("query")
@click.option("--vault", "vault_name", default=None, help="Vault to search (default: first)")
@click.pass_context
def search(ctx, query, vault_name):
    """Find existing notes by title."""
    from .query.search import search_notes

    config = _get_config(ctx)
    found = _get_vaults(config, vault_name)
    if not found:
        console.print("[red]No matching vaults found.[/]")
        return

    results = search_notes(query, found[0], config)
    if not results:
        console.print("[yellow]No matching notes. Have you run 'pkc index'?[/]")
        return
    console.print(_matches_table(results, title=f"Notes in {found[0].name}"))


def _matches_table(notes, title="Existing notes") -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", width=3)
    table.add_column("Title", style="cyan")
    table.add_column("Path", style="dim")
    for i, note in enumerate(notes, 1):
        table.add_row(str(i), note.title, note.path)
    return table


@cli.command()
@click.option("--vault", "vault_name", default=None, help="Vault to capture into")
@click.option("--folder", default=None, help="Folder inside the vault")
@click.option("--title", default=None, help="Note title (an existing note is appended to)")
@click.option("--note", "note_text", default=None, help="Free-text note")
@click.option("--highlight", default=None, help="Highlight text (skips selection detection)")
@click.option("--url", default=None, help="Source URL (skips browser detection)")
@click.option("--label", default=None, help="Display title for --url")
@click.option("--page/--no-page", "include_page", default=None, help="Include page content or transcript")
@click.option("--summary/--no-summary", "include_summary", default=None, help="Include an AI summary")
@click.option("--detect/--no-detect", default=True, help="Detect selection and browser link")
@click.option("--dry-run", is_flag=True, help="Print the URI instead of opening it")
@click.option("--yes", "-y", is_flag=True, help="Don't prompt; use options and saved defaults")
@click.pass_context
def capture(ctx, vault_name, folder, title, note_text, highlight, url, label,
            include_page, include_summary, detect, dry_run, yes):
    """Capture a highlight, link or page into a vault note."""
    config = _get_config(ctx)
    options = {
        "vault_name": vault_name, "folder": folder, "title": title, "note_text": note_text,
        "highlight": highlight, "url": url, "label": label, "include_page": include_page,
        "include_summary": include_summary, "detect": detect, "dry_run": dry_run, "yes": yes,
    }
    asyncio.run(_run_capture(config, options))


async def _ask(prompt_fn, *args, **kwargs):
    """Run a blocking click prompt off the event loop so fetches keep going."""
    return await asyncio.to_thread(prompt_fn, *args, **kwargs)


async def _run_capture(config: dict, opts: dict) -> None:
    from .capture import CaptureSession, CaptureState
    from .errors import CaptureError, MissingPrerequisiteError
    from .models import SourceLink
    from .notify import Notifier
    from .vault.writer import DryRunWriter

    overrides = {}
    if opts["url"]:
        link = SourceLink(url=opts["url"], label=opts["label"])

        async def detect_link():
            return link

        overrides["detect_link"] = detect_link
    elif not opts["detect"]:
        async def detect_link():
            return None

        overrides["detect_link"] = detect_link

    if opts["highlight"] is not None or not opts["detect"]:
        highlight = opts["highlight"]

        async def detect_selection():
            return highlight

        overrides["detect_selection"] = detect_selection

    if opts["dry_run"]:
        overrides["writer"] = DryRunWriter(console)

    session = CaptureSession(config, _get_vaults(config), notifier=Notifier(console), **overrides)
    yes = opts["yes"]

    try:
        with console.status("Capturing..."):
            draft = await session.start()
    except MissingPrerequisiteError as e:
        console.print(Panel(str(e), title="Cannot capture", border_style="red"))
        return

    try:
        if opts["vault_name"]:
            session.set_vault(opts["vault_name"])
        elif not yes and len(session.vaults) > 1:
            names = [v.name for v in session.vaults]
            session.set_vault(await _ask(click.prompt, "Vault", type=click.Choice(names), default=draft.vault.name))

        if opts["folder"] is not None:
            draft.folder = opts["folder"]
        elif not yes:
            draft.folder = await _ask(click.prompt, "Storage path", default=draft.folder, show_default=True)

        if opts["title"] is not None:
            session.update_title(opts["title"])
        elif yes:
            console.print("[red]--title is required with --yes[/]")
            session.cancel()
            return
        else:
            matches = session.update_title(await _ask(click.prompt, "Title"))
            if matches:
                console.print(_matches_table(matches))
                choice = await _ask(click.prompt, "Append to note # (0 = new note)", type=click.IntRange(0, len(matches)), default=0)
                if choice:
                    session.select_match(matches[choice - 1])

        if opts["note_text"] is not None:
            draft.note_text = opts["note_text"]
        elif not yes:
            draft.note_text = await _ask(click.prompt, "Note", default="", show_default=False) or None

        if draft.highlight_text:
            console.print(Panel(draft.highlight_text, title="Highlight", border_style="dim"))
            if not yes:
                draft.include_highlight = await _ask(click.confirm, "Include highlight?", default=True)

        if draft.source:
            with console.status("Fetching page content..."):
                await session.wait_for_content()

        if draft.page_body:
            if opts["include_page"] is not None:
                draft.include_page_body = opts["include_page"]
            elif not yes:
                draft.include_page_body = await _ask(click.confirm, f"{session.page_prompt}?", default=False)

        if session.summary_available:
            wanted = opts["include_summary"]
            if wanted is None and not yes:
                wanted = await _ask(click.confirm, "Include AI summary?", default=False)
            if wanted:
                await session.set_include_summary(True)

        resolution = session.resolution()
        action = "Appending to" if resolution.append else "Creating"
        console.print(f"[blue]{action} {resolution.relative_path}.md in {draft.vault.name}[/]")

        result = await session.submit()
    except click.Abort:
        session.cancel()
        raise
    except CaptureError as e:
        console.print(f"[red]{e}[/]")
        return

    if session.state == CaptureState.FAILED:
        console.print(f"[red]✗ Capture failed: {result.error}[/]")
    elif result.fallback_used:
        console.print("[yellow]Captured as a new note after the append attempt failed.[/]")


@cli.command()
@click.option("--debounce", default=2.0, help="Seconds to wait after last change before reindexing")
@click.pass_context
def watch(ctx, debounce):
    """Watch vaults and keep the note index up to date."""
    from .watcher import IndexWatcher

    config = _get_config(ctx)
    found = _get_vaults(config)
    if not found:
        console.print("[red]No vaults found.[/]")
        return

    watcher = IndexWatcher(config, found, debounce=debounce)
    watcher.run()


if __name__ == "__main__":
    cli()
