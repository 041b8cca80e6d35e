"""Vault watcher that keeps the note index fresh."""

import threading
import time
from pathlib import Path

from rich.console import Console
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .models import Vault
from .vault.index import NoteIndex

console = Console()


class VaultChangeHandler(FileSystemEventHandler):
    """Collects note changes per vault and debounces them."""

    def __init__(self, vault: Vault, debounce: float = 2.0):
        super().__init__()
        self.vault = vault
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._debounce = debounce
        self._callback = None

    def set_callback(self, callback):
        self._callback = callback

    def _is_note(self, path: str) -> bool:
        p = Path(path)
        if p.suffix.lower() != ".md":
            return False
        try:
            rel = p.relative_to(self.vault.root_path)
        except ValueError:
            return False
        return not any(part.startswith(".") for part in rel.parts)

    def on_created(self, event):
        if not event.is_directory and self._is_note(event.src_path):
            self._touch()

    def on_deleted(self, event):
        if not event.is_directory and self._is_note(event.src_path):
            self._touch()

    def on_moved(self, event):
        if event.is_directory or self._is_note(event.src_path) or self._is_note(event.dest_path):
            self._touch()

    def _touch(self):
        with self._lock:
            if self._timer:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, self._flush)
            self._timer.daemon = True
            self._timer.start()

    def _flush(self):
        if self._callback:
            self._callback(self.vault)


class IndexWatcher:
    """Watches vault roots and rebuilds their index entries on change."""

    def __init__(self, config: dict, vaults: list[Vault], debounce: float = 2.0):
        self.config = config
        self.vaults = vaults
        self.index = NoteIndex(config["index_path"])
        self._index_lock = threading.Lock()
        self.handlers = [VaultChangeHandler(v, debounce=debounce) for v in vaults]
        for handler in self.handlers:
            handler.set_callback(self._reindex)
        self.observer = Observer()

    def _reindex(self, vault: Vault):
        """Rebuild one vault's entry and persist the snapshot."""
        with self._index_lock:
            try:
                count = self.index.build(vault)
                self.index.save()
                console.print(f"  [green]✓ Reindexed {vault.name}: {count} note(s)[/]")
            except OSError as e:
                console.print(f"  [red]✗ Reindex of {vault.name} failed: {e}[/]")

    def run(self):
        """Start watching (blocks until Ctrl+C)."""
        with self._index_lock:
            counts = self.index.refresh(self.vaults)
        for name, count in counts.items():
            console.print(f"  [dim]{name}: {count} note(s) indexed[/]")

        for handler in self.handlers:
            self.observer.schedule(handler, handler.vault.root_path, recursive=True)
        self.observer.start()

        console.print(f"[bold]Watching {len(self.vaults)} vault(s) for note changes... (Ctrl+C to stop)[/]")

        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Stopping watcher...[/]")
            self.observer.stop()
        self.observer.join()
        console.print("[green]✓ Watcher stopped.[/]")
