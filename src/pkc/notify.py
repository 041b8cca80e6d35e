"""User-facing notifications printed to the terminal."""

from rich.console import Console

STYLES = {
    "success": "green",
    "failure": "red",
    "animated": "blue",
}

ICONS = {
    "success": "✓",
    "failure": "✗",
    "animated": "…",
}


class Notifier:
    """Toasts for in-session progress, a HUD line when the session ends."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def toast(self, title: str, style: str = "success") -> None:
        color = STYLES.get(style, "white")
        icon = ICONS.get(style, "•")
        self.console.print(f"[{color}]{icon} {title}[/]")

    def hud(self, message: str) -> None:
        self.console.print(f"[bold green]{message}[/]")
