"""Exceptions raised by the capture pipeline."""


class CaptureError(Exception):
    """Base class for capture failures."""


class UnresolvedDestinationError(CaptureError):
    """No vault (or no file name) was chosen, so there is no path to write to."""


class MissingPrerequisiteError(CaptureError):
    """The environment cannot host a capture session at all."""


class NoVaultFoundError(MissingPrerequisiteError):
    def __init__(self):
        super().__init__(
            "No Obsidian vaults found. Open a vault in Obsidian or list one under 'vaults' in config.yaml."
        )


class PluginNotInstalledError(MissingPrerequisiteError):
    def __init__(self, plugin_id: str):
        self.plugin_id = plugin_id
        super().__init__(
            f"None of your vaults has the '{plugin_id}' community plugin enabled. "
            "Install it from Settings → Community plugins and try again."
        )


class ContentFetchError(CaptureError):
    """Page content or a transcript could not be retrieved."""


class WriteError(CaptureError):
    """The companion write URI could not be handed off."""
