"""Detect the link open in the frontmost browser."""

import logging

from ..models import SourceLink
from .applescript import run_applescript

logger = logging.getLogger(__name__)

GET_ACTIVE_APP_SCRIPT = (
    'tell application "System Events" to get name of first application process whose frontmost is true'
)

SAFARI_LIKE = {"Safari", "Safari Technology Preview", "Orion"}


def link_script(app: str) -> str:
    """AppleScript returning ``url<TAB>title`` for the app's current tab."""
    if app in SAFARI_LIKE:
        return (
            f'tell application "{app}" to return '
            "(URL of current tab of front window) & tab & (name of current tab of front window)"
        )
    return (
        f'tell application "{app}" to return '
        "(URL of active tab of front window) & tab & (title of active tab of front window)"
    )


def parse_link(output: str) -> SourceLink | None:
    url, _, title = output.partition("\t")
    url, title = url.strip(), title.strip()
    if not url or not title:
        return None
    return SourceLink(url=url, label=title)


class BrowserLinkDetector:
    """Returns the active tab of a supported browser, if one is frontmost."""

    def __init__(self, supported_browsers: list[str]):
        self.supported_browsers = list(supported_browsers)

    async def detect(self) -> SourceLink | None:
        app = await run_applescript(GET_ACTIVE_APP_SCRIPT)
        if app not in self.supported_browsers:
            logger.debug(f"Frontmost app '{app}' is not a supported browser")
            return None
        return parse_link(await run_applescript(link_script(app)))
