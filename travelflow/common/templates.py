"""Common HTML snippets and the rendering sink shared by all Travel Flow pages."""

import html
from typing import Optional


def escape(text: Optional[object]) -> str:
    """HTML-escape a value, rendering None as an empty string."""
    if text is None:
        return ""
    return html.escape(str(text))


class RenderSink:
    """Where pages put their HTML.

    Implementations replace or append content in a named container and then
    resolve ``data-i18n`` strings inside it.
    """

    def replace(self, container: str, content: str) -> None:
        raise NotImplementedError

    def append(self, container: str, content: str) -> None:
        raise NotImplementedError

    def apply_i18n(self, container: str) -> None:
        raise NotImplementedError


class HtmlSink(RenderSink):
    """In-memory sink keeping each container's HTML as a string."""

    def __init__(self):
        self.containers: dict[str, str] = {}
        self.operations: list[tuple[str, str]] = []  # (operation, container)

    def replace(self, container: str, content: str) -> None:
        self.containers[container] = content
        self.operations.append(("replace", container))

    def append(self, container: str, content: str) -> None:
        self.containers[container] = self.containers.get(container, "") + content
        self.operations.append(("append", container))

    def apply_i18n(self, container: str) -> None:
        self.operations.append(("i18n", container))

    def get(self, container: str) -> str:
        """HTML of ``container`` with nested containers filled in.

        A container is nested when another container's HTML holds an element
        whose opening tag ends in ``id="<name>">``; its content is placed
        right after that tag, as in the page's DOM.
        """
        return self._resolve(container, frozenset())

    def _resolve(self, container: str, seen: frozenset) -> str:
        content = self.containers.get(container, "")
        seen = seen | {container}
        for name in self.containers:
            marker = f'id="{name}">'
            if name not in seen and marker in content:
                content = content.replace(marker, marker + self._resolve(name, seen), 1)
        return content

    def count(self, operation: str, container: Optional[str] = None) -> int:
        return sum(
            1 for op, name in self.operations
            if op == operation and (container is None or name == container)
        )


NO_TRIPS_HTML = """
<div class="empty-state">
    <div class="empty-state-icon">✈️</div>
    <h3 class="empty-state-title" data-i18n="home.noTrips">No trips yet</h3>
    <p class="empty-state-text" data-i18n="home.noTripsText">Your trips will appear here</p>
</div>
"""

FIRST_TRIP_HTML = """
<div class="empty-state">
    <h3 class="empty-state-title" data-i18n="home.emptyTitle">Your journey starts here!</h3>
    <p class="empty-state-text" data-i18n="home.emptyText">Collect the PDF receipts of your flights and hotels and create your first trip.</p>
    <button class="btn btn-primary empty-state-cta" id="empty-new-trip-btn" data-i18n="trip.new">New Trip</button>
</div>
"""


def error_state_html(message: str) -> str:
    """Full-page error shown when a trip cannot be loaded."""
    return f"""
<div class="empty-state">
    <div class="empty-state-icon">❌</div>
    <h3 class="empty-state-title" data-i18n="common.error">Error</h3>
    <p class="empty-state-text">{escape(message)}</p>
    <a href="./" class="btn btn-primary" data-i18n="common.backHome">Back to home</a>
</div>
"""
