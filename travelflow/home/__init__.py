"""Home page - Cached trip list and today's dashboard."""

from .cache import CacheEntry, CacheGateway, SwrOutcome
from .render_guard import RenderGenerationGuard, FrameScheduler, AsyncioFrameScheduler
from .controller import HomePageController

__all__ = [
    "CacheEntry",
    "CacheGateway",
    "SwrOutcome",
    "RenderGenerationGuard",
    "FrameScheduler",
    "AsyncioFrameScheduler",
    "HomePageController",
]
