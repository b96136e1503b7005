"""Static site publishing for reference-linked collections."""

from .builder import PublishConfig, PublishResult, SitePublisher

__all__ = ["PublishConfig", "PublishResult", "SitePublisher"]
