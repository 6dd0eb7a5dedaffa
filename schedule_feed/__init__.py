import logging
from email.utils import format_datetime

from flask import Flask, Response, request

from .config import FeedConfig
from .exceptions import CollaboratorError, ConfigurationError
from .feed_service import FeedResult, FeedService
from .output.ics_writer import ICSWriter
from .storage.base import ScheduleRepository
from .storage.json_repository import JSONScheduleRepository
from .tokens import TokenAuthority, TokenIndex

logger = logging.getLogger(__name__)


def build_feed_service(
    config: FeedConfig, repository: ScheduleRepository | None = None
) -> FeedService:
    """Wire a FeedService from configuration."""
    if repository is None:
        repository = JSONScheduleRepository(config.data_file)
    authority = TokenAuthority(config.calendar_secret, max_users=config.max_users)
    index = None
    if config.token_index:
        index = TokenIndex(
            authority, repository, min_rebuild_interval=config.token_index_refresh
        )
    return FeedService(
        repository,
        authority,
        writer=ICSWriter(timezone_rules=config.timezone_rules),
        index=index,
    )


def _plain(message: str, status: int) -> Response:
    return Response(message, status=status, content_type="text/plain")


def _feed_response(result: FeedResult) -> Response:
    headers = {
        "Content-Disposition": f'inline; filename="{result.filename}"',
        "Cache-Control": "public, max-age=300, must-revalidate",
        "X-Content-Type-Options": "nosniff",
    }
    if result.last_modified is not None:
        headers["Last-Modified"] = format_datetime(result.last_modified, usegmt=True)
        headers["ETag"] = f'"{int(result.last_modified.timestamp() * 1000)}"'
    return Response(result.body, status=200, content_type=result.content_type, headers=headers)


def create_app(
    config: FeedConfig | None = None, repository: ScheduleRepository | None = None
):
    """Create the Flask app serving personal calendar feeds.

    The repository handle is owned by the caller; when omitted, the JSON
    data file from the configuration is used.
    """
    if config is None:
        config = FeedConfig.from_env()
    if not config.has_secret:
        logger.error("CALENDAR_SECRET is not set; calendar feeds will fail until it is configured")

    app = Flask(__name__)
    feed_service = build_feed_service(config, repository)
    app.extensions["feed_service"] = feed_service

    def serve_feed(token: str | None) -> Response:
        if not token:
            return _plain("Not found", 404)
        try:
            result = feed_service.get_feed(token)
        except ConfigurationError as e:
            logger.error(f"Calendar feed misconfigured: {e}")
            return _plain("Internal Server Error", 500)
        except CollaboratorError as e:
            logger.error(f"Error generating calendar feed: {e}")
            return _plain("Internal Server Error", 500)

        if not result.found:
            return _plain("Not found", 404)
        return _feed_response(result)

    @app.route("/calendar/<token>.ics", methods=["GET"])
    def calendar_feed(token):
        """Serve the feed for the token in the path."""
        return serve_feed(token)

    @app.route("/api/calendar/feed.ics", methods=["GET"])
    def calendar_feed_query():
        """Serve the feed for the ``token`` query parameter."""
        return serve_feed(request.args.get("token"))

    return app
