from __future__ import annotations

import logging
from typing import Optional

from flask import Flask

from wtm_web.adapters.wayback_client import WaybackClient
from wtm_web.config.ini_config import AppSettings, IniConfig
from wtm_web.services.evolution_service import EvolutionService
from wtm_web.services.snapshot_locator import SnapshotLocator
from wtm_web.services.url_normalization import WaybackUrlNormalizer
from wtm_web.web.routes import create_blueprint


def create_app(settings: Optional[AppSettings] = None) -> Flask:
    """
    Application factory + composition root: loads settings, wires the
    archive client into both services and registers the API blueprint.
    """
    if settings is None:
        settings = IniConfig.from_env_or_default().load_settings()

    client = WaybackClient(
        cdx_endpoint=settings.cdx_endpoint,
        user_agent=settings.user_agent,
        row_limit=settings.row_limit,
        index_timeout_seconds=settings.index_timeout_seconds,
        page_timeout_seconds=settings.page_timeout_seconds,
    )

    url_normalizer = WaybackUrlNormalizer(default_scheme=settings.default_scheme)

    snapshot_locator = SnapshotLocator(
        client=client,
        archive_base=settings.archive_base,
        lookback_years=settings.lookback_years,
        url_normalizer=url_normalizer,
    )

    evolution_service = EvolutionService(
        client=client,
        fetch_workers=settings.fetch_workers,
        url_normalizer=url_normalizer,
    )

    app = Flask(__name__)
    app.register_blueprint(create_blueprint(snapshot_locator, evolution_service))

    app.logger.setLevel(settings.log_level)
    logging.getLogger("wtm_web").setLevel(settings.log_level)

    app.config["HOST"] = settings.flask_host
    app.config["PORT"] = settings.flask_port
    app.config["DEBUG"] = settings.flask_debug

    return app
