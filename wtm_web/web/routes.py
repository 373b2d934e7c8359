## routes.py
from __future__ import annotations

import time
from typing import Any, List

from flask import Blueprint, current_app, jsonify, request

from wtm_web.domain.errors import InvalidInput, UpstreamUnavailable
from wtm_web.domain.models import YearGroup


def _error(message: str, code: int):
    return jsonify({"message": message}), code


def _parse_year_groups(body: Any) -> List[YearGroup]:
    if not isinstance(body, dict):
        raise InvalidInput("Request body must be a JSON object")
    raw_groups = body.get("yearGroups")
    if not isinstance(raw_groups, list):
        raise InvalidInput("yearGroups must be a list")
    return [YearGroup.from_dict(g) for g in raw_groups]


def create_blueprint(snapshot_locator, evolution_service) -> Blueprint:
    bp = Blueprint("api", __name__, url_prefix="/api")

    @bp.get("/health")
    def health():
        return jsonify({"status": "ok"})

    @bp.post("/wayback/search")
    def search():
        body = request.get_json(silent=True)
        url = body.get("url") if isinstance(body, dict) else None

        started = time.monotonic()
        try:
            result = snapshot_locator.locate(url)
        except InvalidInput as e:
            current_app.logger.warning("Rejected search: %s", e)
            return _error("Invalid URL provided", 400)
        except UpstreamUnavailable as e:
            current_app.logger.warning("Wayback index unavailable: %s", e)
            return _error("Failed to fetch from Wayback Machine", 502)
        except Exception:
            current_app.logger.exception("Wayback search error")
            return _error("Failed to search the Internet Archive", 500)

        current_app.logger.info(
            "Search %s: %d snapshots in %d years (%.2fs)",
            result.url,
            result.total_snapshots,
            len(result.year_groups),
            time.monotonic() - started,
        )
        return jsonify(result.to_dict())

    @bp.post("/wayback/evolution")
    def evolution():
        body = request.get_json(silent=True)

        started = time.monotonic()
        try:
            year_groups = _parse_year_groups(body)
            result = evolution_service.analyze(year_groups, body.get("url"))
        except InvalidInput as e:
            current_app.logger.warning("Rejected evolution request: %s", e)
            return _error("Invalid request data", 400)
        except Exception:
            current_app.logger.exception("Evolution analysis error")
            return _error("Failed to analyze messaging evolution", 500)

        shift = result.biggest_shift
        current_app.logger.info(
            "Evolution %s: %d years, shift=%s (%.2fs)",
            result.url,
            len(result.years),
            f"{shift.from_year}->{shift.to_year} {shift.score:.2f}" if shift else "none",
            time.monotonic() - started,
        )
        return jsonify(result.to_dict())

    return bp
