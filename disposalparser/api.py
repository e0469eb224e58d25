"""HTTP API exposing the disposal-site search.

Routes:
  GET  /api/disposal-sites?zipCode=73120&radius=20
  POST /api/scrape           {"zipCode": "73120", "radius": "5"}
  GET  /api/health

Run locally with ``python -m disposalparser --serve``.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any

from flask import Flask, jsonify, request

from disposalparser.query import ScrapeError, get_disposal_sites
from disposalparser.settings import DEFAULT_RADIUS, VALID_RADII, ScraperSettings, load_settings

logger = logging.getLogger(__name__)

# Radius used by POST /api/scrape when the body names none
SCRAPE_DEFAULT_RADIUS = "5"

app = Flask(__name__)


@lru_cache(maxsize=1)
def get_settings() -> ScraperSettings:
    return load_settings(os.getenv("DISPOSAL_PROFILE") or None)


def _is_development() -> bool:
    return os.getenv("APP_ENV", "").lower() == "development"


# ---------- CORS ----------


@app.after_request
def add_cors_headers(response: Any) -> Any:
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    return response


@app.errorhandler(405)
def method_not_allowed(_exc: Any) -> Any:
    return jsonify({"error": "Method not allowed"}), 405


# ---------- Helpers ----------


def _classify_failure(exc: Exception, zip_code: str, radius: str) -> Any:
    """Map a scrape failure to a user-facing response."""
    message = str(exc)
    if getattr(exc, "timed_out", False) or "timeout" in message.lower():
        return jsonify({"error": "Request timed out. Please try again."}), 504

    if "No results" in message:
        return (
            jsonify(
                {
                    "success": True,
                    "zipCode": zip_code,
                    "radius": radius,
                    "count": 0,
                    "sites": [],
                    "message": "No disposal sites found in this area",
                }
            ),
            200,
        )

    body: dict[str, Any] = {"error": "Failed to fetch disposal sites"}
    if _is_development():
        body["details"] = message
    return jsonify(body), 500


# ---------- Routes ----------


@app.get("/api/health")
def healthcheck() -> Any:
    return jsonify({"status": "OK"}), 200


@app.get("/api/disposal-sites")
def disposal_sites() -> Any:
    """
    Search disposal sites.
    Query params: zipCode (required), radius (one of 5, 10, 20, 50; default 20)
    """
    zip_code = (request.args.get("zipCode") or "").strip()
    if not zip_code:
        return jsonify({"error": "zipCode is required"}), 400

    radius = (request.args.get("radius") or DEFAULT_RADIUS).strip()
    if radius not in VALID_RADII:
        return (
            jsonify({"error": f"Invalid radius. Must be one of: {', '.join(VALID_RADII)}"}),
            400,
        )

    logger.info("Searching for disposal sites near %s within %s miles...", zip_code, radius)
    try:
        sites = get_disposal_sites(zip_code, radius, settings=get_settings())
    except Exception as exc:
        logger.exception("Error in disposal-sites API")
        return _classify_failure(exc, zip_code, radius)

    return (
        jsonify(
            {
                "success": True,
                "zipCode": zip_code,
                "radius": radius,
                "count": len(sites),
                "sites": [site.to_dict() for site in sites],
            }
        ),
        200,
    )


@app.post("/api/scrape")
def scrape() -> Any:
    """
    Scrape disposal sites.
    JSON body: zipCode (required), radius or radiusMiles (default 5)
    """
    payload: dict[str, Any] = request.get_json(silent=True) or {}

    zip_code = str(payload.get("zipCode") or "").strip()
    if not zip_code:
        return jsonify({"error": "zipCode is required"}), 400

    radius = str(payload.get("radius") or payload.get("radiusMiles") or SCRAPE_DEFAULT_RADIUS)

    logger.info("Scraping disposal sites for %s within %s miles...", zip_code, radius)
    try:
        sites = get_disposal_sites(zip_code, radius, settings=get_settings())
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except ScrapeError as exc:
        logger.error("Error in scrape API: %s", exc)
        body: dict[str, Any] = {"error": "Scrape failed"}
        if _is_development():
            body["details"] = str(exc)
        return jsonify(body), 500

    return (
        jsonify(
            {
                "success": True,
                "zipCode": zip_code,
                "radius": radius,
                "sites": [site.to_dict() for site in sites],
            }
        ),
        200,
    )


def serve(host: str = "127.0.0.1", port: int = 3000) -> None:
    """Run the development server."""
    logger.info("Server running on http://%s:%d", host, port)
    app.run(host=host, port=port, threaded=True)
