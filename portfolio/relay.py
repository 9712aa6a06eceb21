"""Upload relay: forwards a file posted to /upload to the Discord webhook.

The site itself is static; this Flask app serves it and adds the one dynamic
route. Each upload is written to the uploads directory, posted to the webhook
as multipart form data under its original name, and removed again whatever
the outcome.
"""

import logging
import uuid
from pathlib import Path

import requests
from flask import Flask, Response, request, send_from_directory
from werkzeug.datastructures import FileStorage

from portfolio.config import Config, load_config
from portfolio.models import RelayResult

logger = logging.getLogger(__name__)

NO_FILE = "No file uploaded."
SENT = "File uploaded and sent to Discord!"
SEND_FAILED = "Error sending to Discord: "


class RelayError(Exception):
    """The upload could not be forwarded."""


def relay_file(
    path: Path,
    filename: str,
    webhook_url: str | None,
    timeout: float = 30.0,
    session: requests.Session | None = None,
) -> None:
    """POST ``path`` to the webhook as field ``file``. Raises on any failure."""
    if not webhook_url:
        raise RelayError("webhook URL is not configured")
    http = session or requests
    with path.open("rb") as fh:
        resp = http.post(webhook_url, files={"file": (filename, fh)}, timeout=timeout)
    resp.raise_for_status()


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove temp upload %s: %s", path, e)


def handle_upload(
    upload: FileStorage | None,
    config: Config,
    session: requests.Session | None = None,
) -> RelayResult:
    if upload is None or not upload.filename:
        return RelayResult(status=400, body=NO_FILE)

    upload_dir = config.resolved_upload_dir
    upload_dir.mkdir(parents=True, exist_ok=True)
    tmp_path = upload_dir / uuid.uuid4().hex

    try:
        upload.save(tmp_path)
        logger.info("Received upload %s (%d bytes)", upload.filename, tmp_path.stat().st_size)
        relay_file(
            tmp_path, upload.filename, config.relay.webhook_url,
            timeout=config.relay.timeout, session=session,
        )
    except (RelayError, requests.RequestException, OSError) as e:
        logger.exception("Relaying %s failed", upload.filename)
        return RelayResult(status=500, body=SEND_FAILED + str(e))
    finally:
        _discard(tmp_path)

    logger.info("Relayed %s to webhook", upload.filename)
    return RelayResult(status=200, body=SENT)


def create_app(
    config: Config | None = None,
    session: requests.Session | None = None,
) -> Flask:
    """Build the site app: static files plus POST /upload."""
    config = config or load_config()
    site_root = config.resolved_site_root

    app = Flask(__name__, static_folder=str(site_root), static_url_path="")
    app.config["PORTFOLIO"] = config

    @app.get("/")
    def index() -> Response:
        return send_from_directory(site_root, "index.html")

    @app.post("/upload")
    def upload() -> Response:
        result = handle_upload(request.files.get("files"), config, session=session)
        return Response(result.body, status=result.status, mimetype="text/plain")

    return app


def serve(config: Config) -> None:
    app = create_app(config)
    logger.info("Listening on port %s", config.relay.port)
    app.run(host=config.relay.host, port=config.relay.port)
