"""
Table Reconciler: HTTP API.

Upload an original and an updated table, review the differences, and
download the corrected original with the accepted differences applied.
Each request builds its own ``ReconciliationSession``; nothing is kept
between requests.
"""

from __future__ import annotations

import json
import logging
import tempfile
import uuid
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Tuple

from flask import Flask, request, send_file
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from table_reconciler import __version__
from table_reconciler.config import PipelineConfig
from table_reconciler.pipeline import ReconciliationSession
from table_reconciler.readers import ALLOWED_EXTENSIONS, allowed_file
from table_reconciler.schema import DiffKey, DiffStatus, parse_kind, parse_status

# -------------------------------------------------------
# App Setup
# -------------------------------------------------------

app = Flask(__name__)

app.config["MAX_CONTENT_LENGTH"] = 16 * 1024 * 1024
app.config["UPLOAD_FOLDER"] = Path(tempfile.gettempdir())

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SESSION_CONFIG = PipelineConfig(log_level=logging.WARNING)

UPLOAD_FIELDS = ("file1", "file2")

# -------------------------------------------------------
# Helpers
# -------------------------------------------------------


def error_response(message: str, status: int) -> Tuple[Dict[str, Any], int]:
    return {"success": False, "error": message}, status


def get_uploads() -> Dict[str, FileStorage]:
    """Return the two uploaded files, raising ``ValueError`` when either is unusable."""
    uploads: Dict[str, FileStorage] = {}
    for field in UPLOAD_FIELDS:
        if field not in request.files:
            raise ValueError(f"No file uploaded for '{field}'")

        file = request.files[field]
        if not file.filename:
            raise ValueError(f"No file selected for '{field}'")
        if not allowed_file(file.filename):
            raise ValueError(
                f"Invalid file type for '{field}'. "
                f"Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
            )
        uploads[field] = file
    return uploads


def upload_suffix(raw_name: str) -> str:
    """Extension of the name as uploaded, e.g. ``.csv``."""
    return Path(raw_name).suffix.lower()


def download_basename(raw_name: str) -> str:
    """Safe name for the corrected download.

    ``secure_filename`` drops non-ASCII characters and can swallow the dot
    (``"日本.csv"`` → ``"csv"``); such names fall back to ``file<suffix>``.
    """
    suffix = upload_suffix(raw_name)
    name = secure_filename(raw_name)
    if not suffix or not name.lower().endswith(suffix) or name.lower() == suffix:
        return f"file{suffix}"
    return name


def compare_uploads(uploads: Dict[str, FileStorage]) -> ReconciliationSession:
    """Save both uploads, compare them, and remove the saved copies."""
    folder = app.config["UPLOAD_FOLDER"]
    paths: List[Path] = []
    try:
        for field in UPLOAD_FIELDS:
            # saved name never depends on the client name beyond its extension
            path = folder / f"{uuid.uuid4().hex}{upload_suffix(uploads[field].filename)}"
            uploads[field].save(path)
            paths.append(path)

        session = ReconciliationSession(SESSION_CONFIG)
        session.compare_files(
            paths[0],
            paths[1],
            original_name=download_basename(uploads["file1"].filename),
        )
        return session
    finally:
        for path in paths:
            path.unlink(missing_ok=True)


def parse_decisions(raw: str) -> Dict[DiffStatus, List[DiffKey]]:
    """Parse the ``decisions`` form field into keys grouped by status.

    Expected shape: ``[{"row": 2, "column_index": 1, "status": "accepted"}, ...]``
    """
    try:
        items = json.loads(raw or "[]")
    except json.JSONDecodeError as exc:
        raise ValueError(f"Malformed decisions JSON: {exc.msg}") from exc

    if not isinstance(items, list):
        raise ValueError("Decisions must be a JSON list")

    grouped: Dict[DiffStatus, List[DiffKey]] = {}
    for item in items:
        if not isinstance(item, dict):
            raise ValueError(f"Decision must be an object, got {item!r}")
        try:
            key = (int(item["row"]), int(item["column_index"]))
            status = DiffStatus(str(item["status"]).lower())
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid decision {item!r}") from exc
        grouped.setdefault(status, []).append(key)
    return grouped


# -------------------------------------------------------
# API
# -------------------------------------------------------


@app.route("/api/compare", methods=["POST"])
def api_compare():
    """Compare ``file1`` (original) with ``file2`` (updated).

    Optional ``kind``, ``status`` and ``search`` values filter the returned
    list; ``stats`` always covers the full set.
    """
    try:
        uploads = get_uploads()
        kind = parse_kind(request.values.get("kind"))
        status = parse_status(request.values.get("status"))
        search = request.values.get("search", "")
    except ValueError as e:
        return error_response(str(e), 400)

    try:
        session = compare_uploads(uploads)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception as e:
        logger.exception("Compare failed")
        return error_response(str(e), 500)

    filtered = session.filter(kind=kind, status=status, search=search)
    state = session.to_dict()

    return {
        "success": True,
        "headers": state["headers"],
        "differences": [d.to_dict() for d in filtered],
        "filtered_count": len(filtered),
        "total": len(session.differences),
        "stats": state["stats"],
        "can_apply": session.can_apply,
    }, 200


@app.route("/api/apply", methods=["POST"])
def api_apply():
    """Apply the posted decisions and download the corrected original."""
    try:
        uploads = get_uploads()
        decisions = parse_decisions(request.form.get("decisions", ""))
    except ValueError as e:
        return error_response(str(e), 400)

    try:
        session = compare_uploads(uploads)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception as e:
        logger.exception("Apply failed")
        return error_response(str(e), 500)

    for status, keys in decisions.items():
        session.set_status_many(keys, status)

    if not session.can_apply:
        return error_response("No accepted differences to apply", 400)

    logger.info(
        "Applying %d accepted difference(s) to '%s'",
        session.stats().accepted,
        session.corrected_filename(),
    )

    return send_file(
        BytesIO(session.export().encode("utf-8")),
        mimetype="text/csv",
        as_attachment=True,
        download_name=session.corrected_filename(),
    )


@app.route("/api/health", methods=["GET"])
def api_health():
    return {
        "status": "online",
        "version": __version__,
        "endpoints": ["/api/compare", "/api/apply"],
    }, 200


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
