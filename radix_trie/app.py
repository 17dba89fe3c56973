"""
Radix Lookup Service — A REST API over an ordered radix tree.

Exposes the radix tree as a JSON API with endpoints for exact lookup,
prefix enumeration, longest-prefix matching, path matching, insertion and
deletion.  Built with Flask.  Configured through environment variables.
"""

from __future__ import annotations

import os
import threading
import time
import logging
from typing import Any

from flask import Flask, jsonify, request

from radix_trie import __version__
from radix_trie.tree import Tree

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("radix-service")

DEFAULT_LIMIT = 25

# Route-table style sample data, handy for longest-prefix lookups
_SEED_ENTRIES = {
    "/": "frontend",
    "/api/": "api-gateway",
    "/api/v1/": "api-v1",
    "/api/v1/users": "user-service",
    "/api/v1/orders": "order-service",
    "/api/v2/": "api-v2",
    "/docs": "docs",
    "/static/": "cdn",
    "/static/css/": "cdn-css",
}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %d", name, raw, default)
        return default


def create_app(
    tree: Tree | None = None,
    seed: bool = True,
    max_key_length: int = 256,
) -> Flask:
    """Build the Flask application serving *tree*.

    The tree does no locking of its own, so every request holds one lock
    for the duration of its tree access.
    """
    app = Flask(__name__)
    if tree is None:
        tree = Tree()
    lock = threading.Lock()
    started = time.time()

    if seed:
        with lock:
            for key, value in _SEED_ENTRIES.items():
                tree.insert(key, value)
        logger.info("Seeded tree with %d keys", len(_SEED_ENTRIES))

    app.config["RADIX_TREE"] = tree
    app.config["RADIX_MAX_KEY_LENGTH"] = max_key_length

    def query_arg():
        return request.args.get("q", "").strip()

    def missing_query():
        return jsonify({"error": "Missing query parameter 'q'"}), 400

    # ── Health & Info ─────────────────────────────────────────────────────

    @app.route("/")
    def index():
        """Landing page with API documentation."""
        return jsonify({
            "service": "Radix Lookup Service",
            "version": __version__,
            "description": "REST API for ordered prefix lookups powered by a radix tree",
            "endpoints": {
                "GET  /":                       "This help page",
                "GET  /health":                 "Health check",
                "GET  /stats":                  "Tree statistics",
                "GET  /search?q=<key>":         "Exact match lookup",
                "GET  /prefix?q=<pfx>":         "All entries starting with prefix, in order",
                "GET  /longest-prefix?q=<key>": "Longest stored key that prefixes <key>",
                "GET  /path?q=<key>":           "All stored keys that prefix <key>",
                "POST /insert":                 "Insert a key  {\"key\": \"...\", \"value\": ...}",
                "DELETE /delete?q=<key>":       "Delete a key",
                "DELETE /delete-prefix?q=<pfx>": "Delete every key under a prefix",
            },
        })

    @app.route("/health")
    def health():
        """Liveness / readiness probe."""
        with lock:
            size = len(tree)
        return jsonify({
            "status": "healthy",
            "uptime_seconds": round(time.time() - started, 2),
            "tree_size": size,
        })

    @app.route("/stats")
    def stats():
        """Tree statistics."""
        with lock:
            min_key, _, _ = tree.minimum()
            max_key, _, _ = tree.maximum()
            body = {
                "total_keys": len(tree),
                "total_nodes": tree.node_count(),
                "min_key": min_key,
                "max_key": max_key,
            }
        body["uptime_seconds"] = round(time.time() - started, 2)
        return jsonify(body)

    # ── Core API ──────────────────────────────────────────────────────────

    @app.route("/search")
    def search():
        """Exact key lookup."""
        q = query_arg()
        if not q:
            return missing_query()
        with lock:
            value, found = tree.get(q)
        return jsonify({"key": q, "found": found, "value": value})

    @app.route("/prefix")
    def prefix():
        """Return the entries sharing a given prefix, in key order."""
        q = query_arg()
        limit = request.args.get("limit", str(DEFAULT_LIMIT), type=str)
        try:
            limit = int(limit)
        except ValueError:
            limit = DEFAULT_LIMIT

        if not q:
            return missing_query()

        matches: list[dict[str, Any]] = []

        def collect(key, value):
            matches.append({"key": key, "value": value})
            return len(matches) >= limit

        if limit > 0:
            with lock:
                tree.walk_prefix(q, collect)

        return jsonify({
            "prefix": q,
            "count": len(matches),
            "matches": matches,
        })

    @app.route("/longest-prefix")
    def longest_prefix():
        """Longest stored key that is a prefix of the query."""
        q = query_arg()
        if not q:
            return missing_query()
        with lock:
            key, value, found = tree.longest_prefix(q)
        return jsonify({"query": q, "found": found, "key": key, "value": value})

    @app.route("/path")
    def path():
        """Every stored key lying on the path to the query."""
        q = query_arg()
        if not q:
            return missing_query()

        matches: list[dict[str, Any]] = []

        def collect(key, value):
            matches.append({"key": key, "value": value})
            return False

        with lock:
            tree.walk_path(q, collect)
        return jsonify({"path": q, "count": len(matches), "matches": matches})

    @app.route("/insert", methods=["POST"])
    def insert():
        """Insert or update a key."""
        body = request.get_json(silent=True) or {}
        key = body.get("key", "")
        if not isinstance(key, str):
            return jsonify({"error": "'key' must be a string"}), 400
        key = key.strip()
        value = body.get("value", key)

        if not key:
            return jsonify({"error": "Missing 'key' in request body"}), 400
        if len(key) > max_key_length:
            return jsonify(
                {"error": f"Key too long (max {max_key_length} chars)"}
            ), 400

        with lock:
            old, replaced = tree.insert(key, value)
            size = len(tree)
        logger.info("%s key=%s", "Updated" if replaced else "Inserted", key)
        return jsonify({
            "inserted": key,
            "value": value,
            "replaced": replaced,
            "old_value": old,
            "tree_size": size,
        }), 200 if replaced else 201

    @app.route("/delete", methods=["DELETE"])
    def delete():
        """Delete a key from the tree."""
        q = query_arg()
        if not q:
            return missing_query()

        with lock:
            old, deleted = tree.delete(q)
            size = len(tree)
        if deleted:
            logger.info("Deleted key=%s", q)
        status = 200 if deleted else 404
        return jsonify({
            "key": q,
            "deleted": deleted,
            "value": old,
            "tree_size": size,
        }), status

    @app.route("/delete-prefix", methods=["DELETE"])
    def delete_prefix():
        """Delete every key under a prefix."""
        q = query_arg()
        if not q:
            return missing_query()

        with lock:
            removed = tree.delete_prefix(q)
            size = len(tree)
        logger.info("Deleted %d keys under prefix=%s", removed, q)
        return jsonify({"prefix": q, "deleted": removed, "tree_size": size})

    return app


app = create_app(
    seed=os.environ.get("RADIX_SEED", "1") != "0",
    max_key_length=_env_int("RADIX_MAX_KEY_LENGTH", 256),
)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

def main() -> None:
    port = _env_int("PORT", 8080)
    debug = os.environ.get("FLASK_DEBUG", "0") == "1"
    logger.info("Starting Radix Lookup Service on port %d", port)
    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    main()
