"""
Path Trie Service - a REST API over the PATRICIA tree.

Exposes a :class:`~pathtrie.tree.PatriciaTree` as a JSON API with endpoints
for inserting keys, exact lookup, segment ("partial") and full prefix
listing, and subtree deletion.  Built with Flask.
"""

from __future__ import annotations

import logging
import time

from flask import Flask, jsonify, request

from pathtrie.config import TrieConfig
from pathtrie.errors import InvalidArgumentError, OutOfCapacityError
from pathtrie.sink import ResultSink
from pathtrie.tree import PatriciaTree

logger = logging.getLogger(__name__)

_DEFAULT_LIMIT = 100


def _key_size(key: str) -> int:
    return len(key.encode("utf-8", "surrogateescape"))


def load_seed_file(tree: PatriciaTree, path: str, max_key_len: int | None = None) -> int:
    """Add every non-blank line of *path* to *tree*; return the number added.

    Lines longer than *max_key_len* bytes are skipped with a warning, the
    same limit ``POST /insert`` applies.
    """
    added = 0
    with open(path, encoding="utf-8", errors="surrogateescape") as fh:
        for lineno, line in enumerate(fh, 1):
            key = line.rstrip("\r\n")
            if not key:
                continue
            if max_key_len is not None and _key_size(key) > max_key_len:
                logger.warning(
                    "Skipping %s:%d, key longer than %d bytes", path, lineno, max_key_len
                )
                continue
            if tree.add(key):
                added += 1
    logger.info("Seeded tree with %d keys from %s", added, path)
    return added


def create_app(tree: PatriciaTree | None = None, config: TrieConfig | None = None) -> Flask:
    """Build the Flask application around *tree* (a fresh one by default)."""
    config = config or TrieConfig()
    if tree is None:
        tree = PatriciaTree(delimiter=config.delimiter)
        if config.seed_file:
            load_seed_file(tree, config.seed_file, config.max_key_len)

    app = Flask(__name__)
    app.config["TRIE"] = tree
    app.config["TRIE_CONFIG"] = config
    start_time = time.time()

    def _key_arg() -> str:
        return request.args.get("q", "").strip()

    @app.errorhandler(InvalidArgumentError)
    def invalid_argument(exc):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(OutOfCapacityError)
    def out_of_capacity(exc):
        return jsonify({
            "error": str(exc),
            "capacity": exc.capacity,
            "attempted": exc.attempted,
        }), 413

    # ── Health & Info ─────────────────────────────────────────────────────

    @app.route("/")
    def index():
        """Landing page with API documentation."""
        return jsonify({
            "service": "Path Trie Service",
            "version": "1.0.0",
            "description": "REST API over a PATRICIA tree of path-like keys",
            "delimiter": config.delimiter,
            "endpoints": {
                "GET  /":                          "This help page",
                "GET  /health":                    "Health check",
                "GET  /stats":                     "Key, node and byte totals",
                "GET  /lookup?q=<key>":            "Exact match lookup",
                "GET  /prefix?q=<pfx>&mode=full":  "Every key starting with prefix",
                "GET  /prefix?q=<pfx>&mode=partial": "Next path segments below prefix",
                "POST /insert":                    "Insert a key  {\"key\": \"...\"}",
                "DELETE /delete?q=<key>":          "Delete a key and everything below it",
            },
        })

    @app.route("/health")
    def health():
        """Liveness / readiness probe."""
        return jsonify({
            "status": "healthy",
            "uptime_seconds": round(time.time() - start_time, 2),
            "trie_size": len(tree),
        })

    @app.route("/stats")
    def stats():
        """Tree statistics."""
        body = tree.print_stats()
        body["uptime_seconds"] = round(time.time() - start_time, 2)
        return jsonify(body)

    # ── Core API ──────────────────────────────────────────────────────────

    @app.route("/lookup")
    def lookup():
        """Exact key lookup."""
        q = _key_arg()
        if not q:
            return jsonify({"error": "Missing query parameter 'q'"}), 400
        return jsonify({"key": q, "found": tree.lookup(q)})

    @app.route("/prefix")
    def prefix():
        """List keys (mode=full) or next segments (mode=partial) below a prefix."""
        q = _key_arg()
        mode = request.args.get("mode", "full")
        try:
            limit = int(request.args.get("limit", str(_DEFAULT_LIMIT)))
        except ValueError:
            limit = _DEFAULT_LIMIT

        if mode not in ("full", "partial"):
            return jsonify({"error": "mode must be 'full' or 'partial'"}), 400

        sink = ResultSink(max_results=config.max_results)
        if mode == "full":
            matches = tree.lookup_prefix_full(q, sink)
        else:
            matches = tree.lookup_prefix_partial(q, sink)
        if matches is None:
            return jsonify({"prefix": q, "error": "Prefix not found"}), 404

        matches = list(matches)[:max(limit, 0)]
        return jsonify({
            "prefix": q,
            "mode": mode,
            "count": len(matches),
            "matches": matches,
        })

    @app.route("/insert", methods=["POST"])
    def insert():
        """Insert a key into the tree."""
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        key = body.get("key", "")
        if not isinstance(key, str):
            return jsonify({"error": "'key' must be a string"}), 400
        key = key.strip()

        if not key:
            return jsonify({"error": "Missing 'key' in request body"}), 400
        if _key_size(key) > config.max_key_len:
            return jsonify({"error": f"Key too long (max {config.max_key_len} bytes)"}), 400

        created = tree.add(key)
        if created:
            logger.info("Inserted key=%s", key)
        return jsonify({"inserted": key, "created": created, "trie_size": len(tree)}), (
            201 if created else 200
        )

    @app.route("/delete", methods=["DELETE"])
    def delete():
        """Delete a key, and every key below it, from the tree."""
        q = _key_arg()
        if not q:
            return jsonify({"error": "Missing query parameter 'q'"}), 400

        deleted = tree.delete(q)
        if deleted:
            logger.info("Deleted key=%s", q)
        status = 200 if deleted else 404
        return jsonify({"key": q, "deleted": deleted, "trie_size": len(tree)}), status

    return app


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    config = TrieConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    app = create_app(config=config)
    logger.info("Starting Path Trie Service on port %d", config.port)
    app.run(host="0.0.0.0", port=config.port, debug=config.debug)


if __name__ == "__main__":
    main()
