import pytest

from pathtrie import PatriciaTree
from pathtrie.app import create_app, load_seed_file
from pathtrie.config import TrieConfig
from pathtrie.errors import InvalidArgumentError

from conftest import PATH_KEYS


def test_index_and_health(client):
    body = client.get("/").get_json()
    assert body["service"] == "Path Trie Service"
    assert body["delimiter"] == "/"

    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["trie_size"] == len(PATH_KEYS)


def test_stats(client, path_tree):
    body = client.get("/stats").get_json()
    assert body["total_keys"] == len(PATH_KEYS)
    assert body["total_nodes"] == path_tree.stats.total_nodes


def test_lookup(client):
    assert client.get("/lookup?q=etc/hosts").get_json()["found"] is True
    assert client.get("/lookup?q=etc").get_json()["found"] is False
    assert client.get("/lookup").status_code == 400


def test_prefix_full_and_partial(client):
    body = client.get("/prefix?q=usr/&mode=full").get_json()
    assert body["matches"] == ["usr/bin/env", "usr/bin/python3", "usr/lib/libc.so"]
    assert body["count"] == 3

    body = client.get("/prefix?q=usr/&mode=partial").get_json()
    assert body["matches"] == ["bin", "lib"]

    body = client.get("/prefix?mode=partial").get_json()
    assert body["matches"] == ["etc", "usr", "var"]


def test_prefix_limit_truncates(client):
    body = client.get("/prefix?q=etc/&limit=2").get_json()
    assert body["matches"] == ["etc/hosts", "etc/passwd"]
    body = client.get("/prefix?q=etc/&limit=bogus").get_json()
    assert body["count"] == 4


def test_prefix_errors(client):
    assert client.get("/prefix?q=opt/").status_code == 404
    assert client.get("/prefix?q=etc/&mode=tree").status_code == 400


def test_prefix_over_capacity(path_tree):
    app = create_app(tree=path_tree, config=TrieConfig(max_results=2))
    resp = app.test_client().get("/prefix?q=etc/")
    assert resp.status_code == 413
    assert resp.get_json()["capacity"] == 2


def test_insert(client):
    resp = client.post("/insert", json={"key": "opt/app/bin"})
    assert resp.status_code == 201
    assert resp.get_json()["created"] is True

    resp = client.post("/insert", json={"key": "opt/app/bin"})
    assert resp.status_code == 200
    assert resp.get_json()["created"] is False

    assert client.get("/lookup?q=opt/app/bin").get_json()["found"] is True


@pytest.mark.parametrize("body", [{}, {"key": ""}, {"key": "   "}, {"key": 5}, {"key": "x" * 257}])
def test_insert_rejects_bad_keys(client, body):
    assert client.post("/insert", json=body).status_code == 400


def test_delete(client):
    resp = client.delete("/delete?q=etc/ssh/ssh_config")
    assert resp.status_code == 200
    assert resp.get_json()["trie_size"] == len(PATH_KEYS) - 1

    assert client.delete("/delete?q=etc/ssh/ssh_config").status_code == 404
    assert client.delete("/delete").status_code == 400


def test_invalid_argument_handler(tree):
    app = create_app(tree=tree)

    @app.route("/boom")
    def boom():
        raise InvalidArgumentError("bad key")

    resp = app.test_client().get("/boom")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "bad key"}


def test_seed_file(tmp_path):
    seed = tmp_path / "keys.txt"
    seed.write_text("a/b\n\na/c\na/b\n", encoding="utf-8")
    app = create_app(config=TrieConfig(seed_file=str(seed), delimiter=":"))
    tree = app.config["TRIE"]
    assert list(tree) == ["a/b", "a/c"]
    assert tree.delimiter == ord(":")


def test_load_seed_file_counts_new_keys(tmp_path):
    seed = tmp_path / "keys.txt"
    seed.write_text("x\ny\nx\n", encoding="utf-8")
    assert load_seed_file(PatriciaTree(), str(seed)) == 2


def test_seed_file_skips_keys_over_the_length_limit(tmp_path, caplog):
    seed = tmp_path / "keys.txt"
    seed.write_text("a/" + "x" * 300 + "\na/short\n", encoding="utf-8")
    with caplog.at_level("WARNING", logger="pathtrie.app"):
        app = create_app(config=TrieConfig(seed_file=str(seed)))
    assert "longer than 256 bytes" in caplog.text
    assert list(app.config["TRIE"]) == ["a/short"]

    resp = app.test_client().get("/prefix?q=a/&mode=full")
    assert resp.status_code == 200
    assert resp.get_json()["matches"] == ["a/short"]


def test_long_stored_keys_are_still_listed(tree):
    long_key = "a/" + "x" * 300
    tree.add(long_key)
    app = create_app(tree=tree, config=TrieConfig(max_key_len=16))
    resp = app.test_client().get("/prefix?q=a/&mode=full")
    assert resp.status_code == 200
    assert resp.get_json()["matches"] == [long_key]
