"""Shared pytest fixtures."""

import pytest

from pathtrie import PatriciaTree, TreeStats
from pathtrie.app import create_app
from pathtrie.config import TrieConfig


PATH_KEYS = [
    "etc/hosts",
    "etc/passwd",
    "etc/ssh/sshd_config",
    "etc/ssh/ssh_config",
    "usr/bin/env",
    "usr/bin/python3",
    "usr/lib/libc.so",
    "var/log/syslog",
]


@pytest.fixture
def stats():
    return TreeStats()


@pytest.fixture
def tree(stats):
    return PatriciaTree(stats=stats)


@pytest.fixture
def path_tree(tree):
    for key in PATH_KEYS:
        tree.add(key)
    return tree


@pytest.fixture
def client(path_tree):
    app = create_app(tree=path_tree, config=TrieConfig(max_results=20))
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c
