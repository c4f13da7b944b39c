"""Shared test fixtures: sample diffs, configs, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest

from solidarity.config.schema import RuleConfig, SolidarityConfig


@pytest.fixture
def sample_diff_clean() -> str:
    """A diff with nothing to flag."""
    return textwrap.dedent("""\
        diff --git a/hello.py b/hello.py
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/hello.py
        @@ -0,0 +1,3 @@
        +def greet(name):
        +    return f"Hello, {name}!"
        +
    """)


@pytest.fixture
def sample_diff_master() -> str:
    """Adds ``master_branch = true`` to config.py at new line 42."""
    return textwrap.dedent("""\
        diff --git a/config.py b/config.py
        index 1234567..abcdef0 100644
        --- a/config.py
        +++ b/config.py
        @@ -40,3 +40,4 @@ DEFAULTS = {
         debug = false
         verbose = false
        + master_branch = true
         timeout = 30
    """)


@pytest.fixture
def sample_diff_removed_only() -> str:
    """Only removes a line that would be flagged."""
    return textwrap.dedent("""\
        diff --git a/replica.py b/replica.py
        index 1234567..abcdef0 100644
        --- a/replica.py
        +++ b/replica.py
        @@ -10,3 +10,2 @@ class Replica:
             name = "db"
        -    master = "db-1"
             port = 5432
    """)


@pytest.fixture
def sample_diff_mixed() -> str:
    """Context, removed and added lines across two hunks."""
    return textwrap.dedent("""\
        diff --git a/server.py b/server.py
        index 1234567..abcdef0 100644
        --- a/server.py
        +++ b/server.py
        @@ -3,4 +3,5 @@ import os
         HOST = "0.0.0.0"
        -ROLE = "slave"
        +ROLE = "replica"
        +PRIMARY = "master-1"
         PORT = 8080
         DEBUG = False
        @@ -20,2 +21,3 @@ def run():
             start()
        +    allow = load_whitelist()
             wait()
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    """A diff with a binary file and no text hunks."""
    return textwrap.dedent("""\
        diff --git a/master.png b/master.png
        new file mode 100644
        index 0000000..abc1234
        Binary files /dev/null and b/master.png differ
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A renamed file with one added line."""
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 97%
        rename from old_name.py
        rename to new_name.py
        index abc1234..def5678 100644
        --- a/old_name.py
        +++ b/new_name.py
        @@ -1,0 +2,1 @@
        +# New line added after rename
    """)


@pytest.fixture
def sample_diff_deleted() -> str:
    """A deleted file full of flagged words."""
    return textwrap.dedent("""\
        diff --git a/legacy.py b/legacy.py
        deleted file mode 100644
        index abc1234..0000000
        --- a/legacy.py
        +++ /dev/null
        @@ -1,2 +0,0 @@
        -MASTER = "db-1"
        -SLAVES = ["db-2"]
    """)


@pytest.fixture
def master_rule() -> RuleConfig:
    return RuleConfig(
        name="master",
        patterns=["master"],
        level="warning",
        alternatives=["main", "primary"],
        mode="word",
    )


@pytest.fixture
def master_config(master_rule: RuleConfig) -> SolidarityConfig:
    """Only the ``master`` rule, in whole-word mode."""
    return SolidarityConfig(rules={"master": master_rule})


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path
