"""
Unit tests for comparison and side configuration.
"""

import pytest

from querydiff.config import (
    MSSQL_CONNECTION_ENV,
    PGSQL_CONNECTION_ENV,
    ComparisonConfig,
    DuplicatePolicy,
    build_side_configs,
    parse_columns,
    parse_parameters,
)
from querydiff.exceptions import ConfigurationError


class TestComparisonConfig:
    """Test validation on construction."""

    def test_defaults(self):
        config = ComparisonConfig()

        assert config.keyed is False
        assert config.duplicates is DuplicatePolicy.LAST_WINS
        assert config.partitions == 1
        assert config.timeout_seconds is None

    def test_keyed(self):
        assert ComparisonConfig(["id"], ["id"]).keyed is True

    def test_keys_stored_as_tuples(self):
        config = ComparisonConfig(["a", "b"], ["c", "d"])

        assert config.left_keys == ("a", "b")
        assert config.right_keys == ("c", "d")

    def test_one_sided_keys_allowed(self):
        assert ComparisonConfig(left_keys=("id",)).keyed is False

    def test_duplicates_from_string(self):
        assert ComparisonConfig(duplicates="multiset").duplicates is DuplicatePolicy.MULTISET

    @pytest.mark.parametrize("kwargs,message", [
        ({"left_keys": ("a", "b"), "right_keys": ("a",)}, "differ in length"),
        ({"partitions": 0}, "partitions"),
        ({"workers": 0}, "workers"),
        ({"timeout_seconds": 0}, "timeout_seconds"),
        ({"timeout_seconds": -1.5}, "timeout_seconds"),
    ])
    def test_invalid(self, kwargs, message):
        with pytest.raises(ConfigurationError, match=message):
            ComparisonConfig(**kwargs)


class TestParseParameters:
    """Test name=value parameter parsing."""

    def test_semicolon_string(self):
        assert parse_parameters("id=5;name=Bob") == {"id": "5", "name": "Bob"}

    def test_list(self):
        assert parse_parameters(["id=5", "name=Bob"]) == {"id": "5", "name": "Bob"}

    def test_malformed_items_skipped(self, caplog):
        assert parse_parameters("id=5;broken;a=b=c") == {"id": "5"}
        assert "malformed" in caplog.text

    def test_empty(self):
        assert parse_parameters(None) == {}
        assert parse_parameters("") == {}


def test_parse_columns():
    assert parse_columns("id, name ,") == ("id", "name")
    assert parse_columns(["id"]) == ("id",)
    assert parse_columns(None) == ()


class TestBuildSideConfigs:
    """Test building both sides from CLI-style options."""

    def test_pgsql_defaults_to_mssql_query_and_parameters(self):
        left, right = build_side_configs(
            mssql_connection="Driver=x",
            mssql_query="SELECT * FROM t WHERE id = @id",
            pgsql_connection="host=y",
            mssql_parameters="id=1",
            mssql_keycolumns="id",
            pgsql_keycolumns="id",
        )

        assert right.query == left.query
        assert right.parameters == {"id": "1"}
        assert left.label == "MSSQL"
        assert right.label == "PgSQL"
        assert left.key_columns == right.key_columns == ("id",)

    def test_pgsql_overrides(self):
        _, right = build_side_configs(
            "Driver=x", "SELECT 1", "host=y",
            pgsql_query="SELECT 2",
            mssql_parameters="a=1",
            pgsql_parameters="b=2",
        )

        assert right.query == "SELECT 2"
        assert right.parameters == {"b": "2"}

    def test_connections_from_environment(self, monkeypatch):
        monkeypatch.setenv(MSSQL_CONNECTION_ENV, "Driver=env")
        monkeypatch.setenv(PGSQL_CONNECTION_ENV, "host=env")

        left, right = build_side_configs(None, "SELECT 1", None)

        assert left.connection_string == "Driver=env"
        assert right.connection_string == "host=env"

    def test_missing_connection(self):
        with pytest.raises(ConfigurationError, match=PGSQL_CONNECTION_ENV):
            build_side_configs("Driver=x", "SELECT 1", None)

    def test_missing_query(self):
        with pytest.raises(ConfigurationError, match="query"):
            build_side_configs("Driver=x", "", "host=y")
