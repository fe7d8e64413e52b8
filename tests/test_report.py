"""Tests for _report.py: failure reports and .env.example rendering."""

import pytest

from envcheck._fields import Field, Kind, MinLength
from envcheck._report import format_failure, render_env_example
from envcheck._schema import EnvSchema
from envcheck._types import ValidationFailure

SCHEMA = EnvSchema(
    [
        Field("DATABASE_URL", Kind.URL, description="Postgres connection string"),
        Field("JWT_SECRET", constraints=(MinLength(32),), secret=True),
        Field("PORT", Kind.INTEGER, required=False, default=8000),
        Field("DEBUG", Kind.BOOLEAN, required=False, default=True),
        Field("REDIS_URL", Kind.URL, required=False),
        Field("ENABLE_CACHE", Kind.BOOLEAN, required=False, requires="REDIS_URL"),
    ],
    name="Server",
)


def _failure(env):
    with pytest.raises(ValidationFailure) as info:
        SCHEMA.validate(env)
    return info.value


class TestFormatFailure:
    def test_headline_counts_problems(self):
        report = format_failure(_failure({"PORT": "x"}))
        assert report.splitlines()[0] == "Invalid environment (Server): 3 problems"

    def test_single_problem_wording(self):
        report = format_failure(_failure({"JWT_SECRET": "s" * 32}))
        assert report.splitlines()[0].endswith("1 problem")

    def test_one_line_per_error(self):
        report = format_failure(_failure({"PORT": "x"}))
        lines = report.splitlines()[1:]
        assert len(lines) == 3
        assert "DATABASE_URL" in lines[0] and "missing: expected url" in lines[0]
        assert "PORT" in lines[2] and "invalid format: expected integer, got 'x'" in lines[2]

    def test_secret_values_redacted(self):
        report = format_failure(_failure({"DATABASE_URL": "http://db", "JWT_SECRET": "too-short"}))
        assert "too-short" not in report
        assert "got '***'" in report
        assert "at least 32 characters" in report


class TestRenderEnvExample:
    def test_lists_fields_in_order(self):
        text = render_env_example(SCHEMA)
        names = [line.split("=")[0] for line in text.splitlines() if "=" in line and not line.startswith("#")]
        assert names == list(SCHEMA.names)

    def test_block_contents(self):
        text = render_env_example(SCHEMA)
        assert '# Postgres connection string\n# required, url\nDATABASE_URL=""' in text
        assert 'PORT="8000"' in text
        assert 'DEBUG="true"' in text
        assert 'REDIS_URL=""' in text
        assert "# optional, boolean, needs REDIS_URL" in text

    def test_secrets_left_empty(self):
        assert 'JWT_SECRET=""' in render_env_example(SCHEMA)

    def test_trailing_newline(self):
        assert render_env_example(SCHEMA).endswith("\n")
