from __future__ import annotations

import logging

import pytest

from ado_engine.errors import ConfigError
from runpipeline.config import build_parser, load_config

REQUIRED = ["--org", "acme", "--prj", "proj", "--token", "pat", "--pipeline", "build"]


def _load(argv, env=None):
    args = build_parser().parse_args(argv)
    return load_config(args, env or {})


def test_load_config_defaults() -> None:
    config = _load(REQUIRED)

    assert config.org == "acme"
    assert config.project == "proj"
    assert config.pipeline == "build"
    assert config.branch == "master"
    assert config.parameters == {}
    assert config.base_url == "https://dev.azure.com/acme"
    assert config.poll_interval_s == 10
    assert config.timeout_s is None
    assert config.log_level == logging.ERROR


def test_load_config_token_not_in_repr() -> None:
    config = _load(["--org", "acme", "--prj", "proj", "--token", "s3cr3t-pat", "--pipeline", "build"])
    assert config.token == "s3cr3t-pat"
    assert "s3cr3t-pat" not in repr(config)


@pytest.mark.parametrize(
    ("missing", "expected_code"),
    [("--org", 1), ("--prj", 2), ("--token", 3), ("--pipeline", 4)],
)
def test_load_config_missing_required_field_exit_codes(missing: str, expected_code: int) -> None:
    argv = list(REQUIRED)
    index = argv.index(missing)
    del argv[index : index + 2]

    with pytest.raises(ConfigError) as excinfo:
        _load(argv)

    assert excinfo.value.exit_code == expected_code
    assert str(excinfo.value) == f"Parameter '{missing[2:]}' is empty."


def test_load_config_checks_fields_in_order() -> None:
    with pytest.raises(ConfigError) as excinfo:
        _load(["--pipeline", "build"])
    assert excinfo.value.field == "org"


def test_load_config_blank_value_counts_as_missing() -> None:
    with pytest.raises(ConfigError) as excinfo:
        _load(["--org", "  ", "--prj", "proj", "--token", "pat", "--pipeline", "build"])
    assert excinfo.value.exit_code == 1


def test_load_config_environment_fallbacks() -> None:
    env = {
        "ADO_ORG": "env-org",
        "ADO_PROJECT": "env-proj",
        "AZURE_DEVOPS_EXT_PAT": "env-pat",
        "ADO_PIPELINE": "env-build",
        "ADO_BRANCH": "main",
        "ADO_BASE_URL": "https://tfs.example.com/tfs/Default/",
    }

    config = _load([], env)

    assert (config.org, config.project, config.token, config.pipeline) == ("env-org", "env-proj", "env-pat", "env-build")
    assert config.branch == "main"
    assert config.base_url == "https://tfs.example.com/tfs/Default"


def test_load_config_flags_win_over_environment() -> None:
    env = {"ADO_ORG": "env-org", "ADO_TOKEN": "env-pat", "AZURE_DEVOPS_EXT_PAT": "other", "ADO_BRANCH": "main"}

    config = _load(REQUIRED + ["--branch", "release"], env)

    assert config.org == "acme"
    assert config.token == "pat"
    assert config.branch == "release"


def test_load_config_ado_token_preferred_over_ext_pat() -> None:
    config = _load(["--org", "a", "--prj", "p", "--pipeline", "b"], {"ADO_TOKEN": "one", "AZURE_DEVOPS_EXT_PAT": "two"})
    assert config.token == "one"


def test_load_config_collects_parameters() -> None:
    config = _load(REQUIRED + ["--param", "a=1", "--param", "bad", "--param", "b=x=y", "--param", "a=2"])

    assert config.parameters == {"a": "2", "b": "x=y"}
    assert config.rejected_parameters == ("bad",)


def test_parser_has_no_shared_parameter_state() -> None:
    first = build_parser().parse_args(REQUIRED + ["--param", "a=1"])
    second = build_parser().parse_args(REQUIRED)
    assert first.params == ["a=1"]
    assert second.params == []


@pytest.mark.parametrize(
    ("flags", "expected"),
    [
        ([], logging.ERROR),
        (["-w"], logging.WARNING),
        (["-i"], logging.INFO),
        (["-v"], logging.DEBUG),
        (["-w", "-v"], logging.DEBUG),
        (["-i", "-w"], logging.INFO),
    ],
)
def test_load_config_log_level(flags, expected) -> None:
    assert _load(REQUIRED + flags).log_level == expected


def test_load_config_rejects_bad_base_url() -> None:
    with pytest.raises(ConfigError) as excinfo:
        _load(REQUIRED + ["--base-url", "ftp://example.com"])
    assert excinfo.value.exit_code == 5
    assert excinfo.value.field == "base-url"


@pytest.mark.parametrize("flag", ["--poll-interval", "--timeout", "--http-timeout"])
@pytest.mark.parametrize("value", ["0", "-1", "nan", "inf"])
def test_load_config_rejects_non_positive_or_non_finite_numbers(flag: str, value: str) -> None:
    with pytest.raises(ConfigError) as excinfo:
        _load(REQUIRED + [flag, value])
    assert excinfo.value.exit_code == 5
    assert excinfo.value.field == flag[2:]


def test_parser_usage_error_exits_with_invalid_option_code(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(REQUIRED + ["--poll-interval", "soon"])
    assert excinfo.value.code == 5
    assert "invalid float value" in capsys.readouterr().err
