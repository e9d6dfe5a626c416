"""Tests for ApprovalConfig loading and validation."""

import pytest

from pr_approval_agent.approval_config import (
    DEFAULT_APPROVAL_TEMPLATE,
    DEFAULT_AUTOCLOSE_MESSAGE,
    DEFAULT_REFERENCE_TEMPLATE,
    ApprovalConfig,
    load_api_url,
    load_config,
    load_token,
    validate_config,
)
from pr_approval_agent.errors import ConfigError


class TestExpectedPhrase:

    def test_default_template(self):
        assert ApprovalConfig().expected_phrase("alice") == "@alice PR approved"

    def test_custom_template(self):
        cfg = ApprovalConfig(approval_template="LGTM for {user}.")

        assert cfg.expected_phrase("bob") == "LGTM for @bob."


class TestValidateConfig:

    def test_defaults_are_valid(self):
        validate_config(ApprovalConfig())

    def test_reference_template_needs_url(self):
        with pytest.raises(ConfigError, match="{url}"):
            validate_config(ApprovalConfig(reference_template="Approval: link"))

    def test_reference_template_single_url(self):
        with pytest.raises(ConfigError, match="exactly one"):
            validate_config(ApprovalConfig(reference_template="{url} and {url}"))

    def test_approval_template_needs_user(self):
        with pytest.raises(ConfigError, match="{user}"):
            validate_config(ApprovalConfig(approval_template="PR approved"))

    def test_negative_thresholds(self):
        with pytest.raises(ConfigError):
            validate_config(ApprovalConfig(min_diff_lines=-1))


class TestLoadConfig:

    def test_defaults_when_inputs_empty(self):
        cfg = load_config({"INPUT_APPROVAL_STR": "", "INPUT_REFERENCE_STR": "  "})

        assert cfg.approval_template == DEFAULT_APPROVAL_TEMPLATE
        assert cfg.reference_template == DEFAULT_REFERENCE_TEMPLATE
        assert cfg.autoclose_message == DEFAULT_AUTOCLOSE_MESSAGE
        assert cfg.exclude_past_contributors is False
        assert cfg.force_validate_owner_prs is False
        assert (cfg.min_diff_files, cfg.min_diff_lines) == (0, 0)

    def test_reads_all_inputs(self):
        cfg = load_config({
            "INPUT_APPROVAL_STR": "ok {user}",
            "INPUT_REFERENCE_STR": "See: <{url}>",
            "INPUT_PR_AUTOCLOSE_MESSAGE": "Bye.",
            "INPUT_EXCLUDE_PAST_CONTRIBUTORS": "TRUE",
            "INPUT_FORCE_VALIDATE_OWNER_PRS": "true",
            "INPUT_MIN_DIFF_FILES": "2",
            "INPUT_MIN_DIFF_LINES": "50",
        })

        assert cfg == ApprovalConfig(
            approval_template="ok {user}",
            reference_template="See: <{url}>",
            autoclose_message="Bye.",
            exclude_past_contributors=True,
            force_validate_owner_prs=True,
            min_diff_files=2,
            min_diff_lines=50,
        )

    @pytest.mark.parametrize("value", ["yes", "1", "false", ""])
    def test_only_true_enables_flags(self, value):
        cfg = load_config({"INPUT_EXCLUDE_PAST_CONTRIBUTORS": value})

        assert cfg.exclude_past_contributors is False

    @pytest.mark.parametrize("value", ["many", "1.5", "-3"])
    def test_bad_thresholds(self, value):
        with pytest.raises(ConfigError, match="min_diff_lines"):
            load_config({"INPUT_MIN_DIFF_LINES": value})

    def test_invalid_template_input(self):
        with pytest.raises(ConfigError):
            load_config({"INPUT_REFERENCE_STR": "Approval:"})


class TestLoadToken:

    def test_token(self):
        assert load_token({"INPUT_GITHUB_TOKEN": "abc"}) == "abc"

    def test_missing_token(self):
        with pytest.raises(ConfigError, match="github_token"):
            load_token({})


def test_api_url_default_and_override():
    assert load_api_url({}) == "https://api.github.com"
    assert load_api_url({"GITHUB_API_URL": "https://ghe.example.com/api/v3/"}) == (
        "https://ghe.example.com/api/v3"
    )
