"""Tests for registry construction from settings."""

from hookwarden.config import Settings
from hookwarden.constants import ALL_VALIDATORS
from hookwarden.factory import build_registry
from hookwarden.hook import EventType, ToolName
from tests.utils import bash_context, file_context, notification_context


class TestBuildRegistry:
    """Tests for build_registry."""

    def test_all_validators_in_order(self):
        registry = build_registry(Settings())
        assert registry.names == list(ALL_VALIDATORS)

    def test_bash_validators(self):
        registry = build_registry(Settings())
        names = [v.name for v in registry.find_validators(bash_context("git status"))]
        assert names == ["validate-git-add", "validate-branch-name", "validate-git-push"]

    def test_file_validators(self):
        registry = build_registry(Settings())
        for tool in (ToolName.WRITE, ToolName.EDIT, ToolName.MULTI_EDIT):
            names = [v.name for v in registry.find_validators(file_context(tool, "a.sh"))]
            assert names == ["validate-shellscript", "validate-secrets"]

    def test_notification_validators(self):
        registry = build_registry(Settings())
        names = [v.name for v in registry.find_validators(notification_context())]
        assert names == ["notification-bell"]

    def test_post_tool_use_has_no_validators(self):
        registry = build_registry(Settings())
        ctx = bash_context("git add tmp/x", event_type=EventType.POST_TOOL_USE)
        assert registry.find_validators(ctx) == []

    def test_disabled_validator_not_registered(self):
        settings = Settings(disabled_validators=frozenset({"validate-git-push"}))
        assert "validate-git-push" not in build_registry(settings).names

    def test_warn_only_validator(self):
        settings = Settings(warn_only_validators=frozenset({"validate-branch-name"}))
        blocking = {v.name: v.blocking for v, _ in build_registry(settings).entries}
        assert blocking["validate-branch-name"] is False
        assert blocking["validate-git-add"] is True

    def test_settings_forwarded(self):
        settings = Settings(
            git_timeout=2,
            linter_timeout=4,
            protected_branches=("trunk",),
            blocked_add_prefixes=("scratch/",),
        )
        validators = {v.name: v for v, _ in build_registry(settings).entries}
        assert validators["validate-git-add"].git_timeout == 2
        assert validators["validate-git-add"].blocked_prefixes == ("scratch/",)
        assert validators["validate-shellscript"].checker.timeout == 4
        assert validators["validate-git-push"].protected_branches == ("trunk",)
