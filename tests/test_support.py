"""Tests for configuration, audit events and notifications."""

import json
import logging
from pathlib import Path

import requests

from key_rotator.audit import make_event, write_audit_event
from key_rotator.config import DEFAULT_AUDIT_LOG, RotatorSettings
from key_rotator.models import AccessKey
from key_rotator.notifications import send_slack_notification


def test_settings_defaults(clean_env):
    settings = RotatorSettings.from_env()

    assert settings.user_name is None
    assert settings.region == "us-east-1"
    assert settings.audit_log == DEFAULT_AUDIT_LOG
    assert settings.reload_urls == []


def test_settings_from_env(clean_env, monkeypatch):
    monkeypatch.setenv("KEY_ROTATOR_USER", "ci-deployer")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("KEY_ROTATOR_RELOAD_URLS", "http://a:1, http://b:2,")
    monkeypatch.setenv("KEY_ROTATOR_AUDIT_LOG", "/tmp/rotation.log")

    settings = RotatorSettings.from_env()

    assert settings.user_name == "ci-deployer"
    assert settings.region == "eu-west-1"
    assert settings.reload_urls == ["http://a:1", "http://b:2"]
    assert settings.audit_log == Path("/tmp/rotation.log")


def test_audit_events_append_json_lines(tmp_path):
    path = tmp_path / "audit" / "audit.log"

    write_audit_event(make_event("rotation_started", "ci-deployer", "success"), path)
    write_audit_event(
        make_event("rotation_complete", "ci-deployer", "success", {"new_key_id": "AKIA1"}), path
    )

    events = [json.loads(line) for line in path.read_text().splitlines()]
    assert [e["action"] for e in events] == ["rotation_started", "rotation_complete"]
    assert events[0]["resource"] == "iam/users/ci-deployer/access-keys"
    assert events[1]["metadata"] == {"new_key_id": "AKIA1"}


def test_slack_without_url_only_logs(caplog, monkeypatch):
    def fail_post(*args, **kwargs):
        raise AssertionError("should not post")

    monkeypatch.setattr("key_rotator.notifications.requests.post", fail_post)

    with caplog.at_level(logging.INFO, logger="key_rotator.notifications"):
        send_slack_notification("done")

    assert "SLACK MOCK" in caplog.text


def test_slack_failure_is_non_fatal(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("no route")

    monkeypatch.setattr("key_rotator.notifications.requests.post", fake_post)

    send_slack_notification("done", "https://hooks.slack.example/T000")


def test_access_key_credentials():
    key = AccessKey(key_id="AKIA1", user_name="ci", secret="s3cr3t")

    assert key.as_credentials() == {"aws_access_key_id": "AKIA1", "aws_secret_access_key": "s3cr3t"}
    assert "s3cr3t" not in repr(key)
