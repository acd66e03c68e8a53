import pytest

from nixctl.exceptions import ConfigError, StepError
from nixctl.modules.hcloud import (
    parse_bool_flag,
    recreate_server,
    resolve_ipv4,
    server_spec_from_env,
)

DELETE = ["hcloud", "server", "delete", "cpx21-control-1", "--force", "--ignore-not-found"]


@pytest.mark.parametrize("value,expected", [
    ("true", True),
    ("TRUE", True),
    ("True", True),
    ("false", False),
    ("FALSE", False),
    ("fAlSe", False),
])
def test_parse_bool_flag_accepts_true_false(value, expected):
    assert parse_bool_flag(value) is expected


@pytest.mark.parametrize("value", ["yes", "no", "1", "0", "", " true", "truee", "t"])
def test_parse_bool_flag_rejects_other_strings(value):
    with pytest.raises(ConfigError):
        parse_bool_flag(value)


def test_resolve_ipv4_uses_default_env_when_omitted(monkeypatch):
    assert resolve_ipv4(None) is False
    monkeypatch.setenv("HETZNER_DEFAULT_ENABLE_IPV4", "TRUE")
    assert resolve_ipv4(None) is True
    assert resolve_ipv4("") is True
    assert resolve_ipv4("false") is False


def test_resolve_ipv4_default_env_is_lenient(monkeypatch):
    monkeypatch.setenv("HETZNER_DEFAULT_ENABLE_IPV4", "maybe")
    assert resolve_ipv4(None) is False


@pytest.mark.parametrize("missing", [
    "HCLOUD_TOKEN", "HETZNER_SSH_KEY_NAME", "PRIVATE_NETWORK_NAME", "PLACEMENT_GROUP_NAME",
])
def test_server_spec_requires_env(hcloud_env, monkeypatch, missing):
    monkeypatch.setenv(missing, "")
    with pytest.raises(ConfigError, match=missing):
        server_spec_from_env("cpx21-control-1")


def test_server_spec_applies_defaults(hcloud_env):
    spec = server_spec_from_env("cpx21-control-1")

    assert spec.location == "ash"
    assert spec.datacenter == "ash-dc1"
    assert spec.image == "debian-12"
    assert spec.server_type == "cpx21"
    assert spec.enable_ipv4 is False


def test_server_spec_keeps_explicit_values(hcloud_env, monkeypatch):
    monkeypatch.setenv("HETZNER_LOCATION", "fsn1")
    monkeypatch.setenv("HETZNER_IMAGE_NAME", "ubuntu-24.04")
    monkeypatch.setenv("CONTROL_PLANE_VM_TYPE", "cpx31")

    spec = server_spec_from_env("cpx21-control-1", "true")

    assert spec.datacenter == "fsn1-dc1"
    assert spec.image == "ubuntu-24.04"
    assert spec.server_type == "cpx31"
    assert spec.enable_ipv4 is True


def test_recreate_server_checks_deletes_then_creates(hcloud_env, fake_shell):
    recreate_server("cpx21-control-1", "true")

    assert fake_shell.calls == [
        ["nix", "flake", "check", "--show-trace"],
        DELETE,
        [
            "hcloud", "server", "create", "cpx21-control-1",
            "--server-type", "cpx21",
            "--image", "debian-12",
            "--datacenter", "ash-dc1",
            "--ssh-key", "ops-key",
            "--network", "k3s-net",
            "--placement-group", "k3s-spread",
            "--enable-ipv4",
        ],
    ]


def test_recreate_server_without_ipv4(hcloud_env, fake_shell):
    recreate_server("cpx21-control-1", "false", check_flake=False)

    assert fake_shell.calls[0] == DELETE
    assert "--enable-ipv4" not in fake_shell.calls[1]


def test_recreate_server_validates_before_any_call(fake_shell):
    with pytest.raises(ConfigError):
        recreate_server("cpx21-control-1")
    assert fake_shell.calls == []


def test_recreate_server_bad_flag_makes_no_calls(hcloud_env, fake_shell):
    with pytest.raises(ConfigError):
        recreate_server("cpx21-control-1", "yes")
    assert fake_shell.calls == []


def test_recreate_server_delete_failure_skips_create(hcloud_env, fake_shell):
    fake_shell.fail_on.append(["hcloud", "server", "delete"])

    with pytest.raises(StepError) as excinfo:
        recreate_server("cpx21-control-1")

    assert excinfo.value.phase == "delete server"
    assert not any(call[:3] == ["hcloud", "server", "create"] for call in fake_shell.calls)


def test_recreate_server_create_failure(hcloud_env, fake_shell):
    fake_shell.fail_on.append(["hcloud", "server", "create"])

    with pytest.raises(StepError) as excinfo:
        recreate_server("cpx21-control-1")

    assert excinfo.value.phase == "create server"
    assert DELETE in fake_shell.calls
