import json

import pytest
import yaml

from rcloneconf import (
    InvalidRemoteName,
    KeyValueError,
    MissingRemote,
    PasswordRequired,
    UnknownBackend,
)
from rcloneconf.config import manage
from rcloneconf.conftest import ScriptedTerminal
from rcloneconf.session import Session


@pytest.fixture
def loaded(session):
    session.load()
    return session


@pytest.fixture
def sample(loaded, config_path):
    config_path.write_text(
        """\
# my remotes
[one]
type = t
host = example.com

[secret]
type = p
user = me
pass = hidden
""",
        "utf-8",
    )
    loaded.load()
    return loaded


def reloaded(session):
    other = Session(str(session.path), registry=session.registry)
    other.key = session.key
    other.load()
    return other


def test_create_show_rename_delete_scenario(loaded, capsys):
    manage.create_remote(loaded, "r1", "t", ["x", "1"])
    assert reloaded(loaded).store.get("r1", "x") == "1"

    capsys.readouterr()
    manage.show_remotes(loaded)
    assert capsys.readouterr().out == (
        "Name                 Type\n"
        "====                 ====\n"
        "r1                   t\n"
    )

    keys = reloaded(loaded).store.items("r1")
    manage.rename_remote(loaded, "r1", "r2")
    store = reloaded(loaded).store
    assert "r1" not in store.sections()
    assert store.items("r2") == keys

    manage.delete_remote(loaded, "r2")
    assert reloaded(loaded).store.sections() == []


def test_create_remote_sets_type_and_runs_backend_setup(loaded, registry):
    manage.create_remote(loaded, "rem", "t", ["host", "h1", "region", "eu"])
    store = reloaded(loaded).store
    assert store.items("rem") == {
        "type": "t",
        "config_automatic": "yes",
        "host": "h1",
        "region": "eu",
    }
    assert registry.calls == ["rem"]
    assert loaded.terminal.auto_confirm


def test_create_remote_replaces_existing_remote(sample):
    manage.create_remote(sample, "one", "t", ["region", "us"])
    assert "host" not in reloaded(sample).store.keys("one")
    # Comments outside the replaced remote survive.
    assert sample.path.read_text().startswith("# my remotes\n")


def test_create_remote_with_odd_arguments_changes_nothing(loaded, config_path):
    with pytest.raises(KeyValueError) as e:
        manage.create_remote(loaded, "rem", "t", ["host"])
    assert str(e.value) == "found key without value (1 arguments)"
    assert "rem" not in loaded.store
    assert not config_path.exists()


@pytest.mark.parametrize("name", ["", "a", "bad:name", "bad/name", "dot.name"])
def test_create_remote_rejects_invalid_names(loaded, name):
    with pytest.raises(InvalidRemoteName):
        manage.create_remote(loaded, name, "t", [])
    assert loaded.store.section_list() == []


def test_create_remote_rejects_unknown_backend(loaded):
    with pytest.raises(UnknownBackend) as e:
        manage.create_remote(loaded, "rem", "nosuch", [])
    assert str(e.value) == 'Didn\'t find backend called "nosuch"'
    assert "rem" not in loaded.store


def test_update_remote(sample, registry):
    manage.update_remote(sample, "one", ["host", "other.example.com"])
    assert reloaded(sample).store.get("one", "host") == "other.example.com"
    assert registry.calls == ["one"]


def test_update_remote_requires_existing_remote(loaded):
    with pytest.raises(MissingRemote):
        manage.update_remote(loaded, "nosuch", ["host", "x"])


def test_update_remote_requires_pairs(sample):
    with pytest.raises(KeyValueError):
        manage.update_remote(sample, "one", ["host", "x", "port"])
    assert sample.store.get("one", "host") == "example.com"


def test_password_remote_stores_obscured_value(sample):
    manage.password_remote(sample, "secret", ["pass", "potato"])
    stored = reloaded(sample).store.get("secret", "pass")
    assert stored != "potato"
    assert sample.obscurer.reveal(stored) == "potato"


@pytest.mark.parametrize("key_values", [[], ["pass"], ["pass", "a", "b"]])
def test_password_remote_requires_exactly_one_pair(sample, key_values):
    with pytest.raises(KeyValueError):
        manage.password_remote(sample, "secret", key_values)


def test_show_remote_hides_passwords(sample, capsys):
    manage.show_remote(sample, "secret")
    assert capsys.readouterr().out == (
        "--------------------\n"
        "[secret]\n"
        "type = p\n"
        "user = me\n"
        "pass = *** ENCRYPTED ***\n"
        "--------------------\n"
    )


def test_show_remote_of_unknown_type_shows_all_values(sample, capsys):
    sample.store.set("odd", "type", "nosuch")
    sample.store.set("odd", "pass", "visible")
    manage.show_remote(sample, "odd")
    assert "pass = visible" in capsys.readouterr().out


def test_show_config(sample, capsys):
    manage.show_config(sample)
    assert capsys.readouterr().out.startswith("# my remotes\n[one]\n")


def test_show_config_empty(loaded, capsys):
    manage.show_config(loaded)
    assert capsys.readouterr().out == "; empty config\n"


def test_show_config_location(loaded, capsys):
    manage.show_config_location(loaded)
    out = capsys.readouterr().out
    assert out.startswith("Configuration file doesn't exist")
    assert str(loaded.path) in out
    loaded.save()
    manage.show_config_location(loaded)
    assert capsys.readouterr().out.startswith(
        "Configuration file is stored at:\n"
    )


def test_show_config_location_reports_cache_dir_in_debug_mode(
    loaded, output, monkeypatch, tmpdir
):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmpdir / "cache"))
    manage.show_config_location(loaded)
    assert output.backend.lines == []
    output.enable_debug = True
    manage.show_config_location(loaded)
    assert output.backend.lines == [
        "Cache directory: {}".format(tmpdir / "cache" / "rclone")
    ]


def test_dump_json(sample, capsys, monkeypatch):
    monkeypatch.setenv("RCLONE_CONFIG_ONE_HOST", "env.example.com")
    manage.dump(sample)
    data = json.loads(capsys.readouterr().out)
    assert data == {
        "one": {"type": "t", "host": "env.example.com"},
        "secret": {"type": "p", "user": "me", "pass": "hidden"},
    }


def test_dump_yaml(sample, capsys):
    manage.dump(sample, yaml_format=True)
    data = yaml.safe_load(capsys.readouterr().out)
    assert data["one"] == {"type": "t", "host": "example.com"}


def test_list_providers(loaded, capsys):
    manage.list_providers(loaded)
    data = json.loads(capsys.readouterr().out)
    assert [backend["Name"] for backend in data] == ["p", "t"]
    options = data[0]["Options"]
    assert options[1] == {
        "Name": "pass",
        "Help": "Password",
        "IsPassword": True,
        "Optional": True,
        "Examples": [],
    }


def test_copy_remote(sample):
    manage.copy_remote(sample, "one", "two")
    store = reloaded(sample).store
    assert store.items("two") == store.items("one")
    assert store.section_list() == ["one", "secret", "two"]


def test_copy_remote_requires_existing_remote(sample):
    with pytest.raises(MissingRemote):
        manage.copy_remote(sample, "nosuch", "two")


def test_rename_remote_keeps_case_of_keys(loaded, config_path):
    config_path.write_text("[r1]\ntype = t\naccessKeyID = AK\n", "utf-8")
    loaded.load()
    manage.rename_remote(loaded, "r1", "r2")
    assert config_path.read_text("utf-8") == (
        "[r2]\ntype = t\naccessKeyID = AK\n"
    )
    assert reloaded(loaded).store.keys("r2") == ["type", "accessKeyID"]


def test_rename_remote_to_same_name_does_nothing(sample, config_path):
    before = config_path.read_binary()
    manage.rename_remote(sample, "one", "one")
    assert config_path.read_binary() == before
    assert "one" in sample.store


def test_rename_remote_rejects_invalid_name(sample):
    with pytest.raises(InvalidRemoteName):
        manage.rename_remote(sample, "one", "b:ad")
    assert "one" in sample.store


def test_must_find_by_name(sample):
    assert manage.must_find_by_name(sample, "one").name == "t"
    with pytest.raises(MissingRemote) as e:
        manage.must_find_by_name(sample, "nosuch")
    assert "Couldn't find type of fs for 'nosuch'" in str(e.value)


def test_authorize_uses_temporary_remote(loaded, registry, config_path):
    seen = {}

    def configure(session, name):
        seen.update(session.store.items(name))
        registry.calls.append(name)

    registry.find("t").config = configure
    manage.authorize(loaded, "t", ["id", "secret"])
    assert registry.calls == [manage.AUTHORIZE_REMOTE]
    assert seen == {
        "config_automatic": "yes",
        "client_id": "id",
        "client_secret": "secret",
    }
    assert manage.AUTHORIZE_REMOTE not in loaded.store
    assert manage.AUTHORIZE_REMOTE not in config_path.read_text("utf-8")


def test_authorize_removes_temporary_remote_on_failure(loaded, registry):
    def configure(session, name):
        raise RuntimeError("browser went away")

    registry.find("t").config = configure
    with pytest.raises(RuntimeError):
        manage.authorize(loaded, "t", [])
    assert manage.AUTHORIZE_REMOTE not in loaded.store


def test_authorize_checks_arguments(loaded):
    with pytest.raises(KeyValueError):
        manage.authorize(loaded, "t", ["id"])
    with pytest.raises(UnknownBackend):
        manage.authorize(loaded, "nosuch", [])
    with pytest.raises(MissingRemote):
        manage.authorize(loaded, "p", [])


def test_encrypted_store_needs_password_to_reload(loaded, registry):
    loaded.set_password("hunter2")
    manage.create_remote(loaded, "r1", "t", ["x", "1"])
    assert b"[r1]" not in loaded.path.read_bytes()

    session = Session(
        str(loaded.path),
        terminal=ScriptedTerminal(),
        registry=registry,
        ask_password=False,
    )
    with pytest.raises(PasswordRequired):
        session.load()
    assert session.store.section_list() == []
