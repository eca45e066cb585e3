import pytest

from versionist.core.config_model import DEFAULT_COMMIT_MESSAGE
from versionist.core.config_store import ConfigStore, load_config
from versionist.core.errors import ConfigurationError

CONFIG = """
current_version = "1.2.3"
commit = true
tag_name = "v{new_version}"

[files."pyproject.toml"]
search = 'version = "{current_version}"'
replace = 'version = "{new_version}"'

[files."src/pkg/__init__.py"]

[files."Cargo.toml"]
search = '^version = "{current_version}"$'
regex = true
"""


def test_load_config(write_project, tmp_path):
    path = write_project(CONFIG)

    config = ConfigStore(path).load()

    assert config.current_version == "1.2.3"
    assert config.commit is True
    assert config.tag is False
    assert config.commit_message == DEFAULT_COMMIT_MESSAGE
    assert config.tag_name == "v{new_version}"
    assert config.path == path.resolve()
    assert config.root == tmp_path.resolve()
    rules = config.file_rules()
    assert [rule.path for rule in rules] == ["pyproject.toml", "src/pkg/__init__.py", "Cargo.toml"]
    assert rules[1].search == "{current_version}"
    assert rules[1].replace == "{new_version}"
    assert rules[2].regex is True


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(tmp_path / "nope.toml")
    assert excinfo.value.code == "config_not_found"
    assert excinfo.value.field == "config"


def test_invalid_toml(write_project):
    path = write_project("current_version = ")
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(path)
    assert excinfo.value.code == "config_invalid_toml"


def test_missing_current_version_names_the_field(write_project):
    path = write_project('[files."a.txt"]\n')
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(path)
    assert excinfo.value.field == "current_version"


def test_unknown_rule_key_names_the_field(write_project):
    path = write_project('current_version = "1.0.0"\n[files."a.txt"]\nserach = "x"\n')
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(path)
    assert excinfo.value.field == "files.a.txt.serach"


def test_wrong_type_names_the_field(write_project):
    path = write_project('current_version = "1.0.0"\ncommit = "sometimes"\n')
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(path)
    assert excinfo.value.field == "commit"
    assert excinfo.value.exit_code == 2


def test_overrides_take_precedence_over_the_file(write_project):
    path = write_project(CONFIG)

    config = load_config(path, {"commit": False, "tag": True, "tag_name": "release-{new_version}"})

    assert config.commit is False
    assert config.tag is True
    assert config.tag_name == "release-{new_version}"
    assert config.current_version == "1.2.3"
