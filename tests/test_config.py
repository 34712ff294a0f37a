import pytest
import yaml

from sc_toolkit.config import load_config


def test_default_config():
    config = load_config()

    assert config["cellranger"]["cores"] == 32
    assert config["cellranger"]["runtime"] == "24:00:00"
    assert config["qc"]["mt_pattern"] == "^MT-"
    assert config["orthologs"]["include_unmapped"] is False


def test_user_config_overrides_nested_values(tmp_path):
    path = tmp_path / "my.yaml"
    path.write_text(yaml.safe_dump({"qc": {"mt_pattern": "^mt-"}, "plots": {"dpi": 150}}))

    config = load_config(str(path))

    assert config["qc"]["mt_pattern"] == "^mt-"
    assert config["qc"]["min_cells"] == 3
    assert config["plots"]["dpi"] == 150
    assert load_config()["qc"]["mt_pattern"] == "^MT-"


def test_unknown_section_rejected(tmp_path):
    path = tmp_path / "my.yaml"
    path.write_text(yaml.safe_dump({"clustering": {"resolution": 1.0}}))

    with pytest.raises(ValueError, match="clustering"):
        load_config(str(path))


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))
