"""
Tests for YAML configuration and logging setup.

Run with:
    pytest tests/test_config.py -v
"""

import logging

import pytest
import yaml

from nucleon_mc.config import ProfileConfig
from nucleon_mc.logging_config import setup_logging


def test_defaults():
    config = ProfileConfig()
    assert config.width == 0.5
    assert config.kernel_width == config.width
    assert config.grid == (256, 256)
    assert config.extent == (25.6, 25.6)
    assert config.cross_section == 6.4
    assert config.cross_sec_param is None


def test_from_yaml(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text(yaml.safe_dump({
        'width': 0.6,
        'fluctuation': 2.0,
        'cross_section': 7.0,
        'grid': [128, 64],
        'extent': [12.8, 6.4],
        'correlation_length': 0.3,
        'seed': 5,
    }))
    config = ProfileConfig.from_yaml(path)

    assert config.width == 0.6
    assert config.kernel_width == 0.6
    assert config.grid == (128, 64)
    assert config.extent == (12.8, 6.4)
    assert config.seed == 5


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert ProfileConfig.from_yaml(path) == ProfileConfig()


def test_yaml_round_trip(tmp_path):
    config = ProfileConfig(width=0.4, cross_section=None, cross_sec_param=0.3,
                           grid=(32, 32), extent=(3.2, 3.2), seed=1)
    path = tmp_path / "out.yaml"
    config.to_yaml(path)
    assert ProfileConfig.from_yaml(path) == config


def test_tuned_parameter_replaces_default_cross_section():
    config = ProfileConfig.from_dict({'cross_sec_param': -0.37})
    assert config.cross_section is None
    assert config.cross_sec_param == -0.37


@pytest.mark.parametrize("data", [
    {'width': 0.0},
    {'fluctuation': -1.0},
    {'grid': [0, 64]},
    {'grid': [64]},
    {'extent': [6.4, -1.0]},
    {'correlation_length': 0.0},
    {'field_variance': -2.0},
    {'cross_section': -6.4},
    {'cross_section': None},
    {'max_impact': 0.0},
])
def test_invalid_values_rejected(data):
    with pytest.raises(ValueError):
        ProfileConfig.from_dict(data)


def test_unknown_keys_rejected():
    with pytest.raises(ValueError, match="nucleon_width"):
        ProfileConfig.from_dict({'nucleon_width': 0.5})


def test_non_mapping_yaml_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        ProfileConfig.from_yaml(path)


def test_setup_logging(tmp_path):
    log_file = tmp_path / "run.log"
    logger = setup_logging(logging.DEBUG, log_file=str(log_file))
    assert logger.name == "nucleon_mc"
    assert len(logger.handlers) == 2

    logging.getLogger("nucleon_mc.physics").debug("hello from physics")
    for handler in logger.handlers:
        handler.flush()
    assert "hello from physics" in log_file.read_text()

    # Repeated setup does not stack handlers
    logger = setup_logging(logging.INFO)
    assert len(logger.handlers) == 1

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
