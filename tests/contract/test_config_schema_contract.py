from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest
import yaml

"""Config schema contract: the shipped example config must validate."""

ROOT = Path(__file__).resolve().parents[2]
SCHEMA_PATH = ROOT / "datamine" / "contracts" / "config_schema.json"


@pytest.fixture(scope="module")
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_example_config_validates(schema):
    data = yaml.safe_load((ROOT / "config" / "datamine.yml").read_text(encoding="utf-8"))
    jsonschema.validate(data, schema)


def test_empty_config_validates(schema):
    jsonschema.validate({}, schema)


@pytest.mark.parametrize(
    "data",
    [
        {"area_join_key": "row_id"},
        {"indent": -1},
        {"backend_error_ids": ["EnteredArea", "EnteredArea"]},
        {"input_directory": ""},
        {"unknown": 1},
    ],
)
def test_invalid_configs_rejected(schema, data):
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(data, schema)
