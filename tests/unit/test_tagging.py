from dataclasses import replace

import pytest

from conftest import hydrant_attributes
from hydrant_export.common.errors import FormatError, ValidationError
from hydrant_export.common.models import HydrantType, NormalizedHydrant
from hydrant_export.pipeline.tagging import (
    cross_check_identity,
    map_hydrant_type,
    tag_hydrant,
    validate_operator,
)


def _hydrant(**overrides) -> NormalizedHydrant:
    return NormalizedHydrant(latitude="47.95", longitude="7.94", attributes=hydrant_attributes(**overrides))


def test_map_hydrant_type_closed_mapping():
    assert map_hydrant_type("Unterflurhydrant") is HydrantType.UNDERGROUND
    assert map_hydrant_type("Überflurhydrant") is HydrantType.PILLAR


@pytest.mark.parametrize("label", ["Standrohr", "unterflurhydrant", "", None])
def test_map_hydrant_type_rejects_unknown_labels(label):
    with pytest.raises(ValidationError):
        map_hydrant_type(label)


def test_cross_check_identity_returns_transaction_id():
    assert cross_check_identity("42", "42", "ID-42") == "42"


@pytest.mark.parametrize(
    ("transaction_id", "plain_id", "logical_id"),
    [
        ("42", "42", "ID-43"),
        ("41", "42", "ID-42"),
        ("42", "42", "42"),
        (None, "42", "ID-42"),
        ("42", "", "ID-"),
        ("42", "42", None),
    ],
)
def test_cross_check_identity_rejects_mismatches(transaction_id, plain_id, logical_id):
    with pytest.raises(ValidationError):
        cross_check_identity(transaction_id, plain_id, logical_id)


def test_validate_operator():
    assert validate_operator("EWK Kirchzarten", "EWK Kirchzarten") == "EWK Kirchzarten"
    with pytest.raises(ValidationError):
        validate_operator("Stadtwerke Freiburg", "EWK Kirchzarten")
    with pytest.raises(ValidationError):
        validate_operator(None, "EWK Kirchzarten")


def test_tag_hydrant_builds_osm_tags(config):
    tagged = tag_hydrant(_hydrant(), config)

    assert tagged.latitude == "47.95"
    assert tagged.longitude == "7.94"
    assert tagged.tags() == {
        "emergency": "fire_hydrant",
        "fire_hydrant:type": "underground",
        "fire_hydrant:diameter": "100",
        "operator": "EWK Kirchzarten",
        "ref": "4711",
        "start_date": "1998",
    }


def test_tag_hydrant_omits_absent_optional_tags(config):
    tagged = tag_hydrant(_hydrant(NENNWEITE="100", DN="150", INBETRIEBNAHME=None), config)

    tags = tagged.tags()
    assert "fire_hydrant:diameter" not in tags
    assert "start_date" not in tags
    assert tagged.diameter is None


def test_tag_hydrant_reads_configured_operator(config):
    other = replace(config, policy=replace(config.policy, operator="Stadtwerke Freiburg"))
    tagged = tag_hydrant(_hydrant(NUMMERNVERGABE="Stadtwerke Freiburg"), other)
    assert tagged.operator == "Stadtwerke Freiburg"


def test_tag_hydrant_propagates_format_errors(config):
    with pytest.raises(FormatError):
        tag_hydrant(_hydrant(INBETRIEBNAHME="01.01.1998"), config)
