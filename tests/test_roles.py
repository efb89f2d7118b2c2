import pytest

from interview_core.errors import InvalidRoleInputError
from interview_core.models import Level


def test_catalog_has_six_roles_and_four_levels(catalog):
    assert len(catalog.roles()) == 6
    assert catalog.level_names() == ["entry", "mid", "senior", "lead"]


@pytest.mark.parametrize(
    "token", ["software-engineer", "Software Engineer", "  software engineer ", "SOFTWARE-ENGINEER"]
)
def test_role_lookup_is_case_insensitive_by_id_or_name(catalog, token):
    assert catalog.get_role(token).id == "software-engineer"


def test_level_lookup_trims_and_ignores_case(catalog):
    level = catalog.get_level(" Senior ")
    assert level.level == Level.SENIOR
    assert level.expected_depth == 8


def test_unknown_role_lists_available_options(catalog):
    with pytest.raises(InvalidRoleInputError) as exc:
        catalog.get_role("astronaut")
    err = exc.value
    assert 'Invalid role name: "astronaut"' in err.message
    assert "Software Engineer" in err.available_options
    assert err.error_code == "INVALID_ROLE_INPUT"


def test_unknown_level_lists_available_levels(catalog):
    with pytest.raises(InvalidRoleInputError) as exc:
        catalog.get_level("principal")
    assert exc.value.available_options == ["entry", "mid", "senior", "lead"]


def test_validity_helpers(catalog):
    assert catalog.is_valid_role("Data Scientist")
    assert not catalog.is_valid_role("")
    assert catalog.is_valid_level("lead")
    assert not catalog.is_valid_level("intern")
