import pytest

from src.config.settings import Settings


def test_allocation_policy_follows_settings():
    policy = Settings(
        waitlist_priority_keywords={"bride": 1},
        default_waitlist_priority=5,
        capacity_warning_pct=60,
        capacity_critical_pct=80,
    ).allocation_policy()

    assert policy.priority_keywords == (("bride", 1),)
    assert policy.default_priority == 5
    assert policy.warning_pct == 60
    assert policy.critical_pct == 80


def test_inverted_capacity_thresholds_are_rejected():
    with pytest.raises(ValueError):
        Settings(capacity_warning_pct=95, capacity_critical_pct=90).allocation_policy()


@pytest.mark.parametrize("field", ["app_host", "app_port", "frontend_url"])
def test_settings_carry_only_what_the_service_reads(field):
    assert field not in Settings.model_fields
