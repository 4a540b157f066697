"""
Tests for utils/permissions.py: role-based action gate.
"""
from types import SimpleNamespace as NS

import pytest

from models.enums import Action, Role
from utils.permissions import PermissionPolicy, can_perform


@pytest.fixture
def worker():
    return NS(id=7, role=Role.WORKER)


@pytest.fixture
def manager():
    return NS(id=1, role=Role.MANAGER)


def test_worker_cannot_delete_training_material(worker):
    assert can_perform(Action.DELETE_TRAINING_MATERIAL, worker) is False


def test_manager_can_delete_training_material(manager):
    assert can_perform(Action.DELETE_TRAINING_MATERIAL, manager) is True


@pytest.mark.parametrize("action", [a for a in Action if a != Action.REPORT_INCIDENT])
def test_manager_allowed_everything(manager, action):
    assert can_perform(action, manager)


@pytest.mark.parametrize("action", [
    a for a in Action if a not in (Action.REPORT_INCIDENT, Action.VIEW_OWN_INCIDENTS_ONLY)
])
def test_worker_denied_management_actions(worker, action):
    assert not can_perform(action, worker)


def test_worker_can_report_incident(worker):
    assert can_perform(Action.REPORT_INCIDENT, worker)


def test_worker_views_only_own_incidents(worker):
    assert can_perform(Action.VIEW_OWN_INCIDENTS_ONLY, worker)
    assert can_perform(Action.VIEW_OWN_INCIDENTS_ONLY, worker, resource_owner_id=7)
    assert not can_perform(Action.VIEW_OWN_INCIDENTS_ONLY, worker, resource_owner_id=8)


def test_manager_incident_reporting_follows_policy(manager):
    assert can_perform(Action.REPORT_INCIDENT, manager, policy=PermissionPolicy(managers_can_report_incidents=True))
    assert not can_perform(Action.REPORT_INCIDENT, manager, policy=PermissionPolicy(managers_can_report_incidents=False))


def test_worker_reporting_unaffected_by_policy(worker):
    assert can_perform(Action.REPORT_INCIDENT, worker, policy=PermissionPolicy(managers_can_report_incidents=False))


def test_string_actions_and_roles_accepted():
    assert can_perform("deleteQuiz", NS(id=1, role="manager"))
    assert not can_perform("deleteQuiz", NS(id=2, role="worker"))


@pytest.mark.parametrize("action,user", [
    ("launchRocket", NS(id=1, role=Role.MANAGER)),
    (Action.CREATE_QUIZ, NS(id=1, role="admin")),
    (Action.REPORT_INCIDENT, NS(id=1, role=None)),
    (Action.REPORT_INCIDENT, NS(id=1)),
    (Action.REPORT_INCIDENT, None),
    (None, NS(id=1, role=Role.MANAGER)),
])
def test_unknown_inputs_fail_closed(action, user):
    assert can_perform(action, user) is False
