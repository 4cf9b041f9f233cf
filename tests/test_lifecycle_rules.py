"""
Rule table checks that need no database: targets, required notes, role checks.
Run from the project root: python -m pytest tests/test_lifecycle_rules.py -v
"""
import unittest

from schemas.auth import SessionUser
from schemas.decision import TransitionRequest
from services.errors import NotFound, PermissionDenied, ValidationFailed
from services.lifecycle import QUEUES, RULES, authorize, get_queue, get_rule, resolve_target, validate_request
from services.status_registry import ApplicationStatus as S


def _user(role):
    return SessionUser(id=f"{role.lower()}-1", role=role)


class TestRuleTable(unittest.TestCase):
    def test_every_status_reachable_except_intake(self):
        """Only PENDING (intake) and ANALYSIS_COMPLETED (legacy) are never a target."""
        targets = {t for rule in RULES.values() for t in rule.targets}
        unreachable = set(S) - targets
        self.assertEqual(unreachable, {S.PENDING, S.ANALYSIS_COMPLETED})

    def test_only_decision_has_several_targets(self):
        """The committee decision is the single branching action."""
        self.assertEqual([r.action for r in RULES.values() if r.is_decision], ["decision"])

    def test_assignments_recorded(self):
        """Actions that hand the file to someone record who took it."""
        self.assertEqual(RULES["take"].assigns, "credit_analyst_id")
        self.assertEqual(RULES["oka"].assigns, "supervisor_id")
        self.assertEqual(RULES["view"].assigns, "committee_manager_id")

    def test_unknown_action(self):
        """Unknown action or queue -> NotFound."""
        with self.assertRaises(NotFound):
            get_rule("archive")
        with self.assertRaises(NotFound):
            get_queue("everything")

    def test_revised_queue_is_per_analyst(self):
        """Revised queue is filtered to the caller; supervisor queue spans two statuses."""
        self.assertEqual(QUEUES["revised"].assigned_column, "credit_analyst_id")
        self.assertEqual(QUEUES["supervisor"].statuses, (S.CONDITIONAL, S.SUPERVISOR_REVIEWING))


class TestResolveTarget(unittest.TestCase):
    def test_single_target_default(self):
        """Single-target action with no target given -> its only target."""
        self.assertIs(resolve_target(get_rule("take"), None), S.UNDER_REVIEW)

    def test_single_target_mismatch(self):
        """Asking a single-target action for another status -> ValidationFailed."""
        with self.assertRaises(ValidationFailed):
            resolve_target(get_rule("take"), "APPROVED")

    def test_decision_requires_value(self):
        """Decision needs one of its outcomes, case-insensitive."""
        rule = get_rule("decision")
        with self.assertRaisesRegex(ValidationFailed, "Decision is required"):
            resolve_target(rule, None)
        with self.assertRaisesRegex(ValidationFailed, "Invalid decision value"):
            resolve_target(rule, "PENDING")
        self.assertIs(resolve_target(rule, "approved"), S.APPROVED)


class TestValidateRequest(unittest.TestCase):
    def test_ask_requires_comment(self):
        """ask needs a non-blank analyst comment."""
        with self.assertRaises(ValidationFailed):
            validate_request(get_rule("ask"), TransitionRequest(credit_analyst_comment="  "))
        self.assertIs(
            validate_request(get_rule("ask"), TransitionRequest(credit_analyst_comment="Need collateral")),
            S.RM_RECCOMENDATION,
        )

    def test_answer_requires_recommendation(self):
        """answer needs the RM's recommendation."""
        with self.assertRaises(ValidationFailed):
            validate_request(get_rule("answer"), TransitionRequest())

    def test_rejection_requires_reason(self):
        """Rejection without a reason fails; approval without one passes."""
        with self.assertRaisesRegex(ValidationFailed, "rejection"):
            validate_request(get_rule("decision"), TransitionRequest(decision="REJECTED"))
        self.assertIs(
            validate_request(get_rule("decision"), TransitionRequest(decision="APPROVED")),
            S.APPROVED,
        )


class TestAuthorize(unittest.TestCase):
    def test_role_allowed(self):
        """Listed role passes."""
        authorize(_user("CREDIT_ANALYST"), get_rule("take").roles, "take")

    def test_role_refused(self):
        """Unlisted role -> PermissionDenied."""
        with self.assertRaises(PermissionDenied):
            authorize(_user("RELATIONSHIP_MANAGER"), get_rule("take").roles, "take")

    def test_admin_may_do_anything(self):
        """Admin passes even an empty role set."""
        authorize(_user("ADMIN"), frozenset(), "override")

    def test_banned_refused(self):
        """Banned accounts are refused everywhere."""
        with self.assertRaises(PermissionDenied):
            authorize(_user("BANNED"), get_rule("take").roles, "take")


if __name__ == "__main__":
    unittest.main()
