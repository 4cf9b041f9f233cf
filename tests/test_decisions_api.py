"""Committee member votes and the binding final decision."""
from conftest import TO_MEMBER_REVIEW


def _in_member_review(create_application, advance, **overrides):
    created = create_application(**overrides)
    return advance(created["id"], TO_MEMBER_REVIEW)


class TestFinalDecision:
    def test_decision_and_status_recorded_together(self, client, login, create_application, advance):
        """Decision row and APPROVED status are written in one request."""
        app = _in_member_review(create_application, advance)
        login("APPROVAL_COMMITTE")
        resp = client.post(
            "/api/decisions",
            json={
                "customerId": app["id"],
                "applicationReferenceNumber": app["applicationReferenceNumber"],
                "decision": "APPROVED",
                "committeeMember": "Credit Committee A",
            },
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["application"]["applicationStatus"] == "APPROVED"
        assert body["decision"]["decision"] == "APPROVED"
        assert body["decision"]["committeeMember"] == "Credit Committee A"
        assert body["decision"]["responsibleUnitEmail"] == "ac@bank.test"
        assert body["decision"]["responsibleUnitPhone"] == "0911000000"

        fetched = client.get(f"/api/decision/{app['applicationReferenceNumber']}").json()
        assert fetched["id"] == body["decision"]["id"]

    def test_rejection_without_reason_changes_nothing(self, client, login, create_application, advance):
        """Rejection without a reason -> 400; status and decision untouched."""
        app = _in_member_review(create_application, advance)
        login("APPROVAL_COMMITTE")
        resp = client.post(
            "/api/decisions",
            json={
                "customerId": app["id"],
                "applicationReferenceNumber": app["applicationReferenceNumber"],
                "decision": "REJECTED",
            },
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Please provide a decision reason for rejection"}
        assert client.get(f"/api/customer/{app['id']}").json()["applicationStatus"] == "MEMBER_REVIEW"
        assert client.get(f"/api/decision/{app['applicationReferenceNumber']}").status_code == 404

    def test_decision_in_wrong_status_writes_no_row(self, client, login, create_application):
        """Deciding a PENDING file -> 409 and no decision row."""
        created = create_application()
        login("APPROVAL_COMMITTE")
        resp = client.post(
            "/api/decisions",
            json={
                "customerId": created["id"],
                "applicationReferenceNumber": created["applicationReferenceNumber"],
                "decision": "APPROVED",
            },
        )
        assert resp.status_code == 409
        assert client.get(f"/api/decision/{created['applicationReferenceNumber']}").status_code == 404

    def test_reference_must_match_customer(self, client, login, create_application, advance):
        """Reference belonging to another customer -> 400."""
        app = _in_member_review(create_application, advance)
        login("APPROVAL_COMMITTE")
        resp = client.post(
            "/api/decisions",
            json={"customerId": app["id"], "applicationReferenceNumber": "DASHEN-199901-0001", "decision": "APPROVED"},
        )
        assert resp.status_code == 400

    def test_invalid_decision_value(self, client, login, create_application, advance):
        """Decision outside the allowed outcomes -> 400."""
        app = _in_member_review(create_application, advance)
        login("APPROVAL_COMMITTE")
        resp = client.post(
            "/api/decisions",
            json={
                "customerId": app["id"],
                "applicationReferenceNumber": app["applicationReferenceNumber"],
                "decision": "MAYBE",
            },
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid decision value"}

    def test_committee_members_cannot_decide(self, client, login, create_application, advance):
        """Only the approval committee issues the binding decision."""
        app = _in_member_review(create_application, advance)
        login("COMMITTE_MEMBER")
        resp = client.post(
            "/api/decisions",
            json={
                "customerId": app["id"],
                "applicationReferenceNumber": app["applicationReferenceNumber"],
                "decision": "APPROVED",
            },
        )
        assert resp.status_code == 403


class TestDecisionHistory:
    def test_reversal_kept_after_approval(self, client, login, create_application, advance):
        """A later approval replaces the current decision but the reversal stays in the history."""
        app = _in_member_review(create_application, advance)
        ref = app["applicationReferenceNumber"]
        advance(
            app["id"],
            [
                ("APPROVAL_COMMITTE", "decision", {"decision": "COMMITTE_REVERSED", "decisionReason": "Redo cash flow"}),
                ("CREDIT_ANALYST", "rev", None),
                ("APPROVAL_COMMITTE", "decision", {"decision": "APPROVED"}),
            ],
        )

        current = client.get(f"/api/decision/{ref}").json()
        assert current["decision"] == "APPROVED"

        history = client.get(f"/api/decision/{ref}/history").json()
        assert [entry["decision"] for entry in history] == ["COMMITTE_REVERSED", "APPROVED"]
        assert history[0]["decisionReason"] == "Redo cash flow"
        assert history[0]["decidedBy"] == "ac-1"
        assert {entry["decisionId"] for entry in history} == {current["id"]}

    def test_refused_decision_not_logged(self, client, login, create_application, advance):
        """A rejected request adds nothing to the history."""
        app = _in_member_review(create_application, advance)
        login("APPROVAL_COMMITTE")
        resp = client.post(
            "/api/decisions",
            json={
                "customerId": app["id"],
                "applicationReferenceNumber": app["applicationReferenceNumber"],
                "decision": "REJECTED",
            },
        )
        assert resp.status_code == 400
        assert client.get(f"/api/decision/{app['applicationReferenceNumber']}/history").status_code == 404


class TestMemberVotes:
    def test_one_vote_per_member(self, client, login, create_application, advance):
        """Second vote by the same member -> 409; the first stands."""
        app = _in_member_review(create_application, advance)
        ref = app["applicationReferenceNumber"]
        login("COMMITTE_MEMBER")
        resp = client.post("/api/members", json={"applicationReferenceNumber": ref, "decision": "APPROVED"})
        assert resp.status_code == 201
        assert resp.json()["decision"]["user"]["name"] == "Kebede M"

        resp = client.post("/api/members", json={"applicationReferenceNumber": ref, "decision": "REJECTED",
                                                 "decisionReason": "Second thoughts"})
        assert resp.status_code == 409

        mine = client.get(f"/api/member/{ref}").json()
        assert mine["decision"] == "APPROVED"

    def test_vote_reason_required_for_rejection(self, client, login, create_application, advance):
        """Rejecting vote without a reason -> 400."""
        app = _in_member_review(create_application, advance)
        login("COMMITTE_MEMBER")
        resp = client.post(
            "/api/members", json={"applicationReferenceNumber": app["applicationReferenceNumber"], "decision": "REJECTED"}
        )
        assert resp.status_code == 400

    def test_votes_closed_outside_member_review(self, client, login, create_application):
        """Voting outside MEMBER_REVIEW -> 409."""
        created = create_application()
        login("COMMITTE_MEMBER")
        resp = client.post(
            "/api/members",
            json={"applicationReferenceNumber": created["applicationReferenceNumber"], "decision": "APPROVED"},
        )
        assert resp.status_code == 409

    def test_no_vote_yet(self, client, login, create_application, advance):
        """Member with no vote -> 404."""
        app = _in_member_review(create_application, advance)
        login("COMMITTE_MEMBER")
        resp = client.get(f"/api/member/{app['applicationReferenceNumber']}")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Decision not found for this user"}

    def test_view_tally(self, client, login, create_application, advance):
        """Committee view lists every vote and counts them per outcome."""
        app = _in_member_review(create_application, advance)
        ref = app["applicationReferenceNumber"]
        for user_id, decision, reason in (
            ("cm-1", "APPROVED", None),
            ("cm-2", "APPROVED", None),
            ("cm-3", "COMMITTE_REVERSED", "Stress test the cash flow"),
        ):
            login("COMMITTE_MEMBER", user_id=user_id)
            resp = client.post(
                "/api/members",
                json={"applicationReferenceNumber": ref, "decision": decision, "decisionReason": reason},
            )
            assert resp.status_code == 201, resp.text

        login("APPROVAL_COMMITTE")
        body = client.get(f"/api/view/{ref}").json()
        assert len(body["decisions"]) == 3
        assert body["tally"] == {"APPROVED": 2, "REJECTED": 0, "COMMITTE_REVERSED": 1, "total": 3}

    def test_view_without_votes(self, client, login, create_application, advance):
        """Committee view before any vote -> 404."""
        app = _in_member_review(create_application, advance)
        login("APPROVAL_COMMITTE")
        resp = client.get(f"/api/view/{app['applicationReferenceNumber']}")
        assert resp.status_code == 404
