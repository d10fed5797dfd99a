"""
Integration tests for reports, verification and the staff review queues.
"""

import uuid

import pytest

from repositories.db_models import VerificationRequest

PROOF = "I publish two apps on Google Play under Example Labs."


def _report_post(client, headers, post_id, reason="spam"):
    return client.post(
        "/api/reports",
        json={"targetType": "post", "reason": reason, "postId": str(post_id)},
        headers=headers,
    )


class TestSubmitReport:
    def test_report_post(self, client, test_post, other_headers):
        response = _report_post(client, other_headers, test_post.id)
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_requires_auth(self, client, test_post):
        response = client.post(
            "/api/reports",
            json={"targetType": "post", "reason": "spam", "postId": str(test_post.id)},
        )
        assert response.status_code == 401

    def test_unknown_reason(self, client, test_post, other_headers):
        response = _report_post(client, other_headers, test_post.id, reason="boring")
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid payload"

    def test_missing_target_id(self, client, other_headers):
        response = client.post(
            "/api/reports",
            json={"targetType": "comment", "reason": "spam"},
            headers=other_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Missing commentId"

    def test_self_report(self, client, test_user, auth_headers):
        response = client.post(
            "/api/reports",
            json={"targetType": "user", "reason": "other", "targetUserId": str(test_user.id)},
            headers=auth_headers,
        )
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "target_type, field",
        [("post", "postId"), ("comment", "commentId"), ("user", "targetUserId")],
    )
    def test_unknown_target(self, client, other_headers, target_type, field):
        response = client.post(
            "/api/reports",
            json={"targetType": target_type, "reason": "spam", field: str(uuid.uuid4())},
            headers=other_headers,
        )
        assert response.status_code == 404
        assert response.json()["type"] == "not_found"

    def test_rate_limited(self, client, test_post, other_headers):
        statuses = [
            _report_post(client, other_headers, test_post.id).status_code
            for _ in range(11)
        ]
        assert statuses[:10] == [200] * 10
        assert statuses[10] == 429


class TestReportQueue:
    def test_list_and_resolve(self, client, test_post, other_headers, moderator_headers, moderator_user):
        _report_post(client, other_headers, test_post.id)

        queue = client.get(
            "/api/admin/reports", params={"status": "open"}, headers=moderator_headers
        ).json()
        assert queue["total"] == 1
        report = queue["items"][0]
        assert report["targetId"] == str(test_post.id)
        assert report["reporter"]["name"] == "Other User"

        resolved = client.patch(
            f"/api/admin/reports/{report['id']}",
            json={"status": "resolved", "resolutionNote": "Post hidden"},
            headers=moderator_headers,
        ).json()
        assert resolved["status"] == "resolved"
        assert resolved["resolvedById"] == str(moderator_user.id)
        assert resolved["resolutionNote"] == "Post hidden"

        reopened = client.patch(
            f"/api/admin/reports/{report['id']}",
            json={"status": "open"},
            headers=moderator_headers,
        ).json()
        assert reopened["resolvedById"] is None

    def test_invalid_status(self, client, test_post, other_headers, moderator_headers):
        _report_post(client, other_headers, test_post.id)
        report_id = client.get("/api/admin/reports", headers=moderator_headers).json()[
            "items"
        ][0]["id"]
        response = client.patch(
            f"/api/admin/reports/{report_id}",
            json={"status": "closed"},
            headers=moderator_headers,
        )
        assert response.status_code == 400

    def test_non_text_status(self, client, test_post, other_headers, moderator_headers):
        _report_post(client, other_headers, test_post.id)
        report_id = client.get("/api/admin/reports", headers=moderator_headers).json()[
            "items"
        ][0]["id"]
        response = client.patch(
            f"/api/admin/reports/{report_id}",
            json={"status": 3},
            headers=moderator_headers,
        )
        assert response.status_code == 400
        assert response.json()["type"] == "invalid_status"

    def test_missing_report(self, client, moderator_headers):
        response = client.patch(
            f"/api/admin/reports/{uuid.uuid4()}",
            json={"status": "resolved"},
            headers=moderator_headers,
        )
        assert response.status_code == 404

    def test_filter_value_validated(self, client, moderator_headers):
        response = client.get(
            "/api/admin/reports", params={"reason": "boring"}, headers=moderator_headers
        )
        assert response.status_code == 400

    def test_user_cannot_triage(self, client, auth_headers):
        assert client.get("/api/admin/reports", headers=auth_headers).status_code == 403


class TestVerificationFlow:
    def test_submit_then_approve(
        self, client, test_user, auth_headers, moderator_headers, db_session
    ):
        submitted = client.post(
            "/api/verify/request",
            json={
                "proofMessage": PROOF,
                "playStoreDeveloperUrl": "https://play.google.com/store/apps/dev?id=1",
            },
            headers=auth_headers,
        )
        assert submitted.status_code == 200
        request_id = submitted.json()["requestId"]

        me = client.get("/api/verify/me", headers=auth_headers).json()
        assert me["state"]["status"] == "pending"

        queue = client.get(
            "/api/admin/verification", params={"status": "pending"}, headers=moderator_headers
        ).json()
        assert [r["id"] for r in queue["items"]] == [request_id]

        reviewed = client.patch(
            f"/api/admin/verification/{request_id}",
            json={"status": "approved"},
            headers=moderator_headers,
        )
        assert reviewed.json() == {"ok": True}

        me = client.get("/api/verify/me", headers=auth_headers).json()
        assert me["state"]["status"] == "approved"
        assert me["user"]["isVerified"] is True

    def test_short_proof(self, client, auth_headers):
        response = client.post(
            "/api/verify/request", json={"proofMessage": "trust me"}, headers=auth_headers
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [{}, {"proofMessage": None}])
    def test_absent_proof(self, client, auth_headers, body):
        response = client.post("/api/verify/request", json=body, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["type"] == "proof_too_short"

    def test_duplicate_pending(self, client, auth_headers, db_session):
        client.post("/api/verify/request", json={"proofMessage": PROOF}, headers=auth_headers)
        response = client.post(
            "/api/verify/request", json={"proofMessage": PROOF}, headers=auth_headers
        )
        assert response.status_code == 409
        assert db_session.query(VerificationRequest).count() == 1

    def test_not_requested(self, client, auth_headers):
        me = client.get("/api/verify/me", headers=auth_headers).json()
        assert me == {
            "ok": True,
            "user": me["user"],
            "state": {
                "status": "not_requested",
                "submittedAt": None,
                "approvedAt": None,
                "reviewedAt": None,
                "note": None,
            },
        }
        assert me["user"]["role"] == "user"

    def test_review_twice(self, client, auth_headers, admin_headers):
        request_id = client.post(
            "/api/verify/request", json={"proofMessage": PROOF}, headers=auth_headers
        ).json()["requestId"]
        url = f"/api/admin/verification/{request_id}"
        client.patch(url, json={"status": "rejected", "note": "No link"}, headers=admin_headers)
        response = client.patch(url, json={"status": "approved"}, headers=admin_headers)
        assert response.status_code == 409

    def test_non_text_review_status(self, client, auth_headers, admin_headers):
        request_id = client.post(
            "/api/verify/request", json={"proofMessage": PROOF}, headers=auth_headers
        ).json()["requestId"]
        response = client.patch(
            f"/api/admin/verification/{request_id}",
            json={"status": True},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["type"] == "invalid_status"
