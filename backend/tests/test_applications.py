"""Tests for the application endpoints."""

API = "/api/v1.0"

COVER_LETTER = "Five years of Python, happy to relocate."


class TestApplyScenario:
    """A worker finds a published job and applies to it."""

    def test_apply_and_read_back(self, client, company, worker, published_job, headers_for):
        jobs = client.get(f"{API}/jobs").json()
        job_id = jobs[0]["job"]["id"]
        assert job_id == published_job.id

        response = client.post(
            f"{API}/application",
            json={"jobId": job_id, "coverLetter": COVER_LETTER},
            headers=headers_for(worker),
        )
        assert response.status_code == 201
        created = response.json()
        assert created["jobId"] == job_id
        assert created["authorId"] == worker.id
        assert created["coverLetter"] == COVER_LETTER

        response = client.get(
            f"{API}/application/{created['id']}", headers=headers_for(worker)
        )
        assert response.status_code == 200
        assert response.json()["coverLetter"] == COVER_LETTER

        response = client.get(
            f"{API}/application/{created['id']}", headers=headers_for(company)
        )
        assert response.status_code == 200

        assert client.get(f"{API}/job/{job_id}").json()["appCount"] == 1

    def test_string_job_id(self, client, worker, published_job, headers_for):
        response = client.post(
            f"{API}/application",
            json={"jobId": str(published_job.id), "coverLetter": COVER_LETTER},
            headers=headers_for(worker),
        )
        assert response.status_code == 201


class TestCreateApplication:
    """Tests for POST /application."""

    def test_duplicate_rejected(self, client, worker, published_job, application, headers_for):
        response = client.post(
            f"{API}/application",
            json={"jobId": published_job.id, "coverLetter": COVER_LETTER},
            headers=headers_for(worker),
        )
        assert response.status_code == 409
        assert response.json()["name"] == "ConflictError"

    def test_company_rejected(self, client, company, published_job, headers_for):
        response = client.post(
            f"{API}/application",
            json={"jobId": published_job.id, "coverLetter": COVER_LETTER},
            headers=headers_for(company),
        )
        assert response.status_code == 405

    def test_anonymous_rejected(self, client, published_job):
        response = client.post(
            f"{API}/application",
            json={"jobId": published_job.id, "coverLetter": COVER_LETTER},
        )
        assert response.status_code == 401

    def test_unknown_job(self, client, worker, headers_for):
        response = client.post(
            f"{API}/application",
            json={"jobId": 999, "coverLetter": COVER_LETTER},
            headers=headers_for(worker),
        )
        assert response.status_code == 404

    def test_invalid_job_id(self, client, worker, headers_for):
        response = client.post(
            f"{API}/application",
            json={"jobId": "nine", "coverLetter": COVER_LETTER},
            headers=headers_for(worker),
        )
        assert response.status_code == 400
        assert response.json()["errorCode"] == "PFE0001"

    def test_job_id_out_of_range(self, client, worker, headers_for):
        response = client.post(
            f"{API}/application",
            json={"jobId": "99999999999999999999", "coverLetter": COVER_LETTER},
            headers=headers_for(worker),
        )
        assert response.status_code == 400
        assert response.json()["errorCode"] == "PFE0004"

    def test_cover_letter_too_long(self, client, worker, published_job, headers_for):
        response = client.post(
            f"{API}/application",
            json={"jobId": published_job.id, "coverLetter": "c" * 1001},
            headers=headers_for(worker),
        )
        assert response.status_code == 400
        assert response.json()["errorCode"] == "PFE0002"


class TestReadApplication:
    """Tests for GET /application/{application_id}."""

    def test_other_worker_rejected(self, client, other_worker, application, headers_for):
        response = client.get(
            f"{API}/application/{application.id}", headers=headers_for(other_worker)
        )
        assert response.status_code == 405

    def test_other_company_rejected(self, client, other_company, application, headers_for):
        response = client.get(
            f"{API}/application/{application.id}", headers=headers_for(other_company)
        )
        assert response.status_code == 405

    def test_id_out_of_range(self, client, worker, headers_for):
        response = client.get(
            f"{API}/application/99999999999999999999", headers=headers_for(worker)
        )
        assert response.status_code == 400

    def test_missing_application_looks_forbidden(self, client, worker, headers_for):
        response = client.get(f"{API}/application/999", headers=headers_for(worker))
        assert response.status_code == 405


class TestUpdateApplication:
    """Tests for PUT /application/{application_id}."""

    def test_author_updates_cover_letter(self, client, worker, application, headers_for):
        response = client.put(
            f"{API}/application/{application.id}",
            json={"coverLetter": "Updated letter"},
            headers=headers_for(worker),
        )
        assert response.status_code == 200
        assert response.json()["coverLetter"] == "Updated letter"

    def test_empty_body_changes_nothing(self, client, worker, application, headers_for):
        response = client.put(
            f"{API}/application/{application.id}", json={}, headers=headers_for(worker)
        )
        assert response.status_code == 200
        assert response.json()["coverLetter"] == "I would love to work on your APIs."

    def test_job_owner_cannot_edit(self, client, company, application, headers_for):
        response = client.put(
            f"{API}/application/{application.id}",
            json={"coverLetter": "Rewritten by company"},
            headers=headers_for(company),
        )
        assert response.status_code == 405


class TestDeleteApplication:
    """Tests for DELETE /application/{application_id}."""

    def test_author_withdraws(self, client, worker, published_job, application, headers_for):
        application_id = application.id
        response = client.delete(
            f"{API}/application/{application_id}", headers=headers_for(worker)
        )
        assert response.status_code == 200
        assert response.json() == {
            "message": "Application deleted",
            "application_id": application_id,
        }
        assert client.get(f"{API}/job/{published_job.id}").json()["appCount"] == 0

    def test_worker_can_reapply_after_withdrawal(
        self, client, worker, published_job, application, headers_for
    ):
        client.delete(f"{API}/application/{application.id}", headers=headers_for(worker))
        response = client.post(
            f"{API}/application",
            json={"jobId": published_job.id, "coverLetter": COVER_LETTER},
            headers=headers_for(worker),
        )
        assert response.status_code == 201

    def test_other_worker_rejected(self, client, other_worker, application, headers_for):
        response = client.delete(
            f"{API}/application/{application.id}", headers=headers_for(other_worker)
        )
        assert response.status_code == 405


class TestOwnApplications:
    """Tests for GET /user/applications."""

    def test_worker_lists_own(
        self, client, worker, other_worker, published_job, application, headers_for
    ):
        response = client.get(f"{API}/user/applications", headers=headers_for(worker))
        assert response.status_code == 200
        entries = response.json()
        assert [entry["application"]["id"] for entry in entries] == [application.id]
        assert entries[0]["job"]["title"] == "Backend Developer"

        response = client.get(f"{API}/user/applications", headers=headers_for(other_worker))
        assert response.json() == []

    def test_company_rejected(self, client, company, headers_for):
        response = client.get(f"{API}/user/applications", headers=headers_for(company))
        assert response.status_code == 405


def walk(client, url, take, headers):
    """Follow the cursor until an empty page, returning every application id seen."""
    seen = []
    cursor = None
    while True:
        params = {"take": take}
        if cursor is not None:
            params["cursor"] = cursor
        response = client.get(url, params=params, headers=headers)
        assert response.status_code == 200
        page = [entry["application"]["id"] for entry in response.json()]
        assert len(page) <= take
        if not page:
            return seen
        seen.extend(page)
        cursor = page[-1]


class TestApplicationPagination:
    """Cursor pagination over application listings."""

    def test_job_applications_visited_once(
        self, client, company, published_job, user_factory, headers_for
    ):
        ids = []
        for index in range(5):
            applicant = user_factory(f"applicant{index}@example.com")
            response = client.post(
                f"{API}/application",
                json={"jobId": published_job.id, "coverLetter": COVER_LETTER},
                headers=headers_for(applicant),
            )
            ids.append(response.json()["id"])

        expected = sorted(ids, reverse=True)
        url = f"{API}/job/{published_job.id}/applications"
        for take in range(1, len(ids) + 2):
            assert walk(client, url, take, headers_for(company)) == expected

    def test_own_applications_visited_once(
        self, client, company, worker, job_factory, headers_for
    ):
        ids = []
        for index in range(5):
            job = job_factory(company, title=f"Job {index}")
            response = client.post(
                f"{API}/application",
                json={"jobId": job.id, "coverLetter": COVER_LETTER},
                headers=headers_for(worker),
            )
            ids.append(response.json()["id"])

        expected = sorted(ids, reverse=True)
        for take in range(1, len(ids) + 2):
            assert walk(client, f"{API}/user/applications", take, headers_for(worker)) == expected
