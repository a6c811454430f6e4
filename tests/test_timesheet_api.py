"""HTTP tests for the timesheet router."""


def post_entry(client, **overrides):
    data = {
        "userId": "u1",
        "project": "Apollo",
        "typeOfWork": "Development",
        "description": "API work",
        "hours": 8,
        "assignedDate": "2025-06-03",
    }
    data.update(overrides)
    return client.post("/api/timesheets", json={"data": data})


class TestSubmitEndpoint:
    def test_submit_returns_updated_timesheet(self, client):
        response = post_entry(client, hours=10)
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Timesheet updated"
        sheet = body["timesheet"]
        assert sheet["userId"] == "u1"
        assert sheet["weekStart"] == "2025-06-02"
        assert sheet["weekEnd"] == "2025-06-08"
        assert sheet["totalHours"] == 10
        assert sheet["status"] == "INCOMPLETE"
        assert sheet["entries"][0]["typeOfWork"] == "Development"
        assert sheet["entries"][0]["assignedDate"] == "2025-06-03"

    def test_missing_user_is_a_client_error(self, client):
        response = post_entry(client, userId=None)
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_bad_date_is_a_client_error(self, client):
        response = post_entry(client, assignedDate="not-a-date")
        assert response.status_code == 400

    def test_negative_hours_is_a_client_error(self, client):
        assert post_entry(client, hours=-3).status_code == 400


class TestListWeeksEndpoint:
    def test_full_listing_with_gaps(self, client):
        for hours, day in ((10, "2025-06-02"), (15, "2025-06-04"), (5, "2025-06-06")):
            post_entry(client, hours=hours, assignedDate=day)

        response = client.get(
            "/api/timesheets/with-missing",
            params={"userId": "u1", "from": "2025-06-01", "to": "2025-06-15"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["pagination"] == {"page": 1, "pageSize": 10, "pageCount": 1, "total": 3}
        assert [w["weekStart"] for w in body["data"]] == ["2025-05-26", "2025-06-02", "2025-06-09"]
        assert [w["status"] for w in body["data"]] == ["MISSING", "INCOMPLETE", "MISSING"]
        assert body["data"][0]["id"] == "missing-2025-05-26"
        assert body["data"][0]["entries"] == []
        assert body["data"][1]["totalHours"] == 30
        assert body["data"][1]["week"] == 23

    def test_bracketed_filter_and_pagination_aliases(self, client):
        response = client.get(
            "/api/timesheets/full",
            params={
                "userId": "u1",
                "filters[weekStart][$gte]": "2025-06-02",
                "filters[weekEnd][$lte]": "2025-06-30",
                "pagination[page]": 2,
                "pagination[pageSize]": 1,
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert [w["weekStart"] for w in body["data"]] == ["2025-06-09"]
        assert body["meta"]["pagination"]["pageCount"] == 5

    def test_locale_fallback(self, client):
        post_entry(client, locale="en")
        response = client.get(
            "/api/timesheets/with-missing",
            params={"userId": "u1", "from": "2025-06-02", "to": "2025-06-08", "locale": "ar"},
        )
        assert response.json()["data"][0]["status"] == "INCOMPLETE"

    def test_out_of_range_page_is_empty(self, client):
        response = client.get(
            "/api/timesheets/with-missing",
            params={"userId": "u1", "from": "2025-06-02", "to": "2025-06-08", "page": 5},
        )
        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["meta"]["pagination"]["total"] == 1

    def test_missing_user_is_rejected(self, client):
        response = client.get("/api/timesheets/with-missing", params={"from": "2025-06-01"})
        assert response.status_code == 400

    def test_invalid_page_is_rejected(self, client):
        response = client.get(
            "/api/timesheets/with-missing",
            params={"userId": "u1", "pageSize": -1},
        )
        assert response.status_code == 400

    def test_zero_page_is_rejected_not_defaulted(self, client):
        params = {"userId": "u1", "from": "2025-06-01", "to": "2025-06-15"}
        for extra in ({"page": 0}, {"pageSize": 0}, {"pagination[page]": 0}, {"pagination[pageSize]": 0}):
            response = client.get("/api/timesheets/with-missing", params={**params, **extra})
            assert response.status_code == 400, extra
            assert response.json()["error"] == "ValidationError"


class TestEntryEndpoints:
    def test_edit_then_delete(self, client):
        entry_id = post_entry(client, hours=8).json()["timesheet"]["entries"][0]["id"]

        response = client.patch(f"/api/timesheets/entries/{entry_id}", json={"userId": "u1", "hours": 41})
        assert response.status_code == 200
        assert response.json()["timesheet"]["status"] == "COMPLETED"

        response = client.delete(f"/api/timesheets/entries/{entry_id}", params={"userId": "u1"})
        assert response.status_code == 200
        assert response.json()["timesheet"]["totalHours"] == 0
        assert response.json()["timesheet"]["status"] == "MISSING"

    def test_unknown_entry_is_not_found(self, client):
        response = client.delete("/api/timesheets/entries/999", params={"userId": "u1"})
        assert response.status_code == 404

    def test_get_week(self, client):
        post_entry(client)
        response = client.get("/api/timesheets/week", params={"userId": "u1", "date": "2025-06-08"})
        assert response.status_code == 200
        assert response.json()["timesheet"]["weekStart"] == "2025-06-02"

        response = client.get("/api/timesheets/week", params={"userId": "u1", "date": "2025-07-08"})
        assert response.status_code == 404


class TestServiceEndpoints:
    def test_root_and_health(self, client):
        assert client.get("/").json()["status"] == "running"
        assert client.get("/health").json()["status"] == "healthy"
