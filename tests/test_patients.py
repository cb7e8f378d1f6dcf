"""
Tests for patient management, scoped to the logged-in clinician
"""

import pytest


class TestPatientCreation:
    """Test cases for registering patients"""

    def test_create_patient_success(self, client, login_as):
        headers = login_as()
        response = client.post("/api/patients/new-patient", headers=headers, json={
            "name": "Alice Johnson",
            "idNumber": "12345678",
            "date_of_birth": "1990-05-21",
            "gender": "Female",
            "contact": "+254712345678",
        })
        assert response.status_code == 201

        data = response.json()
        assert data["message"] == "Patient registered."
        assert data["patient"]["uuid"]
        assert data["patient"]["id_number"] == "12345678"
        assert data["patient"]["date_of_birth"] == "1990-05-21"

    def test_duplicate_id_number_conflicts(self, client, login_as, create_patient):
        headers = login_as()
        patient = create_patient(headers, idNumber="ID-1")

        response = client.post("/api/patients/new-patient", headers=headers, json={
            "name": "Someone Else",
            "idNumber": "ID-1",
            "date_of_birth": "1985-01-01",
            "gender": "Male",
            "contact": "0700000000",
        })
        assert response.status_code == 409

        detail = client.get(f"/api/patients/{patient['uuid']}", headers=headers)
        assert detail.status_code == 200
        assert detail.json()["visits"] == []

    @pytest.mark.parametrize("missing", ["name", "idNumber", "date_of_birth", "gender", "contact"])
    def test_missing_field_rejected(self, client, login_as, missing):
        headers = login_as()
        patient = {
            "name": "Alice Johnson",
            "idNumber": "12345678",
            "date_of_birth": "1990-05-21",
            "gender": "Female",
            "contact": "+254712345678",
        }
        del patient[missing]

        response = client.post("/api/patients/new-patient", headers=headers, json=patient)
        assert response.status_code == 400

        listing = client.get("/api/patients", headers=headers)
        assert listing.json()["total"] == 0

    def test_blank_name_rejected(self, client, login_as):
        headers = login_as()
        response = client.post("/api/patients/new-patient", headers=headers, json={
            "name": "  ",
            "idNumber": "12345678",
            "date_of_birth": "1990-05-21",
            "gender": "Female",
            "contact": "+254712345678",
        })
        assert response.status_code == 400


class TestPatientListing:
    """Pagination and search"""

    def test_pages_are_disjoint_and_ordered(self, client, login_as, create_patient):
        headers = login_as()
        for i in range(5):
            create_patient(headers, name=f"Patient {i}", idNumber=f"ID-{i}")

        full = client.get("/api/patients?page=1&limit=100", headers=headers).json()
        first = client.get("/api/patients?page=1&limit=2", headers=headers).json()
        second = client.get("/api/patients?page=2&limit=2", headers=headers).json()

        assert full["total"] == first["total"] == second["total"] == 5
        assert len(first["items"]) == 2
        assert len(second["items"]) == 2
        assert first["total_pages"] == 3

        first_ids = [p["uuid"] for p in first["items"]]
        second_ids = [p["uuid"] for p in second["items"]]
        assert not set(first_ids) & set(second_ids)
        assert first_ids + second_ids == [p["uuid"] for p in full["items"]][:4]

        # Newest first
        assert [p["name"] for p in full["items"]] == [f"Patient {i}" for i in reversed(range(5))]

    def test_list_item_shape(self, client, login_as, create_patient):
        headers = login_as()
        create_patient(headers)

        item = client.get("/api/patients", headers=headers).json()["items"][0]
        assert item["key"] == item["id"]
        assert item["idNumber"] == "12345678"
        assert set(item) == {"key", "id", "uuid", "name", "idNumber", "gender", "contact"}

    def test_page_past_the_end_is_empty(self, client, login_as, create_patient):
        headers = login_as()
        create_patient(headers)

        data = client.get("/api/patients?page=5&limit=10", headers=headers).json()
        assert data["items"] == []
        assert data["total"] == 1

    @pytest.mark.parametrize("query", ["page=0", "limit=0", "page=-1", "limit=-5", "page=abc"])
    def test_invalid_page_or_limit(self, client, login_as, query):
        headers = login_as()
        response = client.get(f"/api/patients?{query}", headers=headers)
        assert response.status_code == 400

    @pytest.mark.parametrize("query", ["page=100000000000000000000&limit=10", "page=1&limit=100000000000000000000"])
    def test_oversized_page_or_limit_rejected(self, client, login_as, create_patient, query):
        headers = login_as()
        create_patient(headers)

        response = client.get(f"/api/patients?{query}", headers=headers)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_large_limit_within_range_is_accepted(self, client, login_as, create_patient):
        headers = login_as()
        create_patient(headers)

        data = client.get("/api/patients?page=1&limit=1000000", headers=headers).json()
        assert data["total"] == 1
        assert len(data["items"]) == 1

    def test_search_by_name_or_id_number(self, client, login_as, create_patient):
        headers = login_as()
        create_patient(headers, name="Alice Johnson", idNumber="A-100")
        create_patient(headers, name="Bob Mwangi", idNumber="B-200")
        create_patient(headers, name="Carol Wanjiru", idNumber="C-100")

        by_name = client.get("/api/patients?search=alice", headers=headers).json()
        assert [p["name"] for p in by_name["items"]] == ["Alice Johnson"]

        by_id = client.get("/api/patients?search=100", headers=headers).json()
        assert by_id["total"] == 2
        assert {p["name"] for p in by_id["items"]} == {"Alice Johnson", "Carol Wanjiru"}


class TestPatientDetailUpdateDelete:

    def test_detail_includes_visits_latest_first(self, client, login_as, create_patient, create_visit):
        headers = login_as()
        patient = create_patient(headers)
        create_visit(headers, patient["uuid"], date="2025-01-10", diagnosis="Flu")
        create_visit(headers, patient["uuid"], date="2025-03-02", diagnosis="Malaria")

        data = client.get(f"/api/patients/{patient['uuid']}", headers=headers).json()
        assert data["name"] == "Alice Johnson"
        assert [v["diagnosis"] for v in data["visits"]] == ["Malaria", "Flu"]
        assert data["visits"][0]["date"] == "2025-03-02"

    def test_unknown_patient_is_404(self, client, login_as):
        headers = login_as()
        response = client.get("/api/patients/does-not-exist", headers=headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Patient not found"

    def test_update_patient(self, client, login_as, create_patient):
        headers = login_as()
        patient = create_patient(headers)

        response = client.put(f"/api/patients/{patient['uuid']}", headers=headers, json={
            "name": "Alice W. Johnson",
            "gender": "Female",
            "date_of_birth": "1990-06-01",
            "idNumber": "87654321",
            "contact": "+254700000000",
        })
        assert response.status_code == 200
        data = response.json()["patient"]
        assert data["name"] == "Alice W. Johnson"
        assert data["id_number"] == "87654321"
        assert data["date_of_birth"] == "1990-06-01"

    def test_update_clears_omitted_optional_fields(self, client, login_as, create_patient):
        headers = login_as()
        patient = create_patient(headers)

        response = client.put(f"/api/patients/{patient['uuid']}", headers=headers, json={
            "name": "Alice Johnson",
            "gender": "Female",
            "date_of_birth": "1990-05-21",
        })
        assert response.status_code == 200
        assert response.json()["patient"]["id_number"] is None
        assert response.json()["patient"]["contact"] is None

    def test_update_requires_name_gender_dob(self, client, login_as, create_patient):
        headers = login_as()
        patient = create_patient(headers)

        response = client.put(f"/api/patients/{patient['uuid']}", headers=headers, json={"name": "Only Name"})
        assert response.status_code == 400

        unchanged = client.get(f"/api/patients/{patient['uuid']}", headers=headers).json()
        assert unchanged["name"] == "Alice Johnson"

    def test_update_unknown_patient_is_404(self, client, login_as):
        headers = login_as()
        response = client.put("/api/patients/missing", headers=headers, json={
            "name": "Nobody",
            "gender": "Male",
            "date_of_birth": "1990-05-21",
        })
        assert response.status_code == 404

    def test_update_to_taken_id_number_conflicts(self, client, login_as, create_patient):
        headers = login_as()
        create_patient(headers, idNumber="TAKEN")
        other = create_patient(headers, name="Bob", idNumber="FREE")

        response = client.put(f"/api/patients/{other['uuid']}", headers=headers, json={
            "name": "Bob",
            "gender": "Male",
            "date_of_birth": "1980-01-01",
            "idNumber": "TAKEN",
        })
        assert response.status_code == 409

    def test_delete_is_404_on_repeat(self, client, login_as, create_patient):
        headers = login_as()
        patient = create_patient(headers)

        first = client.delete(f"/api/patients/{patient['uuid']}", headers=headers)
        assert first.status_code == 200
        assert first.json()["message"] == "Patient deleted successfully"

        for _ in range(2):
            again = client.delete(f"/api/patients/{patient['uuid']}", headers=headers)
            assert again.status_code == 404

        assert client.get(f"/api/patients/{patient['uuid']}", headers=headers).status_code == 404

    def test_delete_removes_visits(self, client, login_as, create_patient, create_visit):
        headers = login_as()
        patient = create_patient(headers)
        visit = create_visit(headers, patient["uuid"])

        assert client.delete(f"/api/patients/{patient['uuid']}", headers=headers).status_code == 200
        assert client.get(f"/api/visits/{visit['uuid']}", headers=headers).status_code == 404
        assert client.get("/api/visits", headers=headers).json()["total"] == 0


class TestPatientOwnership:
    """Clinicians never see or touch each other's patients"""

    def test_other_clinician_cannot_reach_patient(self, client, login_as, create_patient, create_visit):
        owner = login_as("owner@example.com")
        intruder = login_as("intruder@example.com")
        patient = create_patient(owner)
        create_visit(owner, patient["uuid"])
        path = f"/api/patients/{patient['uuid']}"

        assert client.get(path, headers=intruder).status_code == 404
        assert client.put(path, headers=intruder, json={
            "name": "Hijacked",
            "gender": "Male",
            "date_of_birth": "2000-01-01",
        }).status_code == 404
        assert client.delete(path, headers=intruder).status_code == 404
        assert client.post(f"{path}/visits", headers=intruder, json={
            "date": "2025-02-01",
            "diagnosis": "None",
            "prescribed_medications": "None",
        }).status_code == 404

        listing = client.get("/api/patients", headers=intruder).json()
        assert listing["total"] == 0
        assert listing["items"] == []

        detail = client.get(path, headers=owner).json()
        assert detail["name"] == "Alice Johnson"
        assert len(detail["visits"]) == 1

    def test_lists_are_per_owner(self, client, login_as, create_patient):
        first = login_as("first@example.com")
        second = login_as("second@example.com")
        create_patient(first, name="First's patient", idNumber="F-1")
        create_patient(second, name="Second's patient", idNumber="S-1")

        first_list = client.get("/api/patients", headers=first).json()
        second_list = client.get("/api/patients", headers=second).json()
        assert [p["name"] for p in first_list["items"]] == ["First's patient"]
        assert [p["name"] for p in second_list["items"]] == ["Second's patient"]
