import pytest
import requests

from client.api import ApiError
from client.models import RegistrationForm, TeamRequest, UserType


class TestUniversityDirectory:
    """Test GET /unilist."""

    def test_lists_university_names(self, api, http):
        """Test that the university list is parsed into University models."""
        http.reply("GET", "/unilist", 200, [{"name": "Brown University"}, {"name": "MIT", "_id": "x"}])

        unis = api.list_universities()

        assert [u.name for u in unis] == ["Brown University", "MIT"]

    def test_error_status_raises(self, api, http):
        """Test that a non-2xx answer is an ApiError."""
        http.reply("GET", "/unilist", 500, {"message": "boom"})

        with pytest.raises(ApiError) as err:
            api.list_universities()
        assert err.value.status_code == 500

    def test_connection_error_raises(self, api, http):
        """Test that transport failures are wrapped in ApiError."""
        http.fail("GET", "/unilist", requests.ConnectionError("refused"))

        with pytest.raises(ApiError):
            api.list_universities()


class TestAccounts:
    """Test POST /login and POST /register."""

    def test_login_sends_credentials(self, api, http):
        """Test that login posts email and password only."""
        http.reply("POST", "/login", 200, {"success": True, "token": "t", "userId": "u1", "userName": "Ada"})

        result = api.login("ada@brown.edu", "secret")

        assert http.calls[0]["json"] == {"email": "ada@brown.edu", "password": "secret"}
        assert http.calls[0]["timeout"] == 5
        assert result.success is True
        assert result.token == "t"
        assert result.user_id == "u1"
        assert result.user_name == "Ada"

    def test_login_reads_nested_user(self, api, http):
        """Test that identity inside a `user` object is picked up."""
        http.reply("POST", "/login", 200, {
            "success": True, "token": "t", "user": {"_id": "abc", "name": "Grace"},
        })

        result = api.login("g@brown.edu", "pw")

        assert result.user_id == "abc"
        assert result.user_name == "Grace"

    def test_login_failure_body_parsed_despite_status(self, api, http):
        """Test that a 401 with a JSON body is a business failure, not an ApiError."""
        http.reply("POST", "/login", 401, {"success": False, "message": "Invalid credentials"})

        result = api.login("ada@brown.edu", "wrong")

        assert result.success is False
        assert result.message == "Invalid credentials"

    def test_login_non_json_raises(self, api, http):
        """Test that an HTML error page is an ApiError."""
        http.reply("POST", "/login", 502, "<html>Bad gateway</html>")

        with pytest.raises(ApiError):
            api.login("ada@brown.edu", "pw")

    def test_register_payload_uses_wire_names(self, api, http):
        """Test that the registration body uses the backend's camelCase keys."""
        http.reply("POST", "/register", 201, {"success": True, "message": "ok"})
        form = RegistrationForm(
            name="Ada",
            email="ada@brown.edu",
            password="pw",
            confirm_password="pw",
            user_type=UserType.STUDENT,
            university="Brown University",
        )

        result = api.register(form)

        assert result.success is True
        assert http.calls[0]["json"] == {
            "name": "Ada",
            "email": "ada@brown.edu",
            "password": "pw",
            "confirmPassword": "pw",
            "userType": "Student",
            "university": "Brown University",
        }

    def test_token_sent_as_bearer_header(self, api, http):
        """Test that set_token adds and removes the Authorization header."""
        http.reply("GET", "/team/requests", 200, [])
        http.reply("GET", "/team/requests", 200, [])

        api.set_token("tok-123")
        api.list_requests()
        api.set_token(None)
        api.list_requests()

        assert http.calls[0]["headers"]["Authorization"] == "Bearer tok-123"
        assert "Authorization" not in http.calls[1]["headers"]


class TestTeamRequests:
    """Test the /team/requests collection."""

    def test_list_parses_records(self, api, http, sample_requests):
        """Test that records are parsed with their backend ids."""
        http.reply("GET", "/team/requests", 200, sample_requests)

        records = api.list_requests()

        assert [r.id for r in records] == ["r1", "r2", "r3"]
        assert records[1].project_name == "Beta"
        assert records[1].end_date.isoformat() == "2025-04-15"

    def test_list_tolerates_null_fields_and_numeric_ids(self, api, http):
        """Test that null text fields become empty strings and numeric ids strings."""
        http.reply("GET", "/team/requests", 200, [{"_id": 7, "userId": 3, "projectName": None}])

        (record,) = api.list_requests()

        assert record.id == "7"
        assert record.user_id == "3"
        assert record.project_name == ""

    def test_list_malformed_record_raises(self, api, http):
        """Test that a record without an owner is an ApiError."""
        http.reply("GET", "/team/requests", 200, [{"_id": "r1", "projectName": "x"}])

        with pytest.raises(ApiError):
            api.list_requests()

    def test_create_posts_draft_without_id(self, api, http):
        """Test that a draft is posted without `_id` and the 201 body is returned."""
        draft = TeamRequest(user_id="u1", user_name="Ada", project_name="Alpha")
        http.reply("POST", "/team/requests", 201, {"_id": "new", **draft.to_payload()})

        created = api.create_request(draft)

        assert "_id" not in http.calls[0]["json"]
        assert http.calls[0]["json"]["projectName"] == "Alpha"
        assert created.id == "new"

    def test_create_requires_201(self, api, http):
        """Test that a 200 on create is not treated as an acknowledgment."""
        http.reply("POST", "/team/requests", 200, {"_id": "new", "userId": "u1"})

        with pytest.raises(ApiError) as err:
            api.create_request(TeamRequest(user_id="u1"))
        assert err.value.status_code == 200

    def test_update_puts_to_id_path(self, api, http, sample_requests):
        """Test that update targets /team/requests/<id> with the full record."""
        record = TeamRequest.model_validate(sample_requests[0])
        http.reply("PUT", "/team/requests/r1", 200, {**sample_requests[0], "semester": "Spring"})

        updated = api.update_request(record)

        assert http.calls[0]["json"]["_id"] == "r1"
        assert http.calls[0]["json"]["userId"] == "u1"
        assert updated.semester == "Spring"

    def test_update_without_id_is_rejected(self, api, http):
        """Test that updating a draft never hits the network."""
        with pytest.raises(ValueError):
            api.update_request(TeamRequest(user_id="u1"))
        assert http.calls == []

    def test_delete_expects_200(self, api, http):
        """Test delete success and failure statuses."""
        http.reply("DELETE", "/team/requests/r1", 200, {"message": "deleted"})
        http.reply("DELETE", "/team/requests/r2", 404, {"message": "not found"})

        api.delete_request("r1")
        with pytest.raises(ApiError) as err:
            api.delete_request("r2")
        assert err.value.status_code == 404
