import pytest

from signup_suite.assertions import assert_response_code, assert_response_contains, assert_status_code
from signup_suite.test_data import as_params, random_name, unique_email

pytestmark = pytest.mark.live


@pytest.mark.parametrize("row", as_params("invalid_logins.json"))
def test_invalid_credentials_are_rejected(api_client, row):
    response = api_client.login(row["email"], row["password"])

    assert_status_code(response.status_code, row["expectedStatus"], response.endpoint)
    assert_response_code(response, row["expectedResponseCode"])
    assert_response_contains(response, row["expectedResult"])


def test_login_after_registration(api_client):
    email, password = unique_email(), "Passw0rd!"
    assert_response_code(api_client.register(random_name(), email, password), 201)

    response = api_client.login(email, password)

    assert_response_code(response, 200)
    assert_response_contains(response, "user exists")

    api_client.delete_account(email, password)


@pytest.mark.parametrize("email,password", [
    pytest.param("' OR '1'='1", "' OR '1'='1", id="sql-injection"),
    pytest.param("<script>alert('xss')</script>", "password", id="script-payload"),
    pytest.param("a" * 500 + "@test.com", "P@ssw0rd!" * 100, id="long-values"),
])
def test_hostile_input_never_logs_in(api_client, email, password):
    response = api_client.login(email, password)

    assert 200 <= response.status_code < 500
    assert response.response_code != 200


def test_empty_credentials_are_rejected(api_client):
    response = api_client.login("", "")

    assert_status_code(response.status_code, 200, response.endpoint)
    assert response.response_code in (400, 404)


def test_response_shape_and_latency(api_client):
    response = api_client.login("test@test.com", "password")

    assert_status_code(response.status_code, 200, response.endpoint)
    assert response.payload is not None
    assert set(response.payload) >= {"responseCode", "message"}
    assert response.elapsed_ms < 5000


def test_repeated_failures_answer_consistently(api_client):
    codes = {api_client.login("nonexistent@test.com", "wrongpassword").response_code for _ in range(5)}

    assert codes == {404}
