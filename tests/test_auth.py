from conftest import login, signup, unique


def test_signup_redirects_to_login_page(client):
    r = signup(client, unique("m"))
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/")


def test_signup_accepts_form_encoding(client):
    r = client.post(
        "/signup",
        data={"email": "form@example.com", "username": "formy", "name": "Form", "password": "pw1", "role": "user"},
    )
    assert r.status_code == 302
    j = login(client, "formy").get_json()
    assert j["role"] == "member"  # legacy label mapped


def test_duplicate_email_is_400(client):
    signup(client, "first", email="dup@example.com")
    r = signup(client, "second", email="dup@example.com")
    assert r.status_code == 400
    j = r.get_json()
    assert j["ok"] is False and j["code"] == "conflict"
    assert "Email already registered" in j["error"]


def test_duplicate_username_is_400(client):
    signup(client, "samename", email="one@example.com")
    r = signup(client, "samename", email="two@example.com")
    assert r.status_code == 400
    assert r.get_json()["code"] == "conflict"


def test_signup_validation(client):
    r = client.post("/signup", json={"email": "x@example.com", "username": "x"})
    assert r.status_code == 400 and r.get_json()["code"] == "validation_error"
    r = signup(client, "badrole", role="wizard")
    assert r.status_code == 400 and "Role must be one of" in r.get_json()["error"]


def test_login_round_trip_returns_signup_role(client):
    for role, page in (("member", "/user_dashboard.html"), ("trainer", "/trainer_dashboard.html"), ("admin", "/admin_dashboard.html")):
        username = unique(role)
        signup(client, username, role=role)
        r = login(client, username)
        assert r.status_code == 200, r.get_json()
        j = r.get_json()
        assert j["role"] == role
        assert j["redirect"] == page
        if role == "trainer":
            assert isinstance(j["trainerId"], str) and len(j["trainerId"]) == 32
        else:
            assert j["trainerId"] is None


def test_login_sets_httponly_session_cookie(client):
    signup(client, "cookie")
    r = login(client, "cookie")
    set_cookie = r.headers.get("Set-Cookie", "")
    assert "studio_sid=" in set_cookie
    assert "HttpOnly" in set_cookie
    assert "Secure" not in set_cookie  # not production


def test_wrong_password_and_unknown_user_look_the_same(client):
    signup(client, "victim", password="right")
    bad_pw = login(client, "victim", password="wrong")
    no_user = login(client, "ghost", password="whatever")
    assert bad_pw.status_code == no_user.status_code == 401
    assert bad_pw.get_json()["error"] == no_user.get_json()["error"] == "Invalid credentials"


def test_login_requires_both_fields(client):
    r = client.post("/login", json={"username": "someone"})
    assert r.status_code == 400


def test_session_gate_denies_then_permits(client):
    r = client.get("/me")
    assert r.status_code == 401
    assert r.get_json()["code"] == "unauthorized"
    signup(client, "gated", role="trainer")
    login(client, "gated")
    r = client.get("/me")
    assert r.status_code == 200
    j = r.get_json()
    assert j["username"] == "gated" and j["role"] == "trainer"
    assert "password_hash" not in j


def test_gate_is_per_client(client, other_client):
    signup(client, "mine")
    login(client, "mine")
    assert client.get("/me").status_code == 200
    assert other_client.get("/me").status_code == 401


def test_logout_destroys_session(client):
    signup(client, "leaver")
    login(client, "leaver")
    r = client.post("/logout")
    assert r.status_code == 200
    assert r.get_json() == {"success": True, "message": "Logged out successfully"}
    assert client.get("/me").status_code == 401


def test_logout_without_session_still_succeeds(client):
    r = client.post("/logout")
    assert r.status_code == 200
    assert r.get_json() == {"success": True, "message": "No active session"}


def test_logout_store_fault_is_500(client, monkeypatch):
    from studio.app_sessions import SessionManager
    from studio.errors import StorageFault

    def boom(self, token):
        raise StorageFault("db down")

    monkeypatch.setattr(SessionManager, "logout", boom)
    r = client.post("/logout")
    assert r.status_code == 500
    assert r.get_json()["error"] == "Could not log out, please try again"


def test_relogin_replaces_previous_session(client, app):
    signup(client, "twice")
    login(client, "twice")
    first = client.get_cookie("studio_sid").value
    login(client, "twice")
    second = client.get_cookie("studio_sid").value
    assert first != second
    assert app.session_manager.current_user(first) is None
    assert app.session_manager.current_user(second)["username"] == "twice"
