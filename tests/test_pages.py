from conftest import login, signup


def test_root_serves_login_page(client):
    r = client.get("/")
    assert r.status_code == 200
    assert b"<form id=\"login\"" in r.data


def test_static_pages_served_from_root(client):
    assert client.get("/asucces.html").status_code == 200


def test_admin_dashboard_redirects_without_session(client):
    r = client.get("/admin_dashboard")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/login.html")


def test_admin_dashboard_gate_is_role_blind(client):
    # Any logged-in identity passes the single "has a session" predicate
    signup(client, "plainmember", role="member")
    login(client, "plainmember")
    r = client.get("/admin_dashboard")
    assert r.status_code == 200
    assert b"Admin dashboard" in r.data


def test_user_and_trainer_listings(client, trainer):
    signup(client, "listed", role="member")
    users = client.get("/api/users").get_json()
    assert {"listed", trainer["username"]} <= {u["username"] for u in users}
    assert all("password_hash" not in u and "password" not in u for u in users)
    trainers = client.get("/api/trainers").get_json()
    assert trainers == [{"id": trainer["id"], "name": "Tara Trainer"}]
