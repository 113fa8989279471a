from studio.user_repo import UserRepo


def test_unknown_route_json_envelope(client):
    r = client.get("/__no_such_route__")
    assert r.status_code == 404
    j = r.get_json()
    assert j["ok"] is False and j["code"] == "not_found"
    assert "error" in j


def test_unhandled_exception_is_generic_500(client, monkeypatch):
    def boom(self):
        raise RuntimeError("secret internals")

    monkeypatch.setattr(UserRepo, "list_trainers", boom)
    r = client.get("/api/trainers")
    assert r.status_code == 500
    j = r.get_json()
    assert j["code"] == "internal"
    assert "secret internals" not in j["error"]
