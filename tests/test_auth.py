"""Cookie token guard on the registration listing"""

import time

import jwt

from config.constants import TOKEN_ALGORITHM, TOKEN_COOKIE_NAME
from webapp.app import create_app


def test_listing_requires_token(client):
    resp = client.get("/registerMarathon?email=runner@example.com")
    assert resp.status_code == 401


def test_listing_other_email_is_forbidden(client, login, create_marathon, register):
    mid = create_marathon(title="City Run")
    register(mid, email="other@example.com")
    login("runner@example.com")

    resp = client.get("/registerMarathon?email=other@example.com")
    assert resp.status_code == 403

    resp = client.get("/registerMarathon?email=nobody@example.com")
    assert resp.status_code == 403


def test_listing_own_registrations(client, login, create_marathon, register):
    mid = create_marathon(title="City Run")
    mine = register(mid, email="runner@example.com", marathonTitle="City Run")
    register(mid, email="other@example.com", marathonTitle="City Run")
    login("runner@example.com")

    with_email = client.get("/registerMarathon?email=runner@example.com")
    without_email = client.get("/registerMarathon")

    assert with_email.status_code == 200
    assert [r["_id"] for r in with_email.get_json()] == [mine]
    assert [r["_id"] for r in without_email.get_json()] == [mine]


def test_search_is_case_insensitive_substring(client, login, create_marathon, register):
    city = create_marathon(title="City Run")
    trail = create_marathon(title="Mountain Trail 50%")
    summer = create_marathon(title="ÉTÉ RUN")
    r_city = register(city, email="runner@example.com", marathonTitle="City Run")
    r_trail = register(trail, email="runner@example.com", marathonTitle="Mountain Trail 50%")
    r_summer = register(summer, email="runner@example.com", marathonTitle="ÉTÉ RUN")
    login("runner@example.com")

    def search(text):
        resp = client.get(
            "/registerMarathon",
            query_string={"email": "runner@example.com", "search": text},
        )
        return [r["_id"] for r in resp.get_json()]

    assert search("cITy") == [r_city]
    assert search("50%") == [r_trail]
    assert search("%") == [r_trail]
    assert search("_") == []
    assert search("été") == [r_summer]
    assert search("Été rUN") == [r_summer]


def test_bad_signature_is_unauthenticated(client):
    token = jwt.encode({"email": "runner@example.com"}, "wrong-secret", algorithm=TOKEN_ALGORITHM)
    client.set_cookie(TOKEN_COOKIE_NAME, token)

    assert client.get("/registerMarathon?email=runner@example.com").status_code == 401


def test_expired_token_is_unauthenticated(app, client):
    token = jwt.encode(
        {"email": "runner@example.com", "exp": int(time.time()) - 60},
        app.config["ACCESS_TOKEN_SECRET"],
        algorithm=TOKEN_ALGORITHM,
    )
    client.set_cookie(TOKEN_COOKIE_NAME, token)

    assert client.get("/registerMarathon?email=runner@example.com").status_code == 401


def test_token_without_email_is_unauthenticated(app, client):
    token = jwt.encode({"sub": "someone"}, app.config["ACCESS_TOKEN_SECRET"], algorithm=TOKEN_ALGORITHM)
    client.set_cookie(TOKEN_COOKIE_NAME, token)

    assert client.get("/registerMarathon").status_code == 401


def test_issued_token_expires_in_ten_hours(app, client):
    before = time.time()
    resp = client.post("/jwt", json={"email": "runner@example.com"})
    assert resp.status_code == 200

    token = client.get_cookie(TOKEN_COOKIE_NAME).value
    claims = jwt.decode(token, app.config["ACCESS_TOKEN_SECRET"], algorithms=[TOKEN_ALGORITHM])
    assert claims["email"] == "runner@example.com"
    assert abs(claims["exp"] - (before + 10 * 3600)) < 60


def test_issue_token_requires_email(client):
    assert client.post("/jwt", json={}).status_code == 400
    assert client.post("/jwt", json={"email": "  "}).status_code == 400
    assert client.post("/jwt", data="x", content_type="application/json").status_code == 400


def test_development_cookie_attributes(client):
    resp = client.post("/jwt", json={"email": "runner@example.com"})

    cookie = resp.headers["Set-Cookie"]
    assert "HttpOnly" in cookie
    assert "SameSite=Strict" in cookie
    assert "; Secure" not in cookie


def test_production_cookie_attributes(tmp_path):
    app = create_app({
        "TESTING": True,
        "DB_PATH": tmp_path / "prod.db",
        "ACCESS_TOKEN_SECRET": "prod-secret",
        "IS_PRODUCTION": True,
    })

    resp = app.test_client().post("/jwt", json={"email": "runner@example.com"})

    cookie = resp.headers["Set-Cookie"]
    assert "HttpOnly" in cookie
    assert "Secure" in cookie
    assert "SameSite=None" in cookie


def test_logout_clears_cookie(client, login):
    login("runner@example.com")
    assert client.get("/registerMarathon").status_code == 200

    resp = client.post("/logout")
    assert resp.status_code == 200
    assert "Max-Age=0" in resp.headers["Set-Cookie"]

    assert client.get("/registerMarathon").status_code == 401
