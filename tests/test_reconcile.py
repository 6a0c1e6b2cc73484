"""Counter drift detection and reconciliation"""

import run_reconcile


def _force_count(db, mid, value):
    with db.connect() as conn:
        conn.execute("UPDATE marathons SET total_registration_count=? WHERE id=?", (value, mid))
        conn.commit()


def test_no_drift_after_normal_traffic(client, create_marathon, register, services):
    mid = create_marathon(title="City Run")
    rid = register(mid)
    register(mid)
    client.delete(f"/registerMarathon/{rid}")

    assert services["reconcile"].find_drift() == []


def test_reconcile_fixes_drift(client, db, create_marathon, register, services):
    mid = create_marathon(title="City Run")
    empty = create_marathon(title="Trail Run")
    register(mid)
    register(mid)
    _force_count(db, mid, 5)
    _force_count(db, empty, -1)

    drift = services["reconcile"].find_drift()
    assert drift == [
        {"_id": mid, "stored": 5, "actual": 2},
        {"_id": empty, "stored": -1, "actual": 0},
    ]

    assert services["reconcile"].reconcile() == drift
    assert client.get(f"/marathons/{mid}").get_json()["totalRegistrationCount"] == 2
    assert client.get(f"/marathons/{empty}").get_json()["totalRegistrationCount"] == 0
    assert services["reconcile"].reconcile() == []


def test_orphaned_registrations(client, create_marathon, register, services):
    kept = create_marathon(title="City Run")
    dropped = create_marathon(title="Trail Run")
    register(kept)
    orphan = register(dropped, email="runner@example.com")
    stray = register(999)

    client.delete(f"/marathons/{dropped}")

    orphans = services["reconcile"].orphaned_registrations()
    assert [r["_id"] for r in orphans] == [orphan, stray]


def test_cli_dry_run_does_not_write(app, db, create_marathon, register, capsys):
    mid = create_marathon(title="City Run")
    register(mid)
    _force_count(db, mid, 3)

    assert run_reconcile.main(["--db", str(app.config["DB_PATH"]), "--dry-run"]) == 0

    out = capsys.readouterr().out
    assert "1 marathon(s) out of sync" in out
    assert f"marathon {mid}: stored=3 actual=1" in out
    with db.connect() as conn:
        row = conn.execute("SELECT total_registration_count FROM marathons WHERE id=?", (mid,)).fetchone()
    assert row[0] == 3


def test_cli_reconciles(app, client, db, create_marathon, register, capsys):
    mid = create_marathon(title="City Run")
    register(mid)
    register(999)
    _force_count(db, mid, 0)

    assert run_reconcile.main(["--db", str(app.config["DB_PATH"])]) == 0

    out = capsys.readouterr().out
    assert "1 marathon(s) corrected" in out
    assert "1 registration(s) reference deleted marathons" in out
    assert client.get(f"/marathons/{mid}").get_json()["totalRegistrationCount"] == 1
