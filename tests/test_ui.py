from sprite_atlas.ui import BuildWorker, create_app


def test_status_idle():
    client = create_app(BuildWorker()).test_client()
    response = client.get("/status")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["running"] is False
    assert payload["message"] == "Idle"


def test_index_renders():
    client = create_app(BuildWorker()).test_client()
    response = client.get("/")
    assert response.status_code == 200
    assert b"Sprite Atlas" in response.data


def test_preview_empty_before_build():
    client = create_app(BuildWorker()).test_client()
    assert client.get("/preview").status_code == 204


def test_start_runs_build(sprite_dir, tmp_path):
    worker = BuildWorker()
    client = create_app(worker).test_client()
    response = client.post(
        "/start",
        data={
            "patterns": str(sprite_dir / "*.png"),
            "output": str(tmp_path / "out"),
            "width": "128",
            "height": "128",
            "preset": "fast",
        },
    )
    assert response.status_code == 302
    worker.thread.join(timeout=60)

    payload = client.get("/status").get_json()
    assert payload["message"] == "Completed"
    assert payload["sprites"] == 3
    assert payload["best_seed"] is not None
    assert (tmp_path / "out" / "atlas.json").exists()

    preview = client.get("/preview")
    assert preview.status_code == 200
    assert preview.mimetype == "image/png"


def test_failed_build_reports_error(tmp_path):
    worker = BuildWorker()
    client = create_app(worker).test_client()
    client.post("/start", data={"patterns": str(tmp_path / "*.png"), "output": str(tmp_path / "out")})
    worker.thread.join(timeout=60)
    payload = client.get("/status").get_json()
    assert payload["running"] is False
    assert payload["message"].startswith("Error:")


def test_stop_sets_message():
    worker = BuildWorker()
    client = create_app(worker).test_client()
    client.post("/stop")
    assert worker.control.should_stop()
    assert client.get("/status").get_json()["message"] == "Stopping..."
