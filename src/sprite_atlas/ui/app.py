"""Flask-based UI for running an atlas build with live status."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional

from flask import Flask, jsonify, redirect, render_template, request, send_file, url_for

from sprite_atlas.config import load_config
from sprite_atlas.packing import RunControl
from sprite_atlas.pipeline import run_build


@dataclass
class UIState:
    """Shared UI state for progress reporting."""

    running: bool = False
    paused: bool = False
    stopped: bool = False
    message: str = "Idle"
    sprites: int = 0
    best_seed: Optional[int] = None
    best_score: Optional[int] = None
    preview_path: Optional[Path] = None
    log: List[str] = field(default_factory=list)


class BuildWorker:
    """Background worker running the atlas build."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.state = UIState()
        self.control = RunControl()
        self.thread: Optional[threading.Thread] = None

    def start(
        self,
        patterns: List[str],
        output_dir: Path,
        width: int,
        height: int,
        preset: str,
    ) -> bool:
        with self.lock:
            if self.state.running:
                return False
            self.state = UIState(running=True, message="Starting...")
            self.control = RunControl()
            control = self.control

        def _run() -> None:
            try:
                config = replace(
                    load_config(None, preset),
                    sprite_patterns=patterns,
                    width=width,
                    height=height,
                    output=output_dir / "atlas.png",
                    json_output=output_dir / "atlas.json",
                )

                def status_callback(payload: Dict[str, object]) -> None:
                    with self.lock:
                        if "sprites" in payload:
                            self.state.sprites = int(payload["sprites"])  # type: ignore[arg-type]
                        if "best_seed" in payload:
                            self.state.best_seed = int(payload["best_seed"])  # type: ignore[arg-type]
                            self.state.best_score = int(payload["best_score"])  # type: ignore[arg-type]
                        self.state.log.append(str(payload.get("message", "")))
                        self.state.log = self.state.log[-200:]

                result = run_build(config, control=control, status_callback=status_callback, verbose=False)
                with self.lock:
                    self.state.running = False
                    self.state.message = "Completed"
                    self.state.preview_path = Path(str(result["output_image"]))
            except Exception as exc:  # noqa: BLE001
                with self.lock:
                    self.state.running = False
                    self.state.message = f"Error: {exc}"

        self.thread = threading.Thread(target=_run, daemon=True)
        self.thread.start()
        return True

    def pause(self) -> None:
        with self.lock:
            self.state.paused = True
            self.state.message = "Paused"
        self.control.pause()

    def resume(self) -> None:
        with self.lock:
            self.state.paused = False
            self.state.message = "Running"
        self.control.resume()

    def stop(self) -> None:
        with self.lock:
            self.state.stopped = True
            self.state.message = "Stopping..."
        self.control.stop()

    def status(self) -> Dict[str, object]:
        with self.lock:
            return {
                "running": self.state.running,
                "paused": self.state.paused,
                "message": self.state.message,
                "sprites": self.state.sprites,
                "best_seed": self.state.best_seed,
                "best_score": self.state.best_score,
                "log": list(self.state.log),
            }


def create_app(worker: Optional[BuildWorker] = None) -> Flask:
    app = Flask(__name__)
    worker = worker or BuildWorker()
    app.config["BUILD_WORKER"] = worker

    @app.route("/")
    def index() -> str:
        return render_template("index.html")

    @app.route("/start", methods=["POST"])
    def start():
        patterns = [line.strip() for line in request.form.get("patterns", "").splitlines() if line.strip()]
        output_dir = Path(request.form.get("output", "atlas_out")).expanduser()
        width = int(request.form.get("width", 1024))
        height = int(request.form.get("height", 1024))
        preset = request.form.get("preset", "balanced")
        worker.start(patterns, output_dir, width, height, preset)
        return redirect(url_for("index"))

    @app.route("/pause", methods=["POST"])
    def pause():
        worker.pause()
        return redirect(url_for("index"))

    @app.route("/resume", methods=["POST"])
    def resume():
        worker.resume()
        return redirect(url_for("index"))

    @app.route("/stop", methods=["POST"])
    def stop():
        worker.stop()
        return redirect(url_for("index"))

    @app.route("/status")
    def status():
        return jsonify(worker.status())

    @app.route("/preview")
    def preview():
        with worker.lock:
            preview_path = worker.state.preview_path
        if not preview_path or not preview_path.exists():
            return "", 204
        return send_file(preview_path.resolve(), mimetype="image/png")

    return app
