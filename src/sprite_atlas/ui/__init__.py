"""Web UI for atlas builds."""

from sprite_atlas.ui.app import BuildWorker, create_app

__all__ = ["BuildWorker", "create_app"]
