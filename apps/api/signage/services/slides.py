"""Slide asset service layer."""

from pathlib import Path

from signage.errors import NotFoundError
from signage.repositories.memory import AssetRecord, InMemoryStore, SlideRecord


class SlideAssetService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def get_slide(self, slide_id: str) -> SlideRecord:
        slide = self._store.get_slide(slide_id)
        if slide is None:
            raise NotFoundError(f"Slide '{slide_id}' doesn't exist.")
        return slide

    def get_asset_record(self, slide_id: str, name: str) -> AssetRecord:
        asset = self.get_slide(slide_id).get_uploaded_asset(name)
        if asset is None:
            raise NotFoundError(f"Asset '{name}' doesn't exist.")
        return asset

    def get_asset(self, slide_id: str, name: str) -> AssetRecord:
        asset = self.get_asset_record(slide_id, name)
        if not asset.path.is_file():
            raise NotFoundError(f"Asset '{name}' doesn't exist.")
        return asset

    def get_asset_thumb(self, slide_id: str, name: str) -> Path:
        # The thumbnail is served even if the full-size file is gone.
        asset = self.get_asset_record(slide_id, name)
        thumb_path = asset.thumb_path if asset.has_thumb() else None
        if thumb_path is None:
            raise NotFoundError("Asset doesn't have a thumbnail.")
        return thumb_path
