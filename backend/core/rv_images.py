import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from core.config import settings

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE = "/placeholder-rv.jpg"


class RVImageIndex:
    """Stock number -> image data, loaded from the image-mapping JSON file."""

    def __init__(self, mapping: Optional[Dict[str, Dict]] = None, path: Optional[str] = None):
        self._mapping = mapping
        self._path = path or settings.rv_image_mapping_path

    @property
    def mapping(self) -> Dict[str, Dict]:
        if self._mapping is None:
            self._mapping = self._load(self._path)
        return self._mapping

    @staticmethod
    def _load(path: str) -> Dict[str, Dict]:
        file_path = Path(path)
        if not file_path.exists():
            logger.warning("RV image mapping not found at %s; images disabled", file_path)
            return {}
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info("Loaded %d RV image entries from %s", len(data), file_path)
        return data

    def get_rv_images(self, stock_number: str) -> Optional[Dict]:
        if not stock_number:
            return None
        mapping = self.mapping

        if stock_number in mapping:
            return mapping[stock_number]

        clean_stock = str(stock_number).strip().upper()
        if clean_stock in mapping:
            return mapping[clean_stock]

        for key, value in mapping.items():
            if str(key).strip().upper() == clean_stock:
                return value
        return None

    def get_primary_image(self, stock_number: str) -> Optional[str]:
        data = self.get_rv_images(stock_number)
        return data.get("primaryImage") if data else None

    def get_all_images(self, stock_number: str) -> List[str]:
        data = self.get_rv_images(stock_number)
        return list(data.get("images") or []) if data else []

    def has_images(self, stock_number: str) -> bool:
        return len(self.get_all_images(stock_number)) > 0

    def get_detail_url(self, stock_number: str) -> Optional[str]:
        data = self.get_rv_images(stock_number)
        return data.get("itemDetailUrl") if data else None


rv_images = RVImageIndex()
