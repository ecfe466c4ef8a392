from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..db import ConnectionProvider
from ..domain.contents_codec import deserialize_contents, serialize_contents
from .record_repo import RecordRepository
from .tables import QUIZ


class QuizRepository(RecordRepository):
    """Quiz table access; `contents` is stored as JSON text and decoded on read."""

    def __init__(self, provider: Optional[ConnectionProvider] = None):
        super().__init__(
            QUIZ,
            provider,
            codecs={"contents": (serialize_contents, deserialize_contents)},
        )

    def read_by_category(self, category: str, order_by: Optional[str] = "created_at") -> List[Dict[str, Any]]:
        return self.read_all(order_by=order_by, filters={"category": category})
