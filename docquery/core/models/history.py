"""Query history domain models."""
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .document import QueryResponse


@dataclass(frozen=True)
class QueryRecord:
    """A processed query as stored in history."""
    user_id: str
    query: str
    response: QueryResponse
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "query": self.query,
            "response": self.response.answer,
            "sources": [s.to_dict() for s in self.response.sources],
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class QueryHistory:
    """Append-only query log keyed by requester."""
    records: dict[str, list[QueryRecord]] = field(default_factory=dict)

    def add(self, record: QueryRecord) -> None:
        """Append record to the requester's history."""
        self.records.setdefault(record.user_id, []).append(record)

    def get_user_queries(self, user_id: str, page: int = 1, limit: int = 10) -> list[QueryRecord]:
        """Return a page of the requester's queries, newest first."""
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive")

        ordered = sorted(
            self.records.get(user_id, []),
            key=lambda r: r.created_at,
            reverse=True,
        )
        start = (page - 1) * limit
        return ordered[start : start + limit]

    def count(self, user_id: str) -> int:
        return len(self.records.get(user_id, []))
