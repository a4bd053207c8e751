"""
Pure view logic for the leaderboard client.

Nothing in here touches the network: filtering, sorting, ranks, the inline
edit rules and the export formats are all derived from the list of score
dicts the data layer holds.
"""
import csv
import io
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config import limits

_DIGITS = re.compile(r"^\d+$")

BADGES = {1: "gold", 2: "silver", 3: "bronze"}


class EditRejected(Exception):
    """An edit that is refused before any request is sent"""


def filter_and_sort(rows: Iterable[Dict[str, Any]], query: str = "", sort_dir: str = "desc") -> List[Dict[str, Any]]:
    """Filter by case-insensitive name substring, then sort by score.

    Filtering happens first, so the ranks taken from the result describe the
    view the user sees.
    """
    q = (query or "").strip().lower()
    result = [r for r in rows if q in r["name"].lower()] if q else list(rows)
    result.sort(key=lambda r: r["score"], reverse=(sort_dir == "desc"))
    return result


def ranked(rows: Iterable[Dict[str, Any]]) -> List[Tuple[int, Dict[str, Any]]]:
    return [(idx + 1, row) for idx, row in enumerate(rows)]


def rank_badge(rank: int) -> Optional[str]:
    return BADGES.get(rank)


def toggle_sort(sort_dir: str) -> str:
    return "asc" if sort_dir == "desc" else "desc"


def can_submit(name: str, score_text: Any) -> bool:
    n = (name or "").strip()
    s = str(score_text).strip()
    if not n or len(n) > limits.name_max_length:
        return False
    if not _DIGITS.match(s):
        return False
    return limits.score_min <= int(s) <= limits.score_max


def build_update_payload(current: Dict[str, Any], name_text: str, score_text: str) -> Dict[str, Any]:
    """Turn the inline edit inputs into a PATCH body.

    Raises EditRejected when neither input yields a field or when the result
    would not change the record.
    """
    payload: Dict[str, Any] = {}
    n = (name_text or "").strip()
    s = (score_text or "").strip()
    if n:
        payload["name"] = n
    if _DIGITS.match(s):
        payload["score"] = int(s)
    if not payload:
        raise EditRejected("Nothing to update")
    unchanged = (payload.get("name", current.get("name")) == current.get("name")
                 and payload.get("score", current.get("score")) == current.get("score"))
    if unchanged:
        raise EditRejected("No changes")
    return payload


class EditState:
    """Tracks the single row currently in inline edit mode"""

    def __init__(self):
        self.editing_id = None
        self.name = ""
        self.score = ""

    def start(self, row: Dict[str, Any]):
        self.editing_id = row["id"]
        self.name = row["name"]
        self.score = str(row["score"])

    def cancel(self):
        self.editing_id = None
        self.name = ""
        self.score = ""

    @property
    def active(self) -> bool:
        return self.editing_id is not None


def export_csv(rows: Iterable[Dict[str, Any]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["rank", "name", "score"])
    for rank, row in ranked(rows):
        writer.writerow([str(rank), row["name"], str(row["score"])])
    return buf.getvalue().rstrip("\n")


def top_summary(rows: Iterable[Dict[str, Any]], count: int = 3) -> Optional[str]:
    top = list(rows)[:count]
    if not top:
        return None
    lines = [f"Leaderboard Top {count}:"]
    lines.extend(f"{rank}. {row['name']} — {row['score']}" for rank, row in ranked(top))
    return "\n".join(lines)


def format_table(rows: Iterable[Dict[str, Any]]) -> str:
    """Plain-text rendering of a ranked view"""
    lines = []
    for rank, row in ranked(rows):
        badge = rank_badge(rank)
        marker = f" ({badge})" if badge else ""
        lines.append(f"{rank:>3}. {row['name']:<50} {row['score']:>9}{marker}  [{row['id']}]")
    return "\n".join(lines) if lines else "No scores yet."
