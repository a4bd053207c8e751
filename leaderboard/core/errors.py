from typing import Any, Dict, List, Optional


class LeaderboardError(Exception):
    """Base error carrying the HTTP status it maps to"""
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(LeaderboardError):
    status_code = 400
    message = "Invalid payload"

    def __init__(self, issues: Optional[List[Dict[str, Any]]] = None, message: Optional[str] = None):
        super().__init__(message)
        self.issues = issues or []

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "issues": self.issues}


class BadRequest(LeaderboardError):
    status_code = 400
    message = "Invalid id"


class NotFound(LeaderboardError):
    status_code = 404
    message = "Not found"


class InternalError(LeaderboardError):
    status_code = 500
    message = "Internal Server Error"


def issues_from_pydantic(errors) -> List[Dict[str, Any]]:
    """Flatten pydantic error dicts into {path, message, code} issues"""
    issues = []
    for err in errors:
        path = [p for p in err.get("loc", ()) if p != "body"]
        issues.append({
            "path": path,
            "message": err.get("msg", ""),
            "code": err.get("type", "invalid"),
        })
    return issues
