from typing import Any, List, Optional

class ResponseModel:
    """Uniform JSON envelope: {success, message?, data?, errors?, count?}."""

    @staticmethod
    def success(data: Any = None, message: Optional[str] = None, count: Optional[int] = None):
        body = {"success": True}
        if message is not None:
            body["message"] = message
        if count is not None:
            body["count"] = count
        body["data"] = data
        return body

    @staticmethod
    def fail(message: str = "error", errors: Optional[List[str]] = None, data: Any = None):
        body = {"success": False, "message": message}
        if errors:
            body["errors"] = errors
        if data is not None:
            body["data"] = data
        return body
