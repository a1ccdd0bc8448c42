"""
领域错误类型
用例抛出带状态码的错误，由 API 层统一转换为 HTTP 响应
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    """带 HTTP 状态码和可选机器可读 code 的业务错误"""

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.code = code

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "message": self.message}
        if self.code:
            body["code"] = self.code
        return body


class ValidationFailed(AppError):
    """请求参数校验失败，携带字段级错误"""

    status_code = 400

    def __init__(self, message: str = "Validation failed", errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class Unauthorized(AppError):
    status_code = 401


class Forbidden(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    status_code = 409
