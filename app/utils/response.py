from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional

def success(data: Any = None, status_code: int = 200):
    return JSONResponse(status_code=status_code, content={"success": True, "data": data})

def error_body(message: str, details: Any = None, stack: Optional[list] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": message}
    if details is not None:
        body["details"] = details
    if stack is not None:
        body["stack"] = stack
    return body

def error(message: str = "error", status_code: int = 400, details: Any = None, headers: Optional[Dict[str, str]] = None):
    return JSONResponse(status_code=status_code, content=error_body(message, details), headers=headers)
