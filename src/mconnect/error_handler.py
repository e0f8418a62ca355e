"""Turn propagated data-access failures into caller-facing payloads."""
from typing import Any, Dict
import logging

from mconnect.integrations.errors import DataAccessError, HttpError, NetworkUnavailable, OperationFailed, RequestTimeout

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Something went wrong. Please try again later."


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"error": type(exc).__name__, "context": context or {}}

        if isinstance(exc, OperationFailed):
            logger.warning("Operation failed: %s", exc.message)
            if exc.status is not None:
                metadata["status"] = exc.status
            return {"message": exc.message, "retry": True, "fallback": False, "metadata": metadata}

        if isinstance(exc, (NetworkUnavailable, RequestTimeout)):
            logger.warning("Backend unreachable: %s", exc)
            return {"message": str(exc), "retry": True, "fallback": True, "metadata": metadata}

        if isinstance(exc, HttpError):
            logger.warning("Backend returned HTTP %s", exc.status)
            metadata["status"] = exc.status
            return {
                "message": exc.backend_message or GENERIC_MESSAGE,
                "retry": exc.status >= 500,
                "fallback": True,
                "metadata": metadata,
            }

        if isinstance(exc, DataAccessError):
            logger.warning("Data access failure: %s", exc)
            return {"message": str(exc) or GENERIC_MESSAGE, "retry": False, "fallback": True, "metadata": metadata}

        logger.error("Unhandled exception in data-access layer: %s", exc, exc_info=True)
        metadata["detail"] = str(exc)
        return {"message": GENERIC_MESSAGE, "retry": False, "fallback": True, "metadata": metadata}
