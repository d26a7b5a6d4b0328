"""Translate service exceptions into HTTP responses"""
import logging
from contextlib import contextmanager

from fastapi import HTTPException
from pydantic import ValidationError as ModelValidationError

from app.services.timer.errors import NotFoundError, TransientRemoteError, ValidationError

logger = logging.getLogger(__name__)


@contextmanager
def service_errors(action: str):
    """
    Map NotFoundError to 404, ValidationError (ours or pydantic's) to 422 and TransientRemoteError
    to 503; anything unexpected is logged and becomes a 500.
    """
    try:
        yield
    except HTTPException:
        raise
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (ValidationError, ModelValidationError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except TransientRemoteError as e:
        logger.warning(f"Failed to {action}: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to {action}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to {action}")
