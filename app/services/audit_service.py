"""
app/services/audit_service.py

Purpose: Audit trail for onboarding mutations
"""

from datetime import datetime
from typing import Any, Dict, Optional

from app.db.mongo import get_audit_logs_collection
from app.core.logging import get_logger
from app.services.user_service import new_id

logger = get_logger(__name__)


async def record_audit(
    action: str,
    entity: str,
    entity_id: str,
    tenant_id: str,
    user_id: str,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    entry = {
        "id": new_id(),
        "action": action,
        "entity": entity,
        "entity_id": entity_id,
        "details": details or {},
        "tenant_id": tenant_id,
        "user_id": user_id,
        "created_at": datetime.utcnow(),
    }
    await get_audit_logs_collection().insert_one(entry)
    logger.debug(f"Audit {action} for {entity} {entity_id}")
    return entry
