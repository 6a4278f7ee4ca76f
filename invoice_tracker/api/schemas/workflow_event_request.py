"""Request schema for automation workflow event envelopes"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class WorkflowEventMetadataSchema(BaseModel):
    """Envelope metadata; unknown keys are kept for the event log"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    scenario_id: Optional[str] = Field(default=None, alias="scenarioId")
    execution_id: Optional[str] = Field(default=None, alias="executionId")
    invoice_number: Optional[str] = None
    pdf_url: Optional[str] = None
    timestamp: Optional[str] = None
    source: Optional[str] = None


class WorkflowEventSchema(BaseModel):
    """
    Request schema for POST /api/webhooks/workflow

    Field names follow the workflow's camelCase envelope.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "eventType": "invoice_processed",
                "payload": {
                    "invoice_number": "INV-2025-001",
                    "client_name": "Acme Corp",
                    "total_due": 2771.17,
                    "invoice_date": "2025-01-15",
                    "due_date": "2025-02-14",
                    "status": "success",
                    "pdf_url": "https://files.example.com/invoices/INV-2025-001.pdf"
                },
                "metadata": {"scenarioId": "42", "executionId": "exec-7"}
            }
        },
    )

    event_type: str = Field(..., alias="eventType", min_length=1, max_length=50)
    payload: Dict[str, Any]
    metadata: Optional[WorkflowEventMetadataSchema] = None

    def metadata_dict(self) -> Optional[Dict[str, Any]]:
        if self.metadata is None:
            return None
        return self.metadata.model_dump(by_alias=True, exclude_none=True)
