from typing import List, Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from subnetcheck.config import get_settings
from subnetcheck.exceptions import EmptyInput, InvalidCIDR
from subnetcheck.models import InterfaceRecord, LinkStatus
from subnetcheck.modules.analyzer import analyze
from subnetcheck.modules.ingest import address_text, clean_interface_name, short_node_name

router = APIRouter()

class RecordIn(BaseModel):
    node: str
    interface: str
    status: str = "UP"
    address: Union[str, int]
    prefix_length: int

    def to_record(self) -> InterfaceRecord:
        return InterfaceRecord(
            node=short_node_name(self.node),
            interface=clean_interface_name(self.interface),
            status=LinkStatus.from_text(self.status),
            address=address_text(self.address),
            prefix_length=self.prefix_length,
        )

class AnalyzeRequest(BaseModel):
    records: List[RecordIn] = Field(default_factory=list)
    workers: Optional[int] = Field(default=None, ge=1)
    strict: bool = False

@router.post("/analyze")
def run_analyze(req: AnalyzeRequest):
    settings = get_settings()
    if req.strict:
        settings = settings.model_copy(update={"skip_invalid_records": False})

    try:
        report = analyze([r.to_record() for r in req.records], settings=settings, workers=req.workers)
    except EmptyInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidCIDR as e:
        raise HTTPException(status_code=400, detail=f"Invalid record: {e}")
    return report.to_dict()
