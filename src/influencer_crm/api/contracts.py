"""Contract records, their rendered HTML and signed copies."""

from __future__ import annotations

import asyncio
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse

from influencer_crm.api.deps import contract_store, influencer_store
from influencer_crm.contracts.render import default_variables, render_contract_html
from influencer_crm.domain.models import Contract, ContractCreate, ContractUpdate
from influencer_crm.domain.types import ContractType
from influencer_crm.store.contracts import ContractStore
from influencer_crm.store.influencers import InfluencerStore

logger = structlog.get_logger()

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.get("")
def list_contracts(
    influencer_id: str | None = None, store: ContractStore = Depends(contract_store)
) -> list[Contract]:
    return store.list_contracts(influencer_id)


@router.get("/defaults")
def contract_defaults(
    influencer_id: str,
    contract_type: ContractType = ContractType.PAID_COLLAB,
    influencers: InfluencerStore = Depends(influencer_store),
) -> dict[str, Any]:
    """Starting variables for a new contract with *influencer_id*."""
    return default_variables(contract_type, influencers.get(influencer_id))


@router.post("", status_code=201)
def create_contract(
    payload: ContractCreate,
    store: ContractStore = Depends(contract_store),
    influencers: InfluencerStore = Depends(influencer_store),
) -> Contract:
    """Create a contract; variables left out are filled from the defaults."""
    influencer = influencers.get(payload.influencer_id)
    variables = {**default_variables(payload.contract_type, influencer), **payload.variables}
    contract = store.create(payload.model_copy(update={"variables": variables}))
    logger.info(
        "contract_created",
        contract_id=contract.id,
        influencer_id=influencer.id,
        contract_type=contract.contract_type,
    )
    return contract


@router.patch("/{contract_id}")
def update_contract(
    contract_id: str, payload: ContractUpdate, store: ContractStore = Depends(contract_store)
) -> Contract:
    return store.update(contract_id, payload)


@router.delete("/{contract_id}")
def delete_contract(
    contract_id: str, store: ContractStore = Depends(contract_store)
) -> dict[str, bool]:
    store.delete(contract_id)
    return {"success": True}


@router.get("/{contract_id}/html", response_class=HTMLResponse)
def contract_html(contract_id: str, store: ContractStore = Depends(contract_store)) -> str:
    return render_contract_html(store.get(contract_id))


@router.post("/{contract_id}/signed")
async def upload_signed_contract(
    contract_id: str,
    file: Annotated[UploadFile, File(description="Signed contract PDF")],
    store: ContractStore = Depends(contract_store),
) -> Contract:
    """Attach the countersigned PDF and mark the contract signed."""
    filename = (file.filename or "").lower()
    if file.content_type != "application/pdf" and not filename.endswith(".pdf"):
        raise HTTPException(status_code=415, detail="Signed contracts must be PDFs")

    data = await file.read()
    contract = await asyncio.to_thread(store.attach_signed_pdf, contract_id, data)
    logger.info("contract_signed_copy_uploaded", contract_id=contract_id)
    return contract
