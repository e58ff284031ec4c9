"""Contract table access and signed-copy storage."""

from __future__ import annotations

import time

from supabase import Client

from influencer_crm.domain.errors import NotFoundError
from influencer_crm.domain.models import Contract, ContractCreate, ContractUpdate
from influencer_crm.domain.types import ContractStatus
from influencer_crm.store.client import rows, utc_now_iso

TABLE = "influencer_contracts"
SIGNED_BUCKET = "contracts"


class ContractStore:
    """Read and write ``influencer_contracts`` rows."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def list_contracts(self, influencer_id: str | None = None) -> list[Contract]:
        """List contracts newest first, optionally for one influencer."""
        query = self._client.table(TABLE).select("*")
        if influencer_id is not None:
            query = query.eq("influencer_id", influencer_id)
        response = query.order("created_at", desc=True).execute()
        return [Contract.model_validate(r) for r in rows(response)]

    def get(self, contract_id: str) -> Contract:
        data = rows(self._client.table(TABLE).select("*").eq("id", contract_id).execute())
        if not data:
            raise NotFoundError("contract", contract_id)
        return Contract.model_validate(data[0])

    def create(self, payload: ContractCreate) -> Contract:
        data = rows(self._client.table(TABLE).insert(payload.model_dump(mode="json")).execute())
        return Contract.model_validate(data[0])

    def update(self, contract_id: str, payload: ContractUpdate) -> Contract:
        changes = payload.model_dump(mode="json", exclude_unset=True)
        if not changes:
            return self.get(contract_id)
        changes["updated_at"] = utc_now_iso()
        data = rows(self._client.table(TABLE).update(changes).eq("id", contract_id).execute())
        if not data:
            raise NotFoundError("contract", contract_id)
        return Contract.model_validate(data[0])

    def delete(self, contract_id: str) -> None:
        data = rows(self._client.table(TABLE).delete().eq("id", contract_id).execute())
        if not data:
            raise NotFoundError("contract", contract_id)

    def attach_signed_pdf(self, contract_id: str, data: bytes) -> Contract:
        """Store a signed PDF copy and mark the contract signed.

        Raises:
            NotFoundError: If no contract has *contract_id*.
        """
        contract = self.get(contract_id)
        path = (
            f"contracts/{contract.influencer_id}/"
            f"{contract_id}_signed_{int(time.time() * 1000)}.pdf"
        )
        bucket = self._client.storage.from_(SIGNED_BUCKET)
        bucket.upload(path, data, {"content-type": "application/pdf", "upsert": "false"})
        changes = {
            "signed_pdf_url": str(bucket.get_public_url(path)),
            "status": str(ContractStatus.SIGNED),
            "updated_at": utc_now_iso(),
        }
        updated = rows(self._client.table(TABLE).update(changes).eq("id", contract_id).execute())
        return Contract.model_validate(updated[0])
