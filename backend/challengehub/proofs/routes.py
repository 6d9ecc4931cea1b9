from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from challengehub.auth.schemas import Identity
from challengehub.auth.utils.security import get_current_identity
from challengehub.core.database import get_db
from challengehub.proofs.schemas import DeleteResponse, ProofAccessResponse, SignedUrlResponse
from challengehub.proofs.services import delete_proof, get_proof_access, get_proof_signed_url
from challengehub.storage.s3 import EvidenceStore, get_evidence_store


router = APIRouter(prefix="/proofs", tags=["Proofs"])


@router.get("/{proof_id}/access", response_model=ProofAccessResponse)
def check_proof_access(
    proof_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Whether the caller owns the proof or manages its owner, at any depth."""
    return {"proof_id": proof_id, "granted": get_proof_access(db, identity.user_id, proof_id)}


@router.get("/{proof_id}/signed-url", response_model=SignedUrlResponse)
def get_signed_url(
    proof_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    store: EvidenceStore = Depends(get_evidence_store),
):
    return {"url": get_proof_signed_url(db, store, identity.user_id, proof_id)}


@router.delete("/{proof_id}", response_model=DeleteResponse)
def remove_proof(
    proof_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    store: EvidenceStore = Depends(get_evidence_store),
):
    delete_proof(db, store, identity.user_id, proof_id)
    return {"message": "Proof deleted successfully"}
