from sqlalchemy.orm import Session

from challengehub.core.exceptions import NotFoundError, ValidationError
from challengehub.core.logger import logger
from challengehub.hierarchy.access import can_access_proof, ensure_can_access_proof
from challengehub.proofs.models import Proof
from challengehub.storage.s3 import EvidenceStore, EvidenceStoreError


def get_proof(db: Session, proof_id: int) -> Proof:
    proof = db.query(Proof).filter(Proof.id == proof_id).first()
    if not proof:
        raise NotFoundError(f"Proof {proof_id} not found")
    return proof


def get_proof_access(db: Session, candidate_id: int, proof_id: int) -> bool:
    """Grant decision consumed before the evidence store hands out a URL."""
    proof = get_proof(db, proof_id)
    granted = can_access_proof(db, candidate_id, proof)
    logger.info("proof.access_checked", proof_id=proof_id, candidate_id=candidate_id, granted=granted)
    return granted


def get_proof_signed_url(db: Session, store: EvidenceStore, candidate_id: int, proof_id: int) -> str:
    proof = get_proof(db, proof_id)
    ensure_can_access_proof(db, candidate_id, proof)

    key = store.extract_key_from_url(proof.url)
    if not key:
        raise ValidationError("Invalid proof URL")
    try:
        return store.get_signed_url(key, bucket_name=store.extract_bucket_from_url(proof.url))
    except EvidenceStoreError as e:
        logger.error("proof.sign_failed", proof_id=proof_id, error=str(e))
        raise ValidationError("Unable to generate the proof URL") from e


def delete_proof(db: Session, store: EvidenceStore, candidate_id: int, proof_id: int) -> None:
    """Remove the stored file (best effort) and then the proof row."""
    proof = get_proof(db, proof_id)
    ensure_can_access_proof(db, candidate_id, proof)

    key = store.extract_key_from_url(proof.url)
    if key:
        try:
            store.delete_file(key, bucket_name=store.extract_bucket_from_url(proof.url))
        except EvidenceStoreError as e:
            logger.warning("proof.file_delete_failed", proof_id=proof_id, error=str(e))

    db.delete(proof)
    db.commit()
    logger.info("proof.deleted", proof_id=proof_id, by=candidate_id)
