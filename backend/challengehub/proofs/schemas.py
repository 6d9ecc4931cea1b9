from pydantic import BaseModel


class ProofAccessResponse(BaseModel):
    proof_id: int
    granted: bool


class SignedUrlResponse(BaseModel):
    url: str


class DeleteResponse(BaseModel):
    message: str
