import enum


class CampaignStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ActionType(str, enum.Enum):
    VENTE = "vente"
    RECRUTEMENT = "recrutement"
    RESEAUX_SOCIAUX = "reseaux_sociaux"


class BonusType(str, enum.Enum):
    BASKET = "basket"
    SPONSORSHIP = "sponsorship"


class BonusStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ValidationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProofType(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"
