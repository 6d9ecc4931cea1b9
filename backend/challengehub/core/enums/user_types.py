import enum


class UserRole(str, enum.Enum):
    TOP = "top"
    MANAGER = "manager"
    CONTRIBUTOR = "contributor"


# Labels still found in older rows and upstream tokens.
ROLE_ALIASES = {
    "top": UserRole.TOP,
    "marraine": UserRole.TOP,
    "manager": UserRole.MANAGER,
    "contributor": UserRole.CONTRIBUTOR,
    "fbo": UserRole.CONTRIBUTOR,
}


def normalize_role(value) -> UserRole:
    """Map a stored or upstream role label onto UserRole; unknown labels raise ValueError."""
    if isinstance(value, UserRole):
        return value
    try:
        return ROLE_ALIASES[str(value).strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown role: {value!r}") from None
