"""EmailAddress value object for account email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from identity.domain import identity

_FORBIDDEN = (" ", "\t", "\n", ";", ",", "(", ")", '"', ":", "<", ">", "\\")


@identity.value_object
class EmailAddress:
    """A structurally valid email address: one @, a local part, and a dotted domain."""

    address: String(required=True, max_length=254)

    @invariant.post
    def address_is_well_formed(self):
        email = self.address
        invalid = ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if email.count("@") != 1 or any(ch in email for ch in _FORBIDDEN):
            raise invalid

        local_part, domain_part = email.split("@")
        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise invalid
        if "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise invalid
        if ".." in email:
            raise invalid
        if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
            raise invalid


def normalize_email(email):
    """The lower-cased address, validated through EmailAddress."""
    email = (email or "").strip().lower()
    if not email:
        raise ValidationError({"email": ["Email is required"]})
    return EmailAddress(address=email).address
