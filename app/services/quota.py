"""Storage quota ledger: admission control for audio uploads."""

from sqlalchemy.orm import Session

from app.errors import ValidationError
from app.models.user import User


class QuotaLedger:
    """Tracks per-user storage consumption against the user's limit."""

    def has_space(self, user: User, additional_bytes: int) -> bool:
        """Check whether `additional_bytes` more would still fit under the limit."""
        return (user.storage_used or 0) + additional_bytes <= (user.storage_limit or 0)

    def reserve(self, db: Session, user_id: int, num_bytes: int) -> bool:
        """Atomically add `num_bytes` to the user's usage if it fits.

        The check and the increment are one conditional UPDATE, so two
        concurrent reservations cannot both pass the check and overshoot the
        limit. Returns False (and changes nothing) when the bytes do not fit.
        The caller owns the transaction: rolling it back undoes the reservation.
        """
        if num_bytes < 0:
            raise ValidationError({"file_size": ["File size must not be negative."]})

        updated = (
            db.query(User)
            .filter(User.id == user_id, User.storage_used + num_bytes <= User.storage_limit)
            .update({User.storage_used: User.storage_used + num_bytes}, synchronize_session=False)
        )
        if updated:
            # Loaded instances still hold the pre-update value
            user = db.identity_map.get(db.identity_key(User, user_id))
            if user is not None:
                db.expire(user, ["storage_used"])
        return updated == 1


_quota_ledger: QuotaLedger | None = None


def get_quota_ledger() -> QuotaLedger:
    """Get singleton quota ledger instance."""
    global _quota_ledger
    if _quota_ledger is None:
        _quota_ledger = QuotaLedger()
    return _quota_ledger
