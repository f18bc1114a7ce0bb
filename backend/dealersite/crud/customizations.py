from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from dealersite.models.customizations import Customization, CustomizationRevision
from dealersite.models.enums import CustomizationStatusEnum


def get_customization(
    db: Session,
    dealer_id: str,
    status: CustomizationStatusEnum,
    *,
    for_update: bool = False,
) -> Customization | None:
    query = db.query(Customization).filter(
        Customization.dealer_id == dealer_id,
        Customization.status == status.value,
    )
    if for_update:
        query = query.with_for_update()
    return query.first()


def save_draft(
    db: Session,
    dealer_id: str,
    data: dict[str, Any],
    *,
    version: int,
) -> Customization:
    """
    Write `data` as the dealer's DRAFT, creating the row when missing.

    The caller has already merged the edit onto the prior state.
    """
    draft = get_customization(db, dealer_id, CustomizationStatusEnum.DRAFT)
    if draft is None:
        draft = Customization(
            dealer_id=dealer_id,
            status=CustomizationStatusEnum.DRAFT.value,
            version=version,
            data=data,
        )
        db.add(draft)
    else:
        # Assign a fresh dict; JSON columns do not track in-place mutation.
        draft.data = dict(data)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(draft)
    return draft


def reset_draft(db: Session, dealer_id: str) -> Customization | None:
    draft = get_customization(db, dealer_id, CustomizationStatusEnum.DRAFT)
    if draft is None:
        return None
    draft.data = {}
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(draft)
    return draft


def publish_draft(db: Session, dealer_id: str) -> Customization | None:
    """
    Promote the DRAFT to PUBLISHED in a single transaction.

    Returns None when there is no draft. Any failure rolls the whole
    promotion back and re-raises; a concurrent publisher loses on the
    (dealer_id, status) unique constraint.
    """
    try:
        draft = get_customization(db, dealer_id, CustomizationStatusEnum.DRAFT, for_update=True)
        if draft is None:
            db.rollback()
            return None
        data = dict(draft.data or {})
        version = draft.version

        db.query(Customization).filter(
            Customization.dealer_id == dealer_id,
            Customization.status == CustomizationStatusEnum.PUBLISHED.value,
        ).delete(synchronize_session=False)
        db.delete(draft)
        db.flush()

        published = Customization(
            dealer_id=dealer_id,
            status=CustomizationStatusEnum.PUBLISHED.value,
            version=version,
            data=data,
        )
        db.add(published)
        db.add(
            CustomizationRevision(
                dealer_id=dealer_id,
                version=version,
                snapshot=data,
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(published)
    return published


def list_revisions(db: Session, dealer_id: str, *, limit: int = 10) -> list[CustomizationRevision]:
    return (
        db.query(CustomizationRevision)
        .filter(CustomizationRevision.dealer_id == dealer_id)
        .order_by(CustomizationRevision.version.desc(), CustomizationRevision.created_at.desc())
        .limit(limit)
        .all()
    )
