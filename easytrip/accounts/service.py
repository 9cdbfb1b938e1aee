#!/usr/bin/env python3
"""Account service: user mirroring, profile edits and admin grants"""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from easytrip.accounts.models import User

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, db: Session):
        self.db = db

    def get_by_uid(self, uid: str) -> Optional[User]:
        return self.db.query(User).filter(User.firebase_uid == uid).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )

    def ensure_user(self, uid: str, email: Optional[str] = None, name: Optional[str] = None,
                    photo_url: Optional[str] = None) -> User:
        """Return the mirrored user, creating it on first sight"""
        user = self.get_by_uid(uid)
        if user:
            # fill gaps only; profile edits made locally win over token claims
            changed = False
            for attr, value in (("email", email), ("name", name), ("photo_url", photo_url)):
                if value and not getattr(user, attr):
                    setattr(user, attr, value)
                    changed = True
            if changed:
                self.db.commit()
                self.db.refresh(user)
            return user

        user = User(firebase_uid=uid, email=email, name=name, photo_url=photo_url, is_admin=False)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User mirrored: uid={uid}")
        return user

    def update_profile(self, user: User, name: Optional[str] = None,
                       photo_url: Optional[str] = None) -> User:
        if name is not None:
            user.name = name.strip() or None
        if photo_url is not None:
            user.photo_url = photo_url.strip() or None
        self.db.commit()
        self.db.refresh(user)
        return user

    def list_admins(self) -> List[User]:
        return self.db.query(User).filter(User.is_admin.is_(True)).order_by(User.email).all()

    def set_admin(self, email: str, is_admin: bool) -> Optional[User]:
        """Grant or revoke admin by email; None when no such user is known"""
        user = self.get_by_email(email)
        if not user:
            return None
        user.is_admin = is_admin
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Admin flag for {user.email} set to {is_admin}")
        return user


def create_account_service(db: Session) -> AccountService:
    """Factory function to create AccountService instance"""
    return AccountService(db)
