#!/usr/bin/env python3
"""Admin API endpoints for granting and revoking admin rights"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from easytrip.accounts.service import create_account_service
from easytrip.core.db import get_db
from easytrip.core.security import Caller, require_admin
from easytrip.api.schemas.user import AdminGrant, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/admins", response_model=List[UserRead])
def list_admins(db: Session = Depends(get_db), _: Caller = Depends(require_admin)):
    return create_account_service(db).list_admins()


@router.post("/admins", response_model=UserRead, status_code=201)
def add_admin(body: AdminGrant, db: Session = Depends(get_db), caller: Caller = Depends(require_admin)):
    email = body.email.strip()
    if not email:
        raise HTTPException(status_code=400, detail="email is required")
    user = create_account_service(db).set_admin(email, True)
    if not user:
        raise HTTPException(status_code=404, detail=f"No user with email {email}")
    logger.info(f"{caller.uid} granted admin to {user.email}")
    return user


@router.delete("/admins/{email}", response_model=UserRead)
def remove_admin(email: str, db: Session = Depends(get_db), caller: Caller = Depends(require_admin)):
    if caller.email and caller.email.lower() == email.strip().lower():
        raise HTTPException(status_code=400, detail="Admins cannot revoke their own access")
    user = create_account_service(db).set_admin(email, False)
    if not user:
        raise HTTPException(status_code=404, detail=f"No user with email {email}")
    logger.info(f"{caller.uid} revoked admin from {user.email}")
    return user
