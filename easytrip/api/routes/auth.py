from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from easytrip.accounts.service import create_account_service
from easytrip.core.db import get_db
from easytrip.core.security import Caller, get_current_caller
from easytrip.api.schemas.user import AdminCheckResponse, ProfileUpdate, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/profile", response_model=UserRead)
def get_profile(caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    user = create_account_service(db).get_by_uid(caller.uid)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/profile", response_model=UserRead)
def update_profile(
    body: ProfileUpdate,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    accounts = create_account_service(db)
    user = accounts.get_by_uid(caller.uid)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return accounts.update_profile(user, name=body.name, photo_url=body.photo_url)


@router.get("/check-admin", response_model=AdminCheckResponse)
def check_admin(caller: Caller = Depends(get_current_caller)):
    return AdminCheckResponse(uid=caller.uid, is_admin=caller.is_admin)
