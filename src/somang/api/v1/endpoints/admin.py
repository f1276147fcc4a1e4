# src/somang/api/v1/endpoints/admin.py
"""Administrator-only endpoints: dashboard and account provisioning."""

import logging

from fastapi import APIRouter, HTTPException, status

from somang.api.v1.dependencies import AdminSessionDep, BackendDep, PostRepositoryDep
from somang.content.site import category_display_name
from somang.core.settings import settings
from somang.repositories.post_repo import RepositoryError
from somang.schemas.user import (
    AdminCreateRequest,
    AdminCreateResponse,
    CategoryCount,
    DashboardResponse,
)
from somang.services.provisioning import (
    AdminProvisioner,
    AllowListInsertError,
    AlreadyRegisteredError,
    PasswordMismatchError,
    PasswordTooShortError,
    ProvisionError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    admin: AdminSessionDep,
    repo: PostRepositoryDep,
) -> DashboardResponse:
    """Return post counts per board for the dashboard."""
    try:
        counts = await repo.count_by_category()
    except RepositoryError as err:
        logger.error("Dashboard counts failed: %s", err)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="게시물 현황을 불러오는 중 오류가 발생했습니다.",
        ) from err

    boards = [
        CategoryCount(
            category=category,
            display_name=category_display_name(category),
            count=count,
        )
        for category, count in counts.items()
    ]
    return DashboardResponse(
        email=admin.email,
        total_posts=sum(counts.values()),
        board_count=len(boards),
        boards=boards,
    )


@router.post(
    "/users",
    response_model=AdminCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_admin(
    payload: AdminCreateRequest,
    admin: AdminSessionDep,
    backend: BackendDep,
) -> AdminCreateResponse:
    """Create a new administrator account."""
    provisioner = AdminProvisioner(backend, access_token=admin.access_token)
    try:
        account = await provisioner.provision_admin(
            payload.email,
            payload.password,
            payload.confirm_password,
        )
    except PasswordMismatchError as err:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="비밀번호가 일치하지 않습니다.",
        ) from err
    except PasswordTooShortError as err:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"비밀번호는 최소 {settings.min_password_length}자 이상이어야 합니다.",
        ) from err
    except AlreadyRegisteredError as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="이미 등록된 이메일입니다.",
        ) from err
    except AllowListInsertError as err:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=(
                "계정은 생성되었지만 관리자 등록에 실패했습니다. "
                f"사용자 ID: {err.user_id}"
            ),
        ) from err
    except ProvisionError as err:
        logger.warning("Provisioning %s failed: %s", payload.email, err)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"계정 생성 중 오류가 발생했습니다: {err}",
        ) from err

    return AdminCreateResponse(user_id=account.user_id, email=account.email)
