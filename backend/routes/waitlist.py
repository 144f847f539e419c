from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from core.config import get_settings
from core.rate_limit import RateLimiter, get_signup_rate_limiter, source_address
from db.session import get_db
from schemas.waitlist import (
    DailyStatsOut,
    OverallStatsOut,
    TodayStatsOut,
    WaitlistEntryOut,
    WaitlistListResponse,
    WaitlistRequest,
    WaitlistResponse,
    WaitlistStatsData,
    WaitlistStatsResponse,
)
from services.admission import AdmissionPipeline
from services.export import EXPORT_FILENAME, render_waitlist_csv
from services.waitlist_store import WaitlistStore
from services.welcome_email import Notifier, get_notifier
from utils.security import require_admin

router = APIRouter(prefix="/api/waitlist", tags=["waitlist"])


def get_admission_pipeline(
    request: Request,
    db: Session = Depends(get_db),
    rate_limiter: RateLimiter = Depends(get_signup_rate_limiter),
    notifier: Notifier = Depends(get_notifier),
) -> AdmissionPipeline:
    """Build the pipeline and charge this request against the signup limit.

    Dependencies resolve before the request body is validated, so a body the
    schema rejects is still counted.
    """
    pipeline = AdmissionPipeline(
        WaitlistStore(db),
        rate_limiter,
        notifier,
        profile_domains=get_settings().profile_domains,
    )
    pipeline.admit(source_address(request))
    request.state.signup_admitted = True
    return pipeline


def charge_unparsed_signup(request: Request) -> bool:
    """Count a signup rejected before its dependencies ran, e.g. for malformed JSON.

    Returns False when the source address is over its limit.
    """
    if request.method != "POST" or request.url.path != router.prefix:
        return True
    if getattr(request.state, "signup_admitted", False):
        return True
    provider = request.app.dependency_overrides.get(get_signup_rate_limiter, get_signup_rate_limiter)
    return provider().admit(source_address(request))


@router.post("", response_model=WaitlistResponse)
def join_waitlist(
    request: Request,
    payload: WaitlistRequest,
    pipeline: AdmissionPipeline = Depends(get_admission_pipeline),
) -> WaitlistResponse:
    result = pipeline.submit(
        payload.email,
        payload.profile_url,
        payload.willing_to_pay,
        source_address=source_address(request),
        client_agent=request.headers.get("user-agent"),
        display_name=payload.name,
        admitted=True,
    )
    return WaitlistResponse(message=result.message, id=result.id, status=result.status, email_sent=result.email_sent)


@router.get("", response_model=WaitlistListResponse)
def list_waitlist(_admin: str = Depends(require_admin), db: Session = Depends(get_db)) -> WaitlistListResponse:
    entries = WaitlistStore(db).list_all()
    return WaitlistListResponse(
        data=[WaitlistEntryOut.model_validate(entry) for entry in entries],
        total=len(entries),
    )


@router.get("/export")
def export_waitlist(_admin: str = Depends(require_admin), db: Session = Depends(get_db)) -> Response:
    entries = WaitlistStore(db).list_all()
    return Response(
        content=render_waitlist_csv(entries),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.get("/stats", response_model=WaitlistStatsResponse)
def waitlist_stats(_admin: str = Depends(require_admin), db: Session = Depends(get_db)) -> WaitlistStatsResponse:
    stats = WaitlistStore(db).aggregate_by_day(limit=30)
    return WaitlistStatsResponse(
        data=WaitlistStatsData(
            daily_stats=[
                DailyStatsOut(signup_date=day.date, daily_signups=day.count, unique_ips=day.unique_addresses)
                for day in stats.daily
            ],
            overall=OverallStatsOut.model_validate(stats.overall),
            today=TodayStatsOut(today_signups=stats.today_signups),
        )
    )
